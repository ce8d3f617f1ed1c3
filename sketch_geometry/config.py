"""Engine configuration.

The fitting and hit-testing constants are empirical. Changing them changes
visual output, so they live here with their defaults instead of being
scattered through the algorithms.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeometrySettings(BaseSettings):
    """Tunable constants, overridable through ``SKETCH_GEOMETRY_*`` env vars."""

    model_config = SettingsConfigDict(
        env_prefix="SKETCH_GEOMETRY_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Fitting
    fit_handle_scale: float = Field(default=0.2, gt=0)  # Handle length / neighbour distance
    fit_max_handle_ratio: float | None = None  # Optional clamp: handle / adjacent chord
    brush_epsilon_factor: float = Field(default=0.5, ge=0)  # RDP epsilon / stroke width
    insert_handle_factor: float = Field(default=0.25, ge=0)  # New handle / segment chord
    max_stroke_points: int = Field(default=50_000, ge=2)  # Truncate longer freehand input

    # Hit testing and sampling
    hit_tolerance_px: float = Field(default=5.0, ge=0)  # Screen-space click margin
    samples_per_segment: int = Field(default=20, ge=1)
    ellipse_min_samples: int = Field(default=16, ge=4)
    ellipse_max_samples: int = Field(default=256, ge=4)


settings = GeometrySettings()
