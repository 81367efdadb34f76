"""Runtime configuration for the territory geometry engine."""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from territory_geometry.models import AnchorStrategy


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="TERRITORY_GEOMETRY_", env_file=".env", extra="ignore")

    app_name: str = "territory-geometry"
    log_level: str = "INFO"
    debug: bool = False
    cell_size: int = Field(default=16, ge=1, description="World units along one side of a cell.")
    subdivisions: int = Field(default=4, ge=2, description="Sub-cells per cell side used while tracing.")
    trace_max_points: int = Field(default=10_000, ge=4, description="Safety cap on traced boundary points.")
    simplify_distance: float = Field(default=8.0, ge=0)
    simplify_area: float = Field(default=1.0, ge=0)
    elevation: float = Field(default=70, description="Constant y value for emitted vertices.")
    anchor_strategy: AnchorStrategy = AnchorStrategy.FARTHEST_INTERIOR
    separate_label_overlay: bool = True
    hole_aware_polygons: bool = False

    @model_validator(mode="after")
    def _check_subdivisions(self) -> "Settings":
        if self.cell_size % self.subdivisions:
            raise ValueError(
                f"cell_size {self.cell_size} must be divisible by subdivisions {self.subdivisions}"
            )
        return self


settings = Settings()
