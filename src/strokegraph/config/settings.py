"""Configuration settings for Strokegraph."""

from pathlib import Path

from pydantic import BaseModel, Field


class ReductionConfig(BaseModel):
    """Configuration for the graph reduction passes.

    Distances are in pixels. Area fractions are relative to the bounding box
    of the graph's nodes.
    """

    short_connector_length: int = Field(
        default=5,
        ge=1,
        le=100,
        description="Connector segments with a path length below this are merged into one node",
    )
    nearby_end_distance: float = Field(
        default=5.0,
        ge=0.0,
        le=100.0,
        description="Upper bound on the gap bridged between two free ends",
    )
    nearby_end_area_fraction: float = Field(
        default=0.001,
        ge=0.0,
        le=1.0,
        description="Gap bound as a fraction of the bounding-box area",
    )
    prune_noise: bool = Field(
        default=True,
        description="Remove tiny edge and duplicate segments after reduction",
    )
    noise_total_fraction: float = Field(
        default=0.025,
        ge=0.0,
        le=1.0,
        description="Noise segments are shorter than this fraction of the total arc length",
    )
    noise_longest_fraction: float = Field(
        default=0.075,
        ge=0.0,
        le=1.0,
        description="Noise segments are shorter than this fraction of the longest segment",
    )


class LoopConfig(BaseModel):
    """Configuration for loop extraction."""

    max_segments: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Maximum number of segments in a single loop",
    )
    min_area_fraction: float = Field(
        default=0.0002,
        ge=0.0,
        le=1.0,
        description="Loops whose path length is at most this fraction of the bounding-box area are ignored",
    )
    min_length_cap: float = Field(
        default=5.0,
        ge=0.0,
        description="Cap on the minimum significant loop path length",
    )


class CurveConfig(BaseModel):
    """Configuration for regression curves fitted to segments."""

    regression_degree: int = Field(
        default=4,
        ge=0,
        le=12,
        description="Polynomial degree of the per-axis regressions",
    )
    max_regression_degree: int = Field(
        default=8,
        ge=0,
        le=20,
        description="Upper bound when raising the degree to reach a minimum R^2",
    )
    free_end_min_r2: float | None = Field(
        default=0.9,
        ge=0.0,
        le=1.0,
        description="Minimum R^2 of both fits used for the free-end angle (None keeps the base degree)",
    )
    inflection_margin: float = Field(
        default=0.01,
        ge=0.0,
        lt=0.5,
        description="Fraction of the segment ignored at each end when counting inflections",
    )
    curvature_margin: float = Field(
        default=0.1,
        ge=0.0,
        lt=0.5,
        description="Fraction of the segment ignored at each end when sampling curvature",
    )
    angle_margin: float = Field(
        default=0.05,
        ge=0.0,
        lt=0.5,
        description="Position (fraction of length) at which start and end angles are taken",
    )
    samples_per_unit: int = Field(
        default=2,
        ge=1,
        le=100,
        description="Curvature samples per pixel of arc length",
    )


class NumericConfig(BaseModel):
    """Configuration for iterative numeric solvers."""

    max_error: float = Field(
        default=1e-9,
        ge=0.0,
        description="Convergence tolerance for Newton's method",
    )
    max_iterations: int = Field(
        default=1000,
        ge=1,
        description="Iteration limit for Newton's method",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    log_file: Path | None = Field(
        default=None,
        description="Path to log file",
    )
    log_level: str = Field(
        default="WARNING",
        description="Console log level",
    )
    file_log_level: str = Field(
        default="DEBUG",
        description="File log level (more verbose)",
    )


class StrokeGraphSettings(BaseModel):
    """Main application settings."""

    reduction: ReductionConfig = Field(default_factory=ReductionConfig)
    loops: LoopConfig = Field(default_factory=LoopConfig)
    curves: CurveConfig = Field(default_factory=CurveConfig)
    numeric: NumericConfig = Field(default_factory=NumericConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_default_settings() -> StrokeGraphSettings:
    """Get default application settings."""
    return StrokeGraphSettings()
