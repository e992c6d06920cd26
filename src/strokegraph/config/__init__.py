"""Configuration management for strokegraph.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- ReductionConfig: Graph reduction thresholds
- LoopConfig: Loop extraction settings
- CurveConfig: Regression and curve sampling settings
- NumericConfig: Newton solver settings
- LoggingConfig: Logging settings
- StrokeGraphSettings: Main application settings
"""

from strokegraph.config.settings import (
    CurveConfig,
    LoggingConfig,
    LoopConfig,
    NumericConfig,
    ReductionConfig,
    StrokeGraphSettings,
    get_default_settings,
)

__all__ = [
    "CurveConfig",
    "LoggingConfig",
    "LoopConfig",
    "NumericConfig",
    "ReductionConfig",
    "StrokeGraphSettings",
    "get_default_settings",
]
