"""Utility functions for strokegraph.

This module provides utility functions including:

- Logging setup and configuration
- Analysis statistics tracking
"""

from strokegraph.utils.logging import (
    AnalysisLogger,
    AnalysisStats,
    configure_logging,
)

__all__ = [
    "AnalysisLogger",
    "AnalysisStats",
    "configure_logging",
]
