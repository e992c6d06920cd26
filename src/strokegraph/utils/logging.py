"""Logging utilities for Strokegraph."""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

import structlog


@dataclass
class AnalysisStats:
    """Statistics from an analysis run."""

    passes_run: list[str] = field(default_factory=list)
    initial_nodes: int = 0
    final_nodes: int = 0
    segments: int = 0
    loops: int = 0
    pruned_segments: int = 0
    error_count: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate analysis duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def nodes_removed(self) -> int:
        """Net number of nodes removed by the reduction passes."""
        return self.initial_nodes - self.final_nodes


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "INFO",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(getattr(logging, console_level.upper()))
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        root_logger.addHandler(console_handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logger = structlog.get_logger("strokegraph")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class AnalysisLogger:
    """Logger for tracking reduction passes and analysis statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger) -> None:
        self._logger = logger
        self._stats = AnalysisStats()

    def log_start(self, width: int, height: int, foreground: int) -> None:
        """Log start of an analysis run."""
        self._stats.start_time = time.time()
        self._logger.debug(
            "Analysis started",
            width=width,
            height=height,
            foreground=foreground,
        )

    def log_graph_built(self, nodes: int) -> None:
        """Log graph construction."""
        self._stats.initial_nodes = nodes
        self._stats.final_nodes = nodes
        self._logger.debug("Graph built", nodes=nodes)

    def log_pass(self, name: str, nodes_before: int, nodes_after: int, segments: int) -> None:
        """Log a completed reduction pass."""
        self._logger.debug(
            "Reduction pass",
            reduction=name,
            nodes_before=nodes_before,
            nodes_after=nodes_after,
            segments=segments,
        )
        self._stats.passes_run.append(name)
        self._stats.final_nodes = nodes_after
        self._stats.segments = segments

    def log_pruned(self, removed: int) -> None:
        """Log noise segments removed from the graph."""
        self._logger.debug("Noise segments pruned", removed=removed)
        self._stats.pruned_segments += removed

    def log_complete(self, segments: int, loops: int) -> None:
        """Log successful analysis."""
        self._stats.end_time = time.time()
        self._stats.segments = segments
        self._stats.loops = loops
        self._logger.info(
            "Analysis complete",
            nodes=self._stats.final_nodes,
            segments=segments,
            loops=loops,
            duration_ms=round(self._stats.duration_seconds * 1000, 2),
        )

    def log_measurement_error(self, measurement: str, error: Exception) -> None:
        """Log a measurement that could not be computed."""
        self._logger.warning(
            "Measurement unavailable",
            measurement=measurement,
            error=str(error),
            error_type=type(error).__name__,
        )
        self._stats.error_count += 1
        self._stats.errors.append((measurement, str(error)))

    @property
    def stats(self) -> AnalysisStats:
        """Get current analysis statistics."""
        return self._stats
