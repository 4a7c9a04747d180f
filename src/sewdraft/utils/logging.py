"""Logging utilities for sewdraft."""

import logging
from dataclasses import dataclass, field
from pathlib import Path

import structlog

# Handlers added by configure_logging, replaced on reconfiguration
_installed_handlers: list[logging.Handler] = []


@dataclass
class DraftStats:
    """Statistics from one draft run."""

    parts_drafted: int = 0
    points_created: int = 0
    paths_created: int = 0
    macros_applied: int = 0
    store_writes: int = 0
    errors: list[tuple[str, str]] = field(default_factory=list)
    part_timings_ms: dict[str, float] = field(default_factory=dict)
    start_time: float | None = None
    end_time: float | None = None

    @property
    def duration_seconds(self) -> float:
        """Calculate draft duration."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0

    @property
    def slowest_part(self) -> str | None:
        """Name of the part that took longest, None before any part ran."""
        if not self.part_timings_ms:
            return None
        return max(self.part_timings_ms, key=self.part_timings_ms.__getitem__)


def configure_logging(
    log_file: Path | None = None,
    console_level: str = "WARNING",
    file_level: str = "DEBUG",
    quiet: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure dual-output structured logging.

    Library code never calls this; it only asks structlog for a logger. The
    CLI calls it once at start-up.

    Args:
        log_file: Path to log file (no file output if None)
        console_level: Logging level for console output
        file_level: Logging level for file output
        quiet: If True, suppress console output except errors

    Returns:
        Configured structlog logger
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    for handler in _installed_handlers:
        root_logger.removeHandler(handler)
        handler.close()
    _installed_handlers.clear()

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(getattr(logging, file_level.upper()))
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)-8s | %(name)s | %(message)s")
        )
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(
        logging.ERROR if quiet else getattr(logging, console_level.upper())
    )
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)
    _installed_handlers.append(console_handler)

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

    logger = structlog.get_logger("sewdraft")
    logger.info(
        "Logging initialized",
        log_file=str(log_file) if log_file else None,
        level=file_level,
    )

    return logger


class DraftLogger:
    """Logger for tracking draft progress and statistics."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None) -> None:
        self._logger = logger if logger is not None else structlog.get_logger("sewdraft")
        self._stats = DraftStats()

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        """Underlying structlog logger."""
        return self._logger

    def log_draft_start(self, design: str, version: str, parts: list[str]) -> None:
        """Log start of a draft."""
        self._logger.info("Draft started", design=design, version=version, parts=parts)

    def log_part_start(self, part: str) -> None:
        """Log start of part drafting."""
        self._logger.debug("Drafting part", part=part)

    def log_part_complete(
        self,
        part: str,
        points: int,
        paths: int,
        duration_ms: float,
    ) -> None:
        """Log successful part drafting."""
        self._logger.info(
            "Part drafted",
            part=part,
            points=points,
            paths=paths,
            duration_ms=round(duration_ms, 2),
        )
        self._stats.parts_drafted += 1
        self._stats.points_created += points
        self._stats.paths_created += paths
        self._stats.part_timings_ms[part] = duration_ms

    def log_part_error(
        self,
        part: str,
        error: Exception,
        traceback: str | None = None,
    ) -> None:
        """Log part drafting error."""
        self._logger.error(
            "Part drafting failed",
            part=part,
            error=str(error),
            error_type=type(error).__name__,
            traceback=traceback,
        )
        self._stats.errors.append((part, str(error)))

    def log_store_write(self, part: str | None, key: str, operation: str) -> None:
        """Log a store write."""
        self._logger.debug("Store write", part=part, key=key, operation=operation)
        self._stats.store_writes += 1

    def log_macro_applied(self, part: str, macro: str) -> None:
        """Log a macro invocation."""
        self._logger.debug("Macro applied", part=part, macro=macro)
        self._stats.macros_applied += 1

    @property
    def stats(self) -> DraftStats:
        """Get current draft statistics."""
        return self._stats

    def reset_stats(self) -> DraftStats:
        """Start a fresh set of statistics for a new draft."""
        self._stats = DraftStats()
        return self._stats
