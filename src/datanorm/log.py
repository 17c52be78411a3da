"""Switchable structured logger used by the engine and the normalizers.

Every record goes through ``structlog`` and carries ``library="datanorm"``;
the event text is prefixed with ``[datanorm]``. A disabled logger drops
records without touching structlog at all, so ``logging=False`` costs
nothing on the hot path.
"""

from __future__ import annotations

from typing import Any

import structlog

__all__ = ["LOG_PREFIX", "NormalizerLogger", "get_logger"]

LOG_PREFIX = "[datanorm]"

_LEVELS = ("debug", "info", "warning", "error")


class NormalizerLogger:
    """Leveled logger that is a no-op unless ``enabled``.

    Args:
        enabled: Whether records are forwarded to structlog.
        name:    Logger name passed to ``structlog.get_logger``.
    """

    __slots__ = ("_enabled", "_logger")

    def __init__(self, enabled: bool = False, name: str = "datanorm") -> None:
        self._enabled = enabled
        self._logger = structlog.get_logger(name).bind(library="datanorm")

    @property
    def enabled(self) -> bool:
        return self._enabled

    def log(self, level: str, event: str, **fields: Any) -> None:
        """Emit ``event`` at ``level`` with structured ``fields``."""
        if not self._enabled:
            return
        if level not in _LEVELS:
            msg = f"unknown log level {level!r}"
            raise ValueError(msg)
        getattr(self._logger, level)(f"{LOG_PREFIX} {event}", **fields)

    def debug(self, event: str, **fields: Any) -> None:
        self.log("debug", event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self.log("info", event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self.log("warning", event, **fields)

    warn = warning

    def error(self, event: str, **fields: Any) -> None:
        self.log("error", event, **fields)


def get_logger(enabled: bool = False) -> NormalizerLogger:
    """Return a ``NormalizerLogger`` that forwards only when ``enabled``."""
    return NormalizerLogger(enabled)
