"""Public one-shot API for datanorm.

``normalize`` builds a fresh ``NormalizationEngine`` per call, so no module
level state is shared between calls. Use ``NormalizationEngine`` directly to
amortise setup across many calls with the same configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from datanorm.config import NormalizerConfig
from datanorm.engine import NormalizationEngine

__all__ = ["normalize"]


def normalize(data: Any, config: NormalizerConfig | Mapping[str, Any] | None = None) -> Any:
    """Normalize ``data`` with a throwaway engine.

    ``config`` is applied as call-time configuration, so a bare scalar is
    normalized whenever a configuration is given.

    Args:
        data:   Any nesting of dicts, lists, tuples and scalars.
        config: Configuration mapping or resolved ``NormalizerConfig``. Types
                not mentioned stay disabled.

    Returns:
        The normalized data; see ``NormalizationEngine.normalize``.

    Example::

        normalize({"price": "1,000.50"}, {"number": True})   # {"price": 1000.5}
        normalize("2023-01-01", {"date": True})              # "2023-01-01T00:00:00.000Z"
    """
    return NormalizationEngine().normalize(data, config)
