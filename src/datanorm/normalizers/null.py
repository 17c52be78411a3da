"""NullNormalizer: maps null-like tokens and NaN to ``None``.

Built-in tokens (trimmed, case-insensitive): ``""``, ``"null"``,
``"undefined"``, ``"na"``, ``"n/a"``, ``"nan"``, ``"none"``, ``"-"``,
``"--"``. ``custom_nulls`` adds to this list.

In strict mode the empty string is declined rather than converted: it is
returned unchanged and is not an error.
"""

from __future__ import annotations

import math
from typing import Any

import numpy as np

from datanorm.config import TYPE_DEFAULTS, NormalizerType, NullConfig
from datanorm.errors import UnrecognizedValueError
from datanorm.normalizers.base import BaseNormalizer, EffectiveConfig

__all__ = ["NullNormalizer", "is_nan"]


def is_nan(value: Any) -> bool:
    """True for float and numpy floating NaN."""
    if isinstance(value, (float, np.floating)):
        return bool(math.isnan(value))
    return False


_BUILTIN: NullConfig = TYPE_DEFAULTS[NormalizerType.NULL]  # type: ignore[assignment]


def _token_set(config: NullConfig) -> frozenset[str]:
    tokens = (*_BUILTIN.custom_nulls, *config.custom_nulls)
    return frozenset(token.strip().lower() for token in tokens)


class NullNormalizer(BaseNormalizer):
    type = NormalizerType.NULL

    def __init__(self, config: Any = None) -> None:
        super().__init__(config)
        self._tokens = _token_set(self.config)  # type: ignore[arg-type]

    def _nulls(self, options: NullConfig) -> frozenset[str]:
        if options == self.config:
            return self._tokens
        return _token_set(options)

    def _should(self, value: Any, key: str | None, effective: EffectiveConfig) -> bool:
        if not self._is_target(key, effective):
            return False
        if value is None or is_nan(value):
            return True
        return self._accepts(value, effective)

    def _accepts(self, value: Any, effective: EffectiveConfig) -> bool:
        if not isinstance(value, str):
            return False
        if value == "" or self._is_strict(effective):
            return True
        return value.strip().lower() in self._nulls(effective.options)  # type: ignore[arg-type]

    def _convert(self, value: Any, effective: EffectiveConfig) -> Any:
        if value is None or is_nan(value):
            return None
        if value == "":
            return "" if self._is_strict(effective) else None
        if value.strip().lower() in self._nulls(effective.options):  # type: ignore[arg-type]
            return None
        msg = f"Value {value!r} is not a recognized null value"
        raise UnrecognizedValueError(msg, value=value)
