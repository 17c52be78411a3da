"""BooleanNormalizer: maps truthy/falsy tokens to ``True``/``False``.

Token lists only grow: custom ``truthy_values``/``falsy_values`` are added
to the built-in ``("true", "yes", "1")`` and ``("false", "no", "0")``.
String matching is trimmed and case-insensitive; the empty string is falsy.
"""

from __future__ import annotations

from typing import Any

from datanorm.config import TYPE_DEFAULTS, BooleanConfig, NormalizerType
from datanorm.errors import UnrecognizedValueError
from datanorm.normalizers.base import BaseNormalizer, EffectiveConfig

__all__ = ["BooleanNormalizer"]


_BUILTIN: BooleanConfig = TYPE_DEFAULTS[NormalizerType.BOOLEAN]  # type: ignore[assignment]


class _TokenSets:
    __slots__ = ("falsy", "truthy")

    def __init__(self, config: BooleanConfig) -> None:
        truthy = (True, *_BUILTIN.truthy_values, *config.truthy_values)
        falsy = (False, *_BUILTIN.falsy_values, *config.falsy_values)
        self.truthy = frozenset(_fold(v) for v in truthy)
        self.falsy = frozenset(_fold(v) for v in falsy)


def _fold(value: Any) -> Any:
    if isinstance(value, str):
        return value.strip().lower()
    return value


class BooleanNormalizer(BaseNormalizer):
    """Converts configured tokens to booleans.

    Example::

        normalizer = BooleanNormalizer({"truthy_values": ["on"], "strict_mode": True})
        normalizer.normalize("ON")      # True
        normalizer.normalize("no")      # False
        normalizer.normalize("maybe")   # raises UnrecognizedValueError
    """

    type = NormalizerType.BOOLEAN

    def __init__(self, config: Any = None) -> None:
        super().__init__(config)
        self._tokens = _TokenSets(self.config)  # type: ignore[arg-type]

    def _sets(self, options: BooleanConfig) -> _TokenSets:
        if options == self.config:
            return self._tokens
        return _TokenSets(options)

    def _accepts(self, value: Any, effective: EffectiveConfig) -> bool:
        if isinstance(value, bool):
            return False
        if self._is_strict(effective):
            return True
        if isinstance(value, (dict, list, tuple, set)):
            return False
        tokens = self._sets(effective.options)  # type: ignore[arg-type]
        folded = _fold(value)
        if folded == "":
            return True
        try:
            return folded in tokens.truthy or folded in tokens.falsy
        except TypeError:
            return False

    def _convert(self, value: Any, effective: EffectiveConfig) -> Any:
        tokens = self._sets(effective.options)  # type: ignore[arg-type]
        folded = _fold(value)
        try:
            if folded in tokens.truthy:
                return True
            if folded == "" or folded in tokens.falsy:
                return False
        except TypeError:
            pass
        msg = f"Value {value!r} is not a recognized boolean value"
        raise UnrecognizedValueError(msg, value=value)
