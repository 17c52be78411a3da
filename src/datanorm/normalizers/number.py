"""NumberNormalizer: converts numeric strings such as ``"1,234.56"`` to numbers.

Thousands separators and embedded whitespace are stripped. Text without a
decimal point becomes an ``int``; text with one becomes a ``float`` (or, with
``allow_float=False``, the truncated integer part).
"""

from __future__ import annotations

import re
from typing import Any

from datanorm.config import NormalizerType, NumberConfig
from datanorm.errors import ParseError
from datanorm.normalizers.base import BaseNormalizer, EffectiveConfig

__all__ = ["NumberNormalizer"]

# "1,234", "-1,234.5"
_GROUPED = re.compile(r"^-?\d{1,3}(?:,\d{3})*(?:\.\d+)?$", re.ASCII)

# "1234", "-0.5"
_PLAIN = re.compile(r"^-?\d+(?:\.\d+)?$", re.ASCII)

# Number-ish text that may still fail to parse ("1.2.3", "12 34")
_NUMBERISH = re.compile(r"^-?[\d,.\s]+$", re.ASCII)

_SEPARATORS = re.compile(r"[,\s]+")


def _parse(text: str, allow_float: bool) -> int | float | None:
    cleaned = _SEPARATORS.sub("", text)
    if not _PLAIN.match(cleaned):
        return None
    if not allow_float:
        return int(cleaned.split(".")[0])
    if "." in cleaned:
        return float(cleaned)
    return int(cleaned)


class NumberNormalizer(BaseNormalizer):
    """Parses number-like strings; numbers themselves are left alone."""

    type = NormalizerType.NUMBER

    def _accepts(self, value: Any, effective: EffectiveConfig) -> bool:
        if not isinstance(value, str):
            return False
        if self._is_strict(effective):
            return True
        text = value.strip()
        if not text:
            return False
        return bool(_GROUPED.match(text) or _PLAIN.match(text) or _NUMBERISH.match(text))

    def _convert(self, value: Any, effective: EffectiveConfig) -> Any:
        options: NumberConfig = effective.options  # type: ignore[assignment]
        text = value.strip()
        if not text:
            msg = "Empty string cannot be converted to a number"
            raise ParseError(msg, value=value)
        if not _NUMBERISH.match(text):
            msg = f"Invalid number format: {value!r}"
            raise ParseError(msg, value=value)
        number = _parse(text, options.allow_float)
        if number is None:
            msg = f"Could not parse number from: {value!r}"
            raise ParseError(msg, value=value)
        return number
