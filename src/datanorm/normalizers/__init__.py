"""Typed normalizers for datanorm.

Each normalizer handles one value family and is usable on its own or
through ``NormalizationEngine``. ``NORMALIZER_CLASSES`` maps every
``NormalizerType`` to its implementation.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from datanorm.config import NormalizerType
from datanorm.normalizers.base import BaseNormalizer, EffectiveConfig
from datanorm.normalizers.boolean import BooleanNormalizer
from datanorm.normalizers.date import DateNormalizer
from datanorm.normalizers.key import KeyNormalizer
from datanorm.normalizers.null import NullNormalizer
from datanorm.normalizers.number import NumberNormalizer

NORMALIZER_CLASSES: Mapping[NormalizerType, type[BaseNormalizer]] = MappingProxyType(
    {
        NormalizerType.DATE: DateNormalizer,
        NormalizerType.NUMBER: NumberNormalizer,
        NormalizerType.BOOLEAN: BooleanNormalizer,
        NormalizerType.NULL: NullNormalizer,
        NormalizerType.KEY: KeyNormalizer,
    }
)

__all__ = [
    "NORMALIZER_CLASSES",
    "BaseNormalizer",
    "BooleanNormalizer",
    "DateNormalizer",
    "EffectiveConfig",
    "KeyNormalizer",
    "NullNormalizer",
    "NumberNormalizer",
]
