"""Normalizer Protocol for datanorm's typed-normalizer extension point.

Defines the structural interface every typed normalizer satisfies. The
engine only relies on this surface, so any class with conformant methods
passes ``isinstance`` checks without inheriting from ``BaseNormalizer``.

Example::

    from datanorm.normalizers import BooleanNormalizer
    from datanorm.protocols import Normalizer

    assert isinstance(BooleanNormalizer(), Normalizer)  # structural conformance
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from datanorm.config import NormalizerType, TypeConfig


@runtime_checkable
class Normalizer(Protocol):
    """Structural protocol for typed normalizers.

    - ``should_normalize`` is the eligibility gate; it never raises.
    - ``normalize`` returns the canonical value, or the input unchanged when
      it is not eligible. Already-canonical values come back unchanged.
    - ``handle_error`` re-raises in strict mode and otherwise logs and
      returns the original value.
    """

    type: NormalizerType
    default_config: TypeConfig
    config: TypeConfig

    def should_normalize(self, value: Any, key: str | None = None, config: Any = None) -> bool: ...

    def normalize(self, value: Any, key: str | None = None, config: Any = None) -> Any: ...

    def handle_error(self, error: Exception, value: Any, key: str | None = None, config: Any = None) -> Any: ...

    def is_strict_mode(self, config: Any = None) -> bool: ...

    def is_target_key(self, key: str | None = None, config: Any = None) -> bool: ...


__all__ = ["Normalizer"]
