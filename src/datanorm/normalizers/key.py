"""KeyNormalizer: rewrites mapping keys into a target case style.

Only mappings, lists and tuples are touched by ``normalize``; every other
value is returned as is. A key is kept verbatim when it is empty, is not a
string, equals a literal ``preserve`` entry (case-insensitively) or is
matched by a compiled ``preserve`` pattern.

Each instance keeps its own ``LRUCache`` of ``(key, style) -> converted``
results, so repeated keys across large payloads are converted once. The
cache is guarded by a lock; one instance may serve concurrent calls.

Example::

    normalizer = KeyNormalizer({"style": "camel", "preserve": ["user_id"]})
    normalizer.normalize({"user_name": "john", "user_id": 1})
    # {"userName": "john", "user_id": 1}
"""

from __future__ import annotations

import re
import threading
from collections.abc import Mapping
from typing import Any

from cachetools import LRUCache

from datanorm.config import KeyConfig, NormalizerType
from datanorm.normalizers.base import BaseNormalizer, EffectiveConfig
from datanorm.utils.case import CaseStyle, convert_case, detect_case

__all__ = ["KeyNormalizer"]

# Any separator that camelCase output would remove
_SEPARATOR = re.compile(r"[_.\-/\s]")


class _PreserveRules:
    __slots__ = ("literals", "patterns")

    def __init__(self, config: KeyConfig) -> None:
        self.literals = frozenset(p.lower() for p in config.preserve if isinstance(p, str))
        self.patterns = tuple(p for p in config.preserve if isinstance(p, re.Pattern))

    def matches(self, key: str) -> bool:
        if key.lower() in self.literals:
            return True
        return any(pattern.search(key) for pattern in self.patterns)


class KeyNormalizer(BaseNormalizer):
    """Renames keys to ``config.style``, optionally at every depth.

    Args:
        config:     Constructor configuration (see ``BaseNormalizer``).
        cache_size: Maximum number of cached key conversions.
    """

    type = NormalizerType.KEY

    def __init__(self, config: Any = None, cache_size: int = 1024) -> None:
        super().__init__(config)
        self._rules = _PreserveRules(self.config)  # type: ignore[arg-type]
        self._cache: LRUCache[tuple[str, str], str] = LRUCache(maxsize=cache_size)
        self._lock = threading.Lock()

    @property
    def cache_size(self) -> int:
        """Number of key conversions currently cached."""
        with self._lock:
            return int(self._cache.currsize)

    def _rules_for(self, options: KeyConfig) -> _PreserveRules:
        if options == self.config:
            return self._rules
        return _PreserveRules(options)

    # ------------------------------------------------------------------
    # Single keys
    # ------------------------------------------------------------------

    def is_preserved(self, key: Any, config: Any = None) -> bool:
        """True if ``key`` matches an entry of the ``preserve`` list."""
        if not isinstance(key, str):
            return False
        options: KeyConfig = self.effective_config(config).options  # type: ignore[assignment]
        return self._rules_for(options).matches(key)

    def convert_key(self, key: Any, config: Any = None) -> Any:
        """Return ``key`` in the target style, or unchanged if it is kept verbatim."""
        options: KeyConfig = self.effective_config(config).options  # type: ignore[assignment]
        return self._convert_key(key, options)

    def _convert_key(self, key: Any, options: KeyConfig) -> Any:
        if not isinstance(key, str) or not key:
            return key
        if self._rules_for(options).matches(key):
            return key
        cache_key = (key, str(options.style))
        with self._lock:
            converted = self._cache.get(cache_key)
        if converted is None:
            converted = convert_case(key, options.style)
            with self._lock:
                self._cache[cache_key] = converted
        return converted

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------

    def rename_keys(self, obj: Mapping[Any, Any], config: Any = None) -> dict[Any, Any]:
        """Rename the keys of ``obj`` one level deep; values are not visited.

        When two keys convert to the same name the later one wins.
        """
        options: KeyConfig = self.effective_config(config).options  # type: ignore[assignment]
        return {self._convert_key(k, options): v for k, v in obj.items()}

    def _rename_tree(self, value: Any, options: KeyConfig) -> Any:
        if isinstance(value, list):
            return [self._rename_tree(item, options) for item in value]
        if isinstance(value, tuple):
            return tuple(self._rename_tree(item, options) for item in value)
        if not isinstance(value, Mapping):
            return value
        if not options.recursive:
            return {self._convert_key(k, options): v for k, v in value.items()}
        return {self._convert_key(k, options): self._rename_tree(v, options) for k, v in value.items()}

    # ------------------------------------------------------------------
    # Contract
    # ------------------------------------------------------------------

    def should_normalize(self, value: Any, key: str | None = None, config: Any = None) -> bool:
        """Decide whether ``value`` or, without a container value, ``key`` needs renaming.

        Containers are always eligible. For a bare key the answer depends on
        its shape: under ``camel`` any separator triggers a rename while a
        PascalCase key does not; under ``snake`` and ``kebab`` the detected
        case must differ from the target; for other styles the converted key
        must differ from the original.
        """
        effective = self.effective_config(config)
        if isinstance(value, (Mapping, list, tuple)):
            return True
        if not isinstance(key, str) or not self._is_target(key, effective):
            return False
        options: KeyConfig = effective.options  # type: ignore[assignment]
        if options.preserve:
            return not self._rules_for(options).matches(key)
        if options.style == CaseStyle.CAMEL:
            return bool(_SEPARATOR.search(key))
        if options.style in (CaseStyle.SNAKE, CaseStyle.KEBAB):
            return detect_case(key) != options.style
        return convert_case(key, options.style) != key

    def _should(self, value: Any, key: str | None, effective: EffectiveConfig) -> bool:
        return isinstance(value, (Mapping, list, tuple))

    def _convert(self, value: Any, effective: EffectiveConfig) -> Any:
        return self._rename_tree(value, effective.options)  # type: ignore[arg-type]
