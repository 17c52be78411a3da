"""Tests for NullNormalizer tokens, NaN handling and the strict empty-string case."""

from __future__ import annotations

import numpy as np
import pytest

from datanorm.config import NormalizerConfig, NullConfig
from datanorm.errors import UnrecognizedValueError
from datanorm.normalizers import NullNormalizer


@pytest.fixture
def normalizer() -> NullNormalizer:
    return NullNormalizer()


class TestTokens:
    @pytest.mark.parametrize("text", ["null", "NULL", " None ", "n/a", "N/A", "na", "nan", "undefined", "-", "--"])
    def test_builtin_tokens(self, normalizer: NullNormalizer, text: str) -> None:
        assert normalizer.should_normalize(text) is True
        assert normalizer.normalize(text) is None

    def test_custom_tokens_extend_defaults(self) -> None:
        normalizer = NullNormalizer({"custom_nulls": ["missing"]})
        assert normalizer.normalize("MISSING") is None
        assert normalizer.normalize("null") is None
        assert normalizer.config.custom_nulls[-1] == "missing"  # type: ignore[attr-defined]

    def test_non_token_loose(self, normalizer: NullNormalizer) -> None:
        assert normalizer.should_normalize("hello") is False
        assert normalizer.normalize("hello") == "hello"

    def test_numbers_untouched(self, normalizer: NullNormalizer) -> None:
        assert normalizer.normalize(0) == 0


class TestSpecialValues:
    def test_none(self, normalizer: NullNormalizer) -> None:
        assert normalizer.should_normalize(None) is True
        assert normalizer.normalize(None) is None

    @pytest.mark.parametrize("value", [float("nan"), np.float64("nan")])
    def test_nan(self, normalizer: NullNormalizer, value: float) -> None:
        assert normalizer.should_normalize(value) is True
        assert normalizer.normalize(value) is None


class TestEmptyString:
    def test_loose_converts(self, normalizer: NullNormalizer) -> None:
        assert normalizer.normalize("") is None

    def test_strict_declines_without_error(self) -> None:
        assert NullNormalizer({"mode": "strict"}).normalize("") == ""


class TestResolvedConfigs:
    def test_constructor_keeps_builtin_tokens(self) -> None:
        normalizer = NullNormalizer(NormalizerConfig(null=NullConfig(custom_nulls=("missing",))))
        assert normalizer.normalize("n/a") is None
        assert normalizer.normalize("missing") is None
        assert "n/a" in normalizer.config.custom_nulls  # type: ignore[attr-defined]

    def test_call_config_keeps_builtin_tokens(self, normalizer: NullNormalizer) -> None:
        config = NormalizerConfig(null=NullConfig(custom_nulls=("missing",)))
        assert normalizer.normalize("null", config=config) is None
        assert normalizer.normalize("missing", config=config) is None


class TestStrict:
    def test_unrecognized_raises(self) -> None:
        with pytest.raises(UnrecognizedValueError, match="not a recognized null"):
            NullNormalizer({"strict_mode": True}).normalize("hello")

    def test_tokens_still_convert(self) -> None:
        assert NullNormalizer({"strict_mode": True}).normalize("null") is None
