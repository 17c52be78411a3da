"""Tests for the one-shot ``datanorm.normalize`` entry point and public exports."""

from __future__ import annotations

import pytest

import datanorm
from datanorm import (
    BooleanNormalizer,
    DateNormalizer,
    KeyNormalizer,
    NormalizationEngine,
    NormalizationError,
    Normalizer,
    NormalizerConfig,
    NullNormalizer,
    NumberConfig,
    NumberNormalizer,
    normalize,
)


class TestOneShot:
    def test_no_config_is_identity(self) -> None:
        data = {"price": "10", "flag": "yes"}
        result = normalize(data)
        assert result == data
        assert result is not data

    def test_root_scalar_with_config(self) -> None:
        assert normalize("2023-01-01", {"date": True}) == "2023-01-01T00:00:00.000Z"
        assert normalize("1,000", {"number": True}) == 1000

    def test_root_scalar_without_config(self) -> None:
        assert normalize("2023-01-01") == "2023-01-01"

    def test_mixed_tree(self) -> None:
        data = {
            "user_name": "ada",
            "signup_date": "2023-01-01",
            "visits": ["1", "2,500"],
            "newsletter": "no",
            "referrer": "null",
        }
        config = {"date": True, "number": True, "boolean": True, "null": True, "key": True}
        assert normalize(data, config) == {
            "userName": "ada",
            "signupDate": "2023-01-01T00:00:00.000Z",
            "visits": [1, 2500],
            "newsletter": False,
            "referrer": None,
        }

    def test_resolved_config_accepted(self) -> None:
        config = NormalizerConfig(number=NumberConfig(allow_float=False))
        assert normalize({"p": "9.99"}, config) == {"p": 9}

    def test_strict_failure(self) -> None:
        with pytest.raises(NormalizationError):
            normalize({"n": "twelve"}, {"number": True, "mode": "strict"})

    def test_calls_are_independent(self) -> None:
        assert normalize({"n": "1"}, {"number": True}) == {"n": 1}
        assert normalize({"n": "1"}) == {"n": "1"}

    def test_timestamp_output(self) -> None:
        result = normalize({"at": "2023-01-01"}, {"date": {"output_format": "timestamp"}})
        assert result == {"at": 1672531200000}


class TestExports:
    def test_version(self) -> None:
        assert datanorm.__version__ == "0.1.0"

    @pytest.mark.parametrize(
        "cls",
        [DateNormalizer, NumberNormalizer, BooleanNormalizer, NullNormalizer, KeyNormalizer],
    )
    def test_normalizers_satisfy_protocol(self, cls: type) -> None:
        assert isinstance(cls(), Normalizer)

    def test_engine_normalizers_satisfy_protocol(self) -> None:
        engine = NormalizationEngine({"date": True, "number": True, "boolean": True, "null": True, "key": True})
        assert len(engine.normalizers) == 5
        assert all(isinstance(n, Normalizer) for n in engine.normalizers.values())
