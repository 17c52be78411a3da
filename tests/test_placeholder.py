"""Placeholder test verifying package import."""


def test_import() -> None:
    """Verify top-level package is importable."""
    import datanorm

    assert datanorm.__version__ is not None
    assert datanorm.__version__ == "0.1.0"


def test_public_names_resolve() -> None:
    """Every name in ``__all__`` is importable from the top-level package."""
    import datanorm

    for name in datanorm.__all__:
        assert hasattr(datanorm, name), name
