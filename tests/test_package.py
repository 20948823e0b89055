"""Tests for tock package exports and metadata."""

import pytest

import tock


class TestPackageMetadata:
    """Package-level exports and metadata."""

    def test_version_string(self) -> None:
        assert isinstance(tock.__version__, str)
        assert "0.1.0" in tock.__version__

    def test_all_exports_resolvable(self) -> None:
        for name in tock.__all__:
            assert getattr(tock, name) is not None

    def test_entry_points_are_callable(self) -> None:
        import tock.export.exporter  # noqa: F401

        assert callable(tock.export_log)
        assert callable(tock.show)
        assert callable(tock.follow)

    def test_invalid_attribute_raises(self) -> None:
        with pytest.raises(AttributeError, match="no attribute"):
            tock.nonexistent_thing  # type: ignore[attr-defined]  # noqa: B018
