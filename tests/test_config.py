"""Tests for application configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from knawledger.config import FILES_PER_THREAD, AppConfig, available_parallelism


class TestAppConfig:
    """Test AppConfig dataclass."""

    def test_default_config(self) -> None:
        config = AppConfig()

        assert config.db_path == Path("data/knawledger.db")
        assert config.roots == []
        assert config.files_per_thread == FILES_PER_THREAD == 128
        assert config.max_threads == available_parallelism()
        assert config.max_threads >= 1

    def test_invalid_thread_settings(self) -> None:
        with pytest.raises(ValueError):
            AppConfig(max_threads=0)
        with pytest.raises(ValueError):
            AppConfig(files_per_thread=0)

    def test_resolve_db_path_absolute(self) -> None:
        config = AppConfig(db_path=Path("/absolute/path/db.db"))

        assert config.resolve_db_path(Path("/base")) == Path("/absolute/path/db.db")

    def test_resolve_db_path_relative_no_base(self) -> None:
        config = AppConfig(db_path=Path("relative/db.db"))

        assert config.resolve_db_path(base_dir=None) == Path("relative/db.db")

    def test_resolve_db_path_relative_with_base(self) -> None:
        config = AppConfig(db_path=Path("relative/db.db"))

        assert config.resolve_db_path(Path("/base")) == Path("/base/relative/db.db")

    def test_resolved_roots_are_canonical_and_unique(self, tmp_path: Path) -> None:
        first = tmp_path / "first"
        second = tmp_path / "second"
        first.mkdir()
        second.mkdir()
        config = AppConfig(roots=[second, first / ".." / "first", first])

        assert config.resolved_roots() == [second.resolve(), first.resolve()]
