"""Tests for config loading and validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from conftest import FIXTURES_DIR
from iconcache.config import load_config
from iconcache.schemas.config import DEFAULT_PRECACHE, IconConfig


class TestIconConfig:
    """Test the IconConfig Pydantic model directly."""

    def test_defaults(self, tmp_path: Path) -> None:
        cfg = IconConfig(data_dir=str(tmp_path))
        assert cfg.fallback_icon == "lucide:help-circle"
        assert cfg.precache == DEFAULT_PRECACHE
        assert cfg.search_limit == 50

    def test_defaults_are_not_shared(self, tmp_path: Path) -> None:
        a = IconConfig(data_dir=str(tmp_path))
        a.precache.append("extra")
        assert IconConfig(data_dir=str(tmp_path)).precache == DEFAULT_PRECACHE

    def test_data_dir_must_exist(self) -> None:
        with pytest.raises(ValidationError, match="does not exist"):
            IconConfig(data_dir="/nonexistent/icons")

    @pytest.mark.parametrize("bad", ["help-circle", "lucide:", "a:b:c"])
    def test_fallback_must_be_identifier(self, tmp_path: Path, bad: str) -> None:
        with pytest.raises(ValidationError, match="collection:name"):
            IconConfig(data_dir=str(tmp_path), fallback_icon=bad)

    def test_search_limit_bounds(self, tmp_path: Path) -> None:
        with pytest.raises(ValidationError):
            IconConfig(data_dir=str(tmp_path), search_limit=0)

    def test_precache_blanks_stripped(self, tmp_path: Path) -> None:
        cfg = IconConfig(data_dir=str(tmp_path), precache=["lucide", "", "  ", " feather "])
        assert cfg.precache == ["lucide", "feather"]


class TestLoadConfig:
    """Test YAML file loading."""

    def test_load_valid_file(self, tmp_config: Path) -> None:
        cfg = load_config(tmp_config)
        assert cfg.data_dir == str(FIXTURES_DIR)
        assert cfg.precache == ["lucide", "simple-icons"]

    def test_file_not_found(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/iconcache.yml")

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.yml"
        bad.write_text("just a string")
        with pytest.raises(ValueError, match="YAML mapping"):
            load_config(bad)

    def test_relative_data_dir_resolved_against_config(self, tmp_path: Path) -> None:
        (tmp_path / "icons").mkdir()
        cfg_file = tmp_path / "iconcache.yml"
        cfg_file.write_text('data_dir: "icons"\n')
        assert load_config(cfg_file).data_dir == str(tmp_path / "icons")

    def test_null_precache_becomes_empty(self, tmp_path: Path) -> None:
        """YAML files with commented-out list items load as None."""
        cfg_file = tmp_path / "iconcache.yml"
        cfg_file.write_text(
            f"""\
data_dir: "{tmp_path}"
precache:
  # - lucide
"""
        )
        assert load_config(cfg_file).precache == []
