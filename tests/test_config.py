"""Tests for acorn2svg.config YAML configuration."""

from pathlib import Path
from textwrap import dedent

import pytest

from acorn2svg.config import ENV_VAR, Config
from acorn2svg.exceptions import ConfigError


class TestConfigLoad:
    """Tests for locating and reading configuration files."""

    def test_defaults(self, tmp_path: Path, monkeypatch) -> None:
        """Without any file the defaults apply."""
        monkeypatch.delenv(ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        config = Config.load()
        assert config == Config()
        assert config.precision == 4
        assert config.font_faces is True

    def test_explicit_file(self, tmp_path: Path) -> None:
        path = tmp_path / "settings.yaml"
        path.write_text(
            dedent("""
                precision: 2
                embed_images: true
                image_dir: ~/pictures
                log_level: info
            """),
            encoding="utf-8",
        )
        config = Config.load(path)
        assert config.precision == 2
        assert config.embed_images is True
        assert config.image_dir == Path("~/pictures").expanduser()
        assert config.log_level == "INFO"

    def test_environment_variable(self, tmp_path: Path, monkeypatch) -> None:
        path = tmp_path / "env.yaml"
        path.write_text("prune_groups: false\n", encoding="utf-8")
        monkeypatch.setenv(ENV_VAR, str(path))
        assert Config.load().prune_groups is False

    def test_working_directory_file(self, tmp_path: Path, monkeypatch) -> None:
        monkeypatch.delenv(ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        (tmp_path / "acorn2svg.yaml").write_text("layer_ids: true\n", encoding="utf-8")
        assert Config.load().layer_ids is True

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("", encoding="utf-8")
        assert Config.load(path) == Config()

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            Config.load(tmp_path / "nope.yaml")


class TestConfigValidation:
    """Tests for rejecting invalid settings."""

    @pytest.mark.parametrize(
        "text, message",
        [
            ("precision: 0\n", "between 1 and 10"),
            ("precision: high\n", "expected integer"),
            ("precision: true\n", "expected integer"),
            ("embed_images: sometimes\n", "expected boolean"),
            ("log_level: LOUD\n", "log_level"),
            ("colour: red\n", "unknown setting"),
            ("- a\n- b\n", "mapping"),
            ("precision: [1\n", "Invalid YAML"),
        ],
    )
    def test_invalid(self, tmp_path: Path, text: str, message: str) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text(text, encoding="utf-8")
        with pytest.raises(ConfigError, match=message):
            Config.load(path)


class TestConfigMerged:
    """Tests for applying command-line overrides."""

    def test_none_values_ignored(self) -> None:
        base = Config(precision=3)
        assert base.merged(precision=None, embed_images=None) == base

    def test_overrides_applied(self) -> None:
        merged = Config().merged(precision=6, image_dir="out/img", font_faces=False)
        assert merged.precision == 6
        assert merged.image_dir == Path("out/img")
        assert merged.font_faces is False

    def test_overrides_validated(self) -> None:
        with pytest.raises(ConfigError):
            Config().merged(precision=42)
