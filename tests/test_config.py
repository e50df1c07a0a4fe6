"""
Tests for configuration loading — wingetkit.yml parsing and validation.
"""

import textwrap
from pathlib import Path

import pytest

from wingetkit.core.config.loader import ConfigError, find_config_file, load_settings


@pytest.fixture
def valid_config_yml(tmp_path: Path) -> Path:
    """Create a valid wingetkit.yml in a temp directory."""
    content = textwrap.dedent("""\
        winget_path: "C:\\\\Tools\\\\winget.exe"
        timeout: 600
        accept_source_agreements: false
        default_source: winget
    """)
    path = tmp_path / "wingetkit.yml"
    path.write_text(content, encoding="utf-8")
    return path


class TestFindConfigFile:
    def test_finds_in_current_dir(self, valid_config_yml: Path):
        assert find_config_file(valid_config_yml.parent) == valid_config_yml

    def test_finds_in_parent(self, valid_config_yml: Path):
        nested = valid_config_yml.parent / "a" / "b"
        nested.mkdir(parents=True)
        assert find_config_file(nested) == valid_config_yml

    def test_not_found(self, tmp_path: Path):
        empty = tmp_path / "empty"
        empty.mkdir()
        # tmp_path lives under the system temp dir, which has no config
        assert find_config_file(empty) is None


class TestLoadSettings:
    def test_load_valid(self, valid_config_yml: Path):
        settings = load_settings(valid_config_yml)
        assert settings.winget_path == "C:\\Tools\\winget.exe"
        assert settings.timeout == 600
        assert settings.accept_source_agreements is False
        assert settings.default_source == "winget"

    def test_defaults_without_file(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        settings = load_settings()
        assert settings.winget_path == "winget"
        assert settings.timeout is None

    def test_auto_detect(self, valid_config_yml: Path, monkeypatch):
        monkeypatch.chdir(valid_config_yml.parent)
        assert load_settings().default_source == "winget"

    def test_empty_file(self, tmp_path: Path):
        path = tmp_path / "wingetkit.yml"
        path.write_text("")
        assert load_settings(path).winget_path == "winget"

    def test_env_overrides_file(self, valid_config_yml: Path, monkeypatch):
        monkeypatch.setenv("WINGETKIT_WINGET", "D:\\winget.exe")
        assert load_settings(valid_config_yml).winget_path == "D:\\winget.exe"

    def test_explicit_path_missing(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path: Path):
        path = tmp_path / "wingetkit.yml"
        path.write_text("timeout: [unclosed\n")
        with pytest.raises(ConfigError, match="Invalid YAML"):
            load_settings(path)

    def test_not_a_mapping(self, tmp_path: Path):
        path = tmp_path / "wingetkit.yml"
        path.write_text("- winget\n- msstore\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_invalid_value(self, tmp_path: Path):
        path = tmp_path / "wingetkit.yml"
        path.write_text("timeout: -5\n")
        with pytest.raises(ConfigError, match="Invalid configuration"):
            load_settings(path)
