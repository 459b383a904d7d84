"""Test highlight configuration loading."""

import pytest

from lonelog.config import ColorScheme, LonelogConfig, load_config
from lonelog.exceptions import ConfigError
from lonelog.notation import TokenType


class TestDefaults:
    """Test built-in defaults."""

    def test_default_colors(self):
        """Test the default palette."""
        config = LonelogConfig()

        assert config.enable_editor_highlighting
        assert config.enable_reading_highlighting
        assert config.colors.color_for(TokenType.ACTION) == "#3b82f6"
        assert config.colors.color_for(TokenType.TAG) == "#c2410c"
        assert config.colors.color_for(TokenType.TEXT) is None

    def test_to_dict(self):
        """Test the dictionary form lists every color."""
        data = LonelogConfig().to_dict()

        assert set(data["colors"]) == {
            "action", "question", "dice", "consequence", "result", "tag"
        }


class TestYamlConfig:
    """Test loading from YAML files."""

    def test_load_yaml(self, tmp_path):
        """Test overriding some colors and a toggle."""
        path = tmp_path / "lonelog.yaml"
        path.write_text(
            'enable_reading_highlighting: false\n'
            'colors:\n'
            '  action: "#ABC"\n'
            '  tag: "#112233"\n'
        )

        config = LonelogConfig.from_yaml(path)

        assert not config.enable_reading_highlighting
        assert config.enable_editor_highlighting
        assert config.colors.action == "#aabbcc"
        assert config.colors.tag == "#112233"
        assert config.colors.dice == ColorScheme().dice

    def test_empty_yaml(self, tmp_path):
        """Test that an empty file keeps defaults."""
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert LonelogConfig.from_yaml(path) == LonelogConfig()

    def test_missing_file(self, tmp_path):
        """Test that unreadable files raise ConfigError."""
        with pytest.raises(ConfigError):
            LonelogConfig.from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test that YAML syntax errors raise ConfigError."""
        path = tmp_path / "bad.yaml"
        path.write_text("colors: [unclosed\n")

        with pytest.raises(ConfigError):
            LonelogConfig.from_yaml(path)

    @pytest.mark.parametrize("content", [
        "- a list\n",
        "unknown_key: 1\n",
        "colors:\n  sparkle: '#ffffff'\n",
        "colors:\n  action: blue\n",
        "colors: '#ffffff'\n",
        "enable_editor_highlighting: maybe\n",
    ])
    def test_invalid_values(self, tmp_path, content):
        """Test that bad structure or values raise ConfigError."""
        path = tmp_path / "bad.yaml"
        path.write_text(content)

        with pytest.raises(ConfigError):
            LonelogConfig.from_yaml(path)


class TestEnvironment:
    """Test environment overrides."""

    def test_env_colors_and_toggle(self):
        """Test LONELOG_COLOR_* and LONELOG_HIGHLIGHT."""
        config = LonelogConfig().with_env({
            "LONELOG_COLOR_RESULT": "#000000",
            "LONELOG_HIGHLIGHT": "off",
            "UNRELATED": "x",
        })

        assert config.colors.result == "#000000"
        assert not config.enable_editor_highlighting
        assert not config.enable_reading_highlighting

    def test_env_without_overrides(self):
        """Test that an unrelated environment changes nothing."""
        config = LonelogConfig()

        assert config.with_env({"HOME": "/tmp"}) is config

    def test_load_config_layers(self, tmp_path, monkeypatch):
        """Test that the environment overrides the file."""
        path = tmp_path / "lonelog.yaml"
        path.write_text('colors:\n  dice: "#111111"\n  question: "#222222"\n')
        monkeypatch.setenv("LONELOG_COLOR_DICE", "#333333")

        config = load_config(path)

        assert config.colors.dice == "#333333"
        assert config.colors.question == "#222222"

    def test_bad_env_color(self):
        """Test that invalid env colors raise ConfigError."""
        with pytest.raises(ConfigError):
            LonelogConfig().with_env({"LONELOG_COLOR_TAG": "orange"})
