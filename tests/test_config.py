"""Tests for configuration loading."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from thumbhash.config import CONFIG_ENV_VAR, DecodeOptions, Settings, load_settings


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep real config files out of the search path."""
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestLoadSettings:
    """Test settings resolution."""

    def test_defaults_without_file(self) -> None:
        """Test that missing files give default settings."""
        settings = load_settings()
        assert settings == Settings()
        assert settings.decode.base_size == 32
        assert settings.decode.saturation_boost == 1.25
        assert settings.image.max_side == 100
        assert settings.pool.enabled

    def test_file_in_working_directory(self, isolated_config: Path) -> None:
        """Test that thumbhash.toml in the working directory is found."""
        (isolated_config / "thumbhash.toml").write_text("[decode]\nbase_size = 48\n")
        settings = load_settings()
        assert settings.decode.base_size == 48
        assert settings.decode.saturation_boost == 1.25

    def test_file_in_home(self, isolated_config: Path) -> None:
        """Test the home directory fallback."""
        home = isolated_config / "home"
        home.mkdir()
        (home / "thumbhash.toml").write_text("[image]\nmax_side = 64\n")
        assert load_settings().image.max_side == 64

    def test_explicit_path(self, tmp_path: Path) -> None:
        """Test loading an explicitly named file."""
        path = tmp_path / "custom.toml"
        path.write_text(
            "[pool]\nenabled = false\nmax_arenas = 2\ninitial_bytes = 4096\n"
            "max_retained_bytes = 65536\n"
        )
        settings = load_settings(str(path))
        assert not settings.pool.enabled
        assert settings.pool.max_arenas == 2
        assert settings.pool.initial_bytes == 4096
        assert settings.pool.max_retained_bytes == 65536

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the environment variable overrides an explicit path."""
        env_path = tmp_path / "env.toml"
        env_path.write_text("[decode]\nsaturation_boost = 1.0\n")
        explicit = tmp_path / "explicit.toml"
        explicit.write_text("[decode]\nsaturation_boost = 2.0\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(env_path))

        assert load_settings(str(explicit)).decode.saturation_boost == 1.0

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        """Test that a named file that does not exist is an error."""
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_settings(str(tmp_path / "nope.toml"))

    def test_unknown_key(self, tmp_path: Path) -> None:
        """Test that typos in the file are reported."""
        path = tmp_path / "bad.toml"
        path.write_text("[decode]\nbase_sise = 10\n")
        with pytest.raises(ValidationError):
            load_settings(str(path))

    def test_out_of_range(self, tmp_path: Path) -> None:
        """Test that invalid values are reported."""
        path = tmp_path / "bad.toml"
        path.write_text("[decode]\nsaturation_boost = 0\n")
        with pytest.raises(ValidationError):
            load_settings(str(path))


class TestDecodeOptions:
    """Test DecodeOptions validation."""

    def test_defaults(self) -> None:
        """Test default values."""
        options = DecodeOptions()
        assert options.base_size == 32
        assert options.saturation_boost == 1.25

    def test_invalid(self) -> None:
        """Test bounds."""
        with pytest.raises(ValidationError):
            DecodeOptions(base_size=0)
        with pytest.raises(ValidationError):
            DecodeOptions(saturation_boost=0.0)
