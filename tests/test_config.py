"""Tests for redminefs.config module."""

import json
from pathlib import Path

import pytest

from redminefs import config
from redminefs.config import Settings, load_settings, parse_settings, settings_path
from redminefs.errors import ConfigError


@pytest.fixture
def config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the settings directory at a temporary folder."""
    monkeypatch.setattr(config, "config_dir", lambda: tmp_path)
    monkeypatch.delenv(config.PROFILE_ENV_VAR, raising=False)
    return tmp_path


def _write(path: Path, data: object) -> None:
    path.write_text(json.dumps(data), encoding="utf-8")


class TestSettingsPath:
    """Tests for settings_path."""

    def test_default_file(self, config_home: Path) -> None:
        """Without a profile the plain settings file is used."""
        assert settings_path() == config_home / "settings.json"

    def test_profile_file(self, config_home: Path) -> None:
        """A profile selects settings.<profile>.json."""
        assert settings_path("work") == config_home / "settings.work.json"


class TestParseSettings:
    """Tests for parse_settings."""

    def test_minimal(self) -> None:
        """endpoint and apikey are enough; the rest has defaults."""
        settings = parse_settings({"endpoint": "https://r", "apikey": "k"})

        assert settings == Settings(endpoint="https://r", apikey="k")
        assert settings.insecure is False
        assert settings.timeout == 30.0

    def test_all_fields(self) -> None:
        """Optional fields are read when present."""
        settings = parse_settings(
            {"endpoint": " https://r ", "apikey": "k", "insecure": True, "timeout": 5}
        )

        assert settings.endpoint == "https://r"
        assert settings.insecure is True
        assert settings.timeout == 5.0

    @pytest.mark.parametrize(
        "data",
        [
            [],
            {"apikey": "k"},
            {"endpoint": "https://r"},
            {"endpoint": "", "apikey": "k"},
            {"endpoint": "https://r", "apikey": 3},
            {"endpoint": "https://r", "apikey": "k", "insecure": "yes"},
            {"endpoint": "https://r", "apikey": "k", "timeout": 0},
            {"endpoint": "https://r", "apikey": "k", "timeout": True},
        ],
    )
    def test_invalid(self, data: object) -> None:
        """Missing or mistyped fields raise ConfigError."""
        with pytest.raises(ConfigError):
            parse_settings(data)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_default_profile(self, config_home: Path) -> None:
        """settings.json is read without a profile."""
        _write(config_home / "settings.json", {"endpoint": "https://a", "apikey": "k"})

        assert load_settings().endpoint == "https://a"

    def test_profile_from_environment(
        self, config_home: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """REDMINEFS_ENV selects the profile file."""
        _write(config_home / "settings.dev.json", {"endpoint": "https://dev", "apikey": "k"})
        monkeypatch.setenv(config.PROFILE_ENV_VAR, "dev")

        assert load_settings().endpoint == "https://dev"

    def test_explicit_path(self, tmp_path: Path) -> None:
        """An explicit path wins over profiles."""
        path = tmp_path / "custom.json"
        _write(path, {"endpoint": "https://c", "apikey": "k"})

        assert load_settings(path=path).endpoint == "https://c"

    def test_missing_file(self, config_home: Path) -> None:
        """A missing file is a ConfigError."""
        with pytest.raises(ConfigError, match="Failed to read"):
            load_settings("absent")

    def test_invalid_json(self, config_home: Path) -> None:
        """Broken JSON is a ConfigError."""
        (config_home / "settings.json").write_text("{broken", encoding="utf-8")

        with pytest.raises(ConfigError, match="Failed to parse"):
            load_settings()
