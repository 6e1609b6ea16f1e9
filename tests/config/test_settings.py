"""Tests for settings models and the settings loader."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from anibridge.config import Settings
from anibridge.config.loader import SettingsLoader, load_settings
from anibridge.shared.errors import ApplicationError, ErrorCode


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run each test from an empty directory with an empty home."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    return tmp_path


class TestSettingsDefaults:
    """Test cases for default values."""

    def test_defaults(self) -> None:
        settings = Settings()

        assert settings.api.catalog.timeout == 10.0
        assert settings.retry.max_attempts == 5
        assert settings.retry.base_delay == 2.0
        assert settings.cache.enabled is True
        assert settings.logging.level == "INFO"

    def test_log_level_is_normalized(self) -> None:
        assert Settings(logging={"level": "debug"}).logging.level == "DEBUG"

    def test_invalid_log_level(self) -> None:
        with pytest.raises(ValidationError):
            Settings(logging={"level": "LOUD"})

    def test_invalid_retry_attempts(self) -> None:
        with pytest.raises(ValidationError):
            Settings(retry={"max_attempts": 0})


class TestEnvironmentOverrides:
    def test_nested_env_variables(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ANIBRIDGE_API__CATALOG__TIMEOUT", "5")
        monkeypatch.setenv("ANIBRIDGE_CACHE__ENABLED", "false")

        settings = Settings()

        assert settings.api.catalog.timeout == 5.0
        assert settings.cache.enabled is False

    def test_dotenv_file_is_loaded(self, isolated_environment: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        # Registered so the variable load_dotenv sets is removed on teardown
        monkeypatch.delenv("ANIBRIDGE_RETRY__MAX_ATTEMPTS", raising=False)
        (isolated_environment / ".env").write_text("ANIBRIDGE_RETRY__MAX_ATTEMPTS=2\n")

        settings = load_settings()

        assert settings.retry.max_attempts == 2


class TestTomlFiles:
    """Test cases for TOML round trips and file loading."""

    def test_round_trip(self, isolated_environment: Path) -> None:
        path = isolated_environment / "out" / "anibridge.toml"
        original = Settings(retry={"max_attempts": 3}, logging={"level": "WARNING"})

        original.to_toml_file(path)
        loaded = Settings.from_toml_file(path)

        assert loaded.retry.max_attempts == 3
        assert loaded.logging.level == "WARNING"

    def test_explicit_file(self, isolated_environment: Path) -> None:
        path = isolated_environment / "custom.toml"
        path.write_text('[api.catalog]\nbase_url = "https://catalog.example"\n')

        settings = load_settings(path)

        assert settings.api.catalog.base_url == "https://catalog.example"

    def test_default_location_is_discovered(self, isolated_environment: Path) -> None:
        (isolated_environment / "anibridge.toml").write_text("[retry]\nmax_attempts = 4\n")

        assert load_settings().retry.max_attempts == 4

    def test_missing_explicit_file(self, isolated_environment: Path) -> None:
        with pytest.raises(ApplicationError) as exc_info:
            load_settings(isolated_environment / "missing.toml")

        assert exc_info.value.code is ErrorCode.CONFIGURATION_ERROR

    def test_malformed_toml(self, isolated_environment: Path) -> None:
        path = isolated_environment / "broken.toml"
        path.write_text("[retry\nmax_attempts = ")

        with pytest.raises(ApplicationError):
            load_settings(path)

    def test_invalid_values(self, isolated_environment: Path) -> None:
        path = isolated_environment / "invalid.toml"
        path.write_text('[logging]\nlevel = "LOUD"\n')

        with pytest.raises(ApplicationError) as exc_info:
            load_settings(path)

        assert isinstance(exc_info.value.original_error, ValidationError)


class TestSettingsLoader:
    def test_singleton_until_reload(self, isolated_environment: Path) -> None:
        loader = SettingsLoader()

        first = loader.get_config()
        assert loader.get_config() is first

        (isolated_environment / "anibridge.toml").write_text("[retry]\nmax_attempts = 2\n")
        reloaded = loader.reload_config()

        assert reloaded is not first
        assert loader.get_config().retry.max_attempts == 2
