"""
Unit tests for configuration loading and AppSettings validation.
"""

import pytest
import toml
from showplanner.config import AppSettings, Config, ConfigError


class TestAppSettings:
    """AppSettings bounds."""

    def test_defaults(self):
        settings = AppSettings()
        assert settings.target_song_minutes_per_hour == 52
        assert settings.show_creation_mode == "duration"
        assert settings.target_songs_per_hour == 12

    @pytest.mark.parametrize("minutes", [10, 60])
    def test_minutes_bounds_inclusive(self, minutes):
        assert AppSettings(target_song_minutes_per_hour=minutes).target_song_minutes_per_hour == minutes

    @pytest.mark.parametrize("minutes", [9, 61])
    def test_minutes_out_of_bounds(self, minutes):
        with pytest.raises(ConfigError):
            AppSettings(target_song_minutes_per_hour=minutes)

    @pytest.mark.parametrize("count", [0, 21])
    def test_songs_per_hour_out_of_bounds(self, count):
        with pytest.raises(ConfigError):
            AppSettings(target_songs_per_hour=count)

    def test_unknown_mode(self):
        with pytest.raises(ConfigError):
            AppSettings(show_creation_mode="random")

    def test_updated_returns_new_settings(self):
        settings = AppSettings()
        changed = settings.updated(show_creation_mode="count", target_songs_per_hour=15)
        assert changed.show_creation_mode == "count"
        assert changed.target_songs_per_hour == 15
        assert settings.show_creation_mode == "duration"

    def test_updated_rejects_unknown_field(self):
        with pytest.raises(ConfigError):
            AppSettings().updated(volume=11)


class TestConfigLoad:
    """Config.load from TOML."""

    def test_missing_file_uses_defaults(self, tmp_path):
        config = Config.load(str(tmp_path / "missing.toml"))
        assert config.get("show", "target_song_minutes_per_hour") == 52
        assert config.get("database", "path") == "data/db/showplanner.sqlite"

    def test_defaults_not_shared(self, tmp_path):
        config = Config.load(str(tmp_path / "missing.toml"))
        config["show"]["default_hours"] = 5
        assert Config.DEFAULT_CONFIG["show"]["default_hours"] == 1

    def test_env_var_path(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.toml"
        path.write_text(toml.dumps({"show": {"target_song_minutes_per_hour": 40}}))
        monkeypatch.setenv("SHOWPLANNER_CONFIG_PATH", str(path))

        config = Config.load()
        assert config.get("show", "target_song_minutes_per_hour") == 40

    def test_missing_params_filled(self, tmp_path):
        path = tmp_path / "partial.toml"
        path.write_text(toml.dumps({"show": {"show_creation_mode": "count"}}))

        config = Config.load(str(path))
        assert config.get("show", "target_songs_per_hour") == 12
        assert config.app_settings() == AppSettings(show_creation_mode="count")

    def test_out_of_bounds(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text(toml.dumps({"show": {"target_songs_per_hour": 50}}))
        with pytest.raises(ConfigError):
            Config.load(str(path))

    def test_bad_mode(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text(toml.dumps({"show": {"show_creation_mode": "shuffle"}}))
        with pytest.raises(ConfigError):
            Config.load(str(path))

    def test_non_numeric_value(self, tmp_path):
        path = tmp_path / "bad.toml"
        path.write_text(toml.dumps({"show": {"default_hours": "two"}}))
        with pytest.raises(ConfigError):
            Config.load(str(path))

    def test_malformed_toml(self, tmp_path):
        path = tmp_path / "broken.toml"
        path.write_text("[show\nnot toml")
        with pytest.raises(ConfigError):
            Config.load(str(path))

    def test_repr(self):
        assert repr(Config.defaults()) == "Config(version=1.0)"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
