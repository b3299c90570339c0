"""
Tests for planner settings and YAML loading.
"""

import pytest

from loop_planner.config import CONFIG_ENV_VAR, PlannerSettings, load_settings


class TestPlannerSettings:
    def test_defaults(self) -> None:
        settings = PlannerSettings()

        assert settings.max_name_length == 50
        assert settings.min_playback_speed == 0.25
        assert settings.max_playback_speed == 2.0
        assert settings.max_resolve_attempts == 10

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"max_name_length": 0},
            {"min_playback_speed": 2.0, "max_playback_speed": 1.0},
            {"min_playback_speed": 0},
            {"max_resolve_attempts": 0},
            {"long_loop_ratio": 0},
            {"overfill_ratio": -1},
            {"max_active_loops": -1},
        ],
    )
    def test_invalid_values(self, kwargs) -> None:
        with pytest.raises(ValueError):
            PlannerSettings(**kwargs)

    def test_unknown_key(self) -> None:
        with pytest.raises(ValueError, match="Unknown setting"):
            PlannerSettings.from_dict({"max_speed": 3})

    def test_loop_defaults(self) -> None:
        defaults = PlannerSettings(default_color="#000000").loop_defaults
        assert defaults["color"] == "#000000"
        assert defaults["play_count"] == 0


class TestLoadSettings:
    def test_no_file_configured(self, monkeypatch) -> None:
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        assert load_settings() == PlannerSettings()

    def test_load_from_yaml(self, tmp_path) -> None:
        path = tmp_path / "planner.yaml"
        path.write_text("loop_planner:\n  max_resolve_attempts: 3\n  max_name_length: 20\n")

        settings = load_settings(path)

        assert settings.max_resolve_attempts == 3
        assert settings.max_name_length == 20

    def test_empty_file(self, tmp_path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_settings(path) == PlannerSettings()

    def test_env_var(self, tmp_path, monkeypatch) -> None:
        path = tmp_path / "planner.yaml"
        path.write_text("loop_planner:\n  max_active_loops: 2\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(path))

        assert load_settings().max_active_loops == 2

    def test_missing_env_file_falls_back(self, tmp_path, monkeypatch) -> None:
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "missing.yaml"))
        assert load_settings() == PlannerSettings()

    def test_missing_explicit_file(self, tmp_path) -> None:
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "missing.yaml")

    def test_invalid_values_in_file(self, tmp_path) -> None:
        path = tmp_path / "bad.yaml"
        path.write_text("loop_planner:\n  max_resolve_attempts: 0\n")
        with pytest.raises(ValueError):
            load_settings(path)
