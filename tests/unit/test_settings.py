"""
Unit tests for configuration loading.
"""

import pytest

from config import NumericsConfig, Settings, get_default_config_path, load_config
from covdist.core.exceptions import ConfigurationError
from covdist.distance.geo import DENOM_EPS, FD_EPS
from covdist.distance.metrics import INSTABILITY_THRESHOLD


class TestSettings:
    """Tests for the Settings dataclass."""

    def test_defaults(self):
        settings = Settings()
        assert settings.metric == "euclidean"
        assert settings.weight == "se"
        assert settings.numerics.fd_epsilon == FD_EPS

    def test_round_trip_dict(self):
        settings = Settings(metric="lld", scales=[10.0, 2.0])
        restored = Settings.from_dict(settings.to_dict())
        assert restored == settings
        assert isinstance(restored.numerics, NumericsConfig)

    def test_unknown_key(self):
        with pytest.raises(ConfigurationError):
            Settings.from_dict({"metrc": "euclidean"})

    def test_invalid_numerics(self):
        with pytest.raises(ConfigurationError):
            Settings.from_dict({"numerics": {"step": 1.0}})

    def test_numerics_differing_from_constants_rejected(self):
        with pytest.raises(ConfigurationError):
            Settings.from_dict({
                "metric": "km",
                "scales": [1.0],
                "numerics": {"fd_epsilon": 1e-2, "instability_threshold": 0.0},
            })

    def test_numerics_matching_constants_accepted(self):
        settings = Settings.from_dict({
            "numerics": {
                "fd_epsilon": FD_EPS,
                "denominator_epsilon": DENOM_EPS,
                "instability_threshold": INSTABILITY_THRESHOLD,
            },
        })
        assert settings.numerics == NumericsConfig()

    def test_numerics_from_yaml(self, tmp_path):
        path = tmp_path / "numerics.yaml"
        path.write_text("numerics:\n  fd_epsilon: 1.0e-8\n")
        assert load_config(str(path)).numerics.fd_epsilon == FD_EPS

        path.write_text("numerics:\n  denominator_epsilon: 1.0e-6\n")
        with pytest.raises(ConfigurationError):
            load_config(str(path))


class TestLoadConfig:
    """Tests for YAML loading."""

    def test_load_file(self, tmp_path):
        path = tmp_path / "cfg.yaml"
        path.write_text(
            "metric: 3d_km\n"
            "weight: compact2\n"
            "scales: [100.0, 20.0]\n"
            "weight_params: [1.5, 1]\n"
            "count_calls: true\n"
        )
        settings = load_config(str(path))
        assert settings.metric == "3d_km"
        assert settings.weight_params == [1.5, 1]
        assert settings.count_calls is True

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(str(tmp_path / "missing.yaml")) == Settings()

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == Settings()

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("metric: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            load_config(str(path))

    def test_env_var(self, tmp_path, monkeypatch):
        path = tmp_path / "env.yaml"
        path.write_text("weight: matern32\n")
        monkeypatch.setenv("COVDIST_CONFIG", str(path))
        assert get_default_config_path() == path
        assert load_config().weight == "matern32"

    def test_packaged_default(self, monkeypatch, tmp_path):
        monkeypatch.delenv("COVDIST_CONFIG", raising=False)
        monkeypatch.chdir(tmp_path)
        path = get_default_config_path()
        assert path.name == "default_config.yaml"
        assert load_config().metric == "euclidean"
