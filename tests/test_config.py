"""Tests for configuration loading."""

import os

import pytest

from config import find_config_file, load_settings
from exceptions import ConfigurationError


class TestLoadSettings:
    """Tests for load_settings()."""

    def test_defaults(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.delenv("LARSCRIPTS_CONFIG", raising=False)
        settings = load_settings()
        assert settings.core_package == "larsoft"
        assert settings.mandatory_prefix == "lar"
        assert settings.experiment("icarus").codenames == ["icaruscode"]
        assert settings.experiment("Uboone").bootstrap.endswith("setup_uboone.sh")
        assert settings.fcl_dirs == ["job", "fcl"]
        assert settings.source is None

    def test_yaml_merged_over_defaults(self, tmp_path):
        config = tmp_path / "config.yml"
        config.write_text(
            "experiments:\n"
            "  icarus:\n"
            "    codenames: [icaruscode, icarusutil@v2]\n"
            "  myexp: /opt/myexp/setup.sh\n"
            "override_products_dirs: [~/products]\n"
            "artenv:\n"
            "  data_dirs: [maps]\n",
            encoding="utf-8",
        )
        settings = load_settings(str(config))
        icarus = settings.experiment("icarus")
        assert icarus.codenames == ["icaruscode", "icarusutil@v2"]
        assert icarus.bootstrap.endswith("setup_icarus.sh")
        assert settings.experiment("myexp").bootstrap == "/opt/myexp/setup.sh"
        assert settings.override_products_dirs == [os.path.expanduser("~/products")]
        assert settings.data_dirs == ["maps"]
        assert settings.fcl_dirs == ["job", "fcl"]
        assert settings.source == str(config)

    def test_empty_file(self, tmp_path):
        config = tmp_path / "config.yml"
        config.write_text("", encoding="utf-8")
        assert load_settings(str(config)).core_package == "larsoft"

    def test_missing_file_uses_defaults(self, tmp_path):
        settings = load_settings(str(tmp_path / "nope.yml"))
        assert settings.core_package == "larsoft"

    def test_malformed_yaml(self, tmp_path):
        config = tmp_path / "config.yml"
        config.write_text("experiments: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_settings(str(config))

    def test_non_mapping_root(self, tmp_path):
        config = tmp_path / "config.yml"
        config.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_settings(str(config))


class TestFindConfigFile:
    """Tests for config file lookup precedence."""

    def test_explicit_wins(self):
        assert find_config_file("/x.yml", {"LARSCRIPTS_CONFIG": "/y.yml"}) == "/x.yml"

    def test_environment_variable(self):
        assert find_config_file(None, {"LARSCRIPTS_CONFIG": "/y.yml"}) == "/y.yml"

    def test_default_location(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert find_config_file(None, {}) is None
        default = tmp_path / ".config" / "larscripts" / "config.yml"
        default.parent.mkdir(parents=True)
        default.write_text("{}\n", encoding="utf-8")
        assert find_config_file(None, {}) == str(default)
