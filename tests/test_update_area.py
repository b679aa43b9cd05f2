"""Tests for the update-area command."""

import logging
import os
from types import SimpleNamespace

import pytest

from cli_update_area import run_update_area, update_area
from conftest import FakeToolchain, make_package
from environment import Environment
from exceptions import ConfigurationError, InconsistencyError


def _work_area(tmp_path, build_name="build"):
    top = tmp_path / "work"
    source = top / "srcs"
    source.mkdir(parents=True)
    env = Environment({
        "MRB_TOP": str(top),
        "MRB_SOURCE": str(source),
        "MRB_BUILD": str(top / build_name),
        "MRB_PROJECT": "larsoft",
        "MRB_QUALS": "prof:e20",
    })
    return top, source, env


def _creating_toolchain(env, top):
    def make_dir(call):
        if call[:3] == ("run", "mrb", "newDev"):
            version = call[call.index("-v") + 1]
            quals = call[call.index("-q") + 1].replace(":", "_")
            (top / f"localProducts_larsoft_{version}_{quals}").mkdir()

    return FakeToolchain(env, on_call=make_dir)


def _args(**kwargs):
    defaults = dict(
        SHOW_VERSION=False, CONFIG=None, VERSION=None, QUALIFIERS=None,
        FORCE=False, IGNORE_INCONSISTENCY=False, EMIT_SOURCE=False,
    )
    defaults.update(kwargs)
    return SimpleNamespace(**defaults)


class TestUpdateArea:
    """Tests for update_area()."""

    def test_detects_version(self, tmp_path, settings):
        top, source, env = _work_area(tmp_path)
        make_package(source, "larcore", "parent larsoft v1")
        make_package(source, "larsim", "parent larsoft v1")
        make_package(source, "mypkg", "parent larsoft v2")
        toolchain = _creating_toolchain(env, top)

        result = update_area(env, toolchain, settings)

        assert toolchain.calls == [("run", "mrb", "newDev", "-p", "-v", "v1", "-q", "e20:prof")]
        assert result.path == str(top / "localProducts_larsoft_v1_e20_prof")
        assert os.readlink(top / "localProducts") == "localProducts_larsoft_v1_e20_prof"

    def test_explicit_version_and_qualifiers(self, tmp_path, settings):
        top, _, env = _work_area(tmp_path)
        toolchain = _creating_toolchain(env, top)

        result = update_area(env, toolchain, settings, version="v3", qualifiers="debug:e26")

        assert result.created
        assert toolchain.calls == [("run", "mrb", "newDev", "-p", "-v", "v3", "-q", "e26:debug")]

    def test_rebuild_advice(self, tmp_path, settings, caplog):
        top, _, env = _work_area(tmp_path)
        with caplog.at_level(logging.INFO):
            update_area(env, _creating_toolchain(env, top), settings, version="v3")
        assert "mrb zapBuild" in caplog.text

    def test_no_rebuild_advice_for_other_build_dir(self, tmp_path, settings, caplog):
        top, _, env = _work_area(tmp_path, build_name="build_slf7.x86_64")
        with caplog.at_level(logging.INFO):
            update_area(env, _creating_toolchain(env, top), settings, version="v3")
        assert "mrb zapBuild" not in caplog.text

    def test_inconsistent_core_packages(self, tmp_path, settings):
        top, source, env = _work_area(tmp_path)
        make_package(source, "larcore", "parent larsoft v1")
        make_package(source, "larsim", "parent larsoft v2")
        toolchain = _creating_toolchain(env, top)

        with pytest.raises(InconsistencyError):
            update_area(env, toolchain, settings)
        assert toolchain.calls == []

        update_area(env, toolchain, settings, ignore_inconsistency=True)
        assert toolchain.calls[-1][5] == "v2"

    def test_not_configured(self, settings, toolchain):
        with pytest.raises(ConfigurationError, match="mrb is not configured"):
            update_area(Environment({}), toolchain, settings)

    def test_missing_work_area(self, tmp_path, settings, toolchain):
        env = Environment({"MRB_TOP": str(tmp_path / "missing")})
        with pytest.raises(ConfigurationError, match="does not exist"):
            update_area(env, toolchain, settings, version="v1")

    def test_no_source_directory_needs_version(self, tmp_path, settings, toolchain):
        env = Environment({"MRB_TOP": str(tmp_path)})
        with pytest.raises(ConfigurationError, match="which version"):
            update_area(env, toolchain, settings)

    def test_no_source_directory_with_version(self, tmp_path, settings):
        env = Environment({"MRB_TOP": str(tmp_path), "MRB_PROJECT": "larsoft"})
        toolchain = _creating_toolchain(env, tmp_path)
        result = update_area(env, toolchain, settings, version="v1", qualifiers="e20")
        assert result.created


class TestRunUpdateArea:
    """Tests for the update-area CLI entry point."""

    def test_version_flag(self, capsys):
        assert run_update_area(_args(SHOW_VERSION=True)) == 0
        assert capsys.readouterr().out == "update-area version 1.0\n"

    def test_emit_source(self, tmp_path, capsys):
        top, _, env = _work_area(tmp_path)
        code = run_update_area(_args(VERSION="v1", EMIT_SOURCE=True), env=env, toolchain=_creating_toolchain(env, top))
        assert code == 0
        expected = os.path.join(str(top), "localProducts_larsoft_v1_e20_prof", "setup")
        assert capsys.readouterr().out == f"source '{expected}'\n"

    def test_rerun_existing_area_succeeds(self, tmp_path):
        top, _, env = _work_area(tmp_path)
        (top / "localProducts_larsoft_v1_e20_prof").mkdir()
        toolchain = FakeToolchain(env)
        assert run_update_area(_args(VERSION="v1"), env=env, toolchain=toolchain) == 0
        assert toolchain.calls == []

    def test_tool_failure_exit_code(self, tmp_path):
        top, _, env = _work_area(tmp_path)
        toolchain = FakeToolchain(env, returncodes={("run", "mrb", "newDev", "-p", "-v", "v1", "-q", "e20:prof"): 4})
        assert run_update_area(_args(VERSION="v1"), env=env, toolchain=toolchain) == 4

    def test_configuration_error_exit_code(self, toolchain):
        assert run_update_area(_args(), env=Environment({}), toolchain=toolchain) == 1

    def test_unreadable_dependency_file_fails(self, tmp_path, monkeypatch):
        top, source, env = _work_area(tmp_path)
        make_package(source, "larcore", "parent larsoft v1")
        make_package(source, "larsim", "parent larsoft v2")

        def failing_read(path):
            raise PermissionError(13, "Permission denied", path)

        monkeypatch.setattr("versioning.reconciler.read_parent_version", failing_read)
        toolchain = _creating_toolchain(env, top)
        assert run_update_area(_args(), env=env, toolchain=toolchain) == 1
        assert toolchain.calls == []

    def test_tool_killed_by_signal_exit_code(self, tmp_path):
        top, _, env = _work_area(tmp_path)
        toolchain = FakeToolchain(env, returncodes={("run", "mrb", "newDev", "-p", "-v", "v1", "-q", "e20:prof"): -9})
        assert run_update_area(_args(VERSION="v1"), env=env, toolchain=toolchain) == 137
