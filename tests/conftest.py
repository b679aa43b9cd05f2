"""Shared fixtures: a scriptable stand-in for the UPS/MRB toolchain."""

import pytest

from config import Settings, default_config
from environment import Environment
from toolchain.base import Toolchain, ToolResult


class FakeToolchain(Toolchain):
    """Records invocations; returns scripted exit codes and environment edits."""

    def __init__(self, env, returncodes=None, env_updates=None, on_call=None):
        self.env = env
        self.calls = []
        self.returncodes = returncodes or {}
        self.env_updates = env_updates or {}
        self.on_call = on_call

    def _invoke(self, key):
        self.calls.append(key)
        if self.on_call is not None:
            self.on_call(key)
        rc = self.returncodes.get(key, 0)
        if rc == 0:
            for name, value in self.env_updates.get(key, {}).items():
                self.env.set(name, value)
        return ToolResult(returncode=rc, command=" ".join(key))

    def bootstrap(self, script, *args):
        return self._invoke(("bootstrap", script) + tuple(args))

    def setup(self, name, version=None, qualifiers=None):
        return self._invoke(("setup", name, version or "", qualifiers or ""))

    def build_tool(self, args, source=False):
        return self._invoke(("source" if source else "run", "mrb") + tuple(args))


@pytest.fixture
def env():
    return Environment({"PATH": "/usr/bin:/bin", "HOME": "/home/user"})


@pytest.fixture
def toolchain(env):
    return FakeToolchain(env)


@pytest.fixture
def settings():
    return Settings.from_mapping(default_config())


def make_package(source_dir, name, parent_line="parent larsoft v1", vcs=True):
    """Create a checked-out package with a ups/product_deps file."""
    package = source_dir / name
    (package / "ups").mkdir(parents=True)
    if vcs:
        (package / ".git").mkdir()
    if parent_line is not None:
        (package / "ups" / "product_deps").write_text(
            f"# product_deps for {name}\n{parent_line}\ndefaultqual e20\n",
            encoding="utf-8",
        )
    return package
