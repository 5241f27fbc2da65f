"""Pytest configuration and shared fixtures.

Test directory names must not contain the source markers the label
heuristics look for (nvm, pyenv, cellar, ...) unless a test wants that
label, because tmp_path embeds the test name.
"""

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Generator

import pytest

from runtimepilot.active import ActiveVersionResolver
from runtimepilot.config.preferences import MemoryPreferenceStore
from runtimepilot.output.env_script import EnvironmentScriptWriter
from runtimepilot.scanners.base import DiscoveryStrategy, RuntimeScanner, VersionRecord


def make_install(root: Path, *markers: str) -> Path:
    """Create a fake install directory with marker files (bin/node, release, ...)."""
    root.mkdir(parents=True, exist_ok=True)
    for marker in markers:
        path = root / marker
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("")
    return root


class StaticStrategy(DiscoveryStrategy):
    """Strategy reporting a fixed list of records."""

    def __init__(self, records, name="static"):
        self.records = list(records)
        self.name = name
        self.calls = 0

    def discover(self):
        self.calls += 1
        return list(self.records)


class FailingStrategy(DiscoveryStrategy):
    name = "failing"

    def __init__(self, error: Exception):
        self.error = error

    def discover(self):
        raise self.error


def record(version: str, path: str, source: str = "Local", strategy: str = "directory") -> VersionRecord:
    return VersionRecord(version=version, source=source, install_path=path, strategy=strategy)


def static_scanner(language_id: str, records) -> RuntimeScanner:
    return RuntimeScanner(language_id, [StaticStrategy(records)])


@pytest.fixture
def fake_home(tmp_path: Path, monkeypatch) -> Path:
    """Point HOME (and so '~') at a fresh directory."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    return tmp_path / "config"


@pytest.fixture
def preferences() -> MemoryPreferenceStore:
    return MemoryPreferenceStore()


@pytest.fixture
def writer(config_dir: Path) -> EnvironmentScriptWriter:
    return EnvironmentScriptWriter(config_dir)


@pytest.fixture
def resolver(preferences, writer) -> ActiveVersionResolver:
    return ActiveVersionResolver(preferences, writer)


@pytest.fixture
def executor() -> Generator[ThreadPoolExecutor, None, None]:
    pool = ThreadPoolExecutor(max_workers=2)
    yield pool
    pool.shutdown(wait=True)
