"""Tests for the discovery strategies and per-language scanners."""

import plistlib
from pathlib import Path

import pytest

from runtimepilot.config.languages import LanguageConfig
from runtimepilot.discovery.access import AuthorizedDirectories
from runtimepilot.discovery.paths import PathResolver, PathSource, ScanPathSpec
from runtimepilot.scanners import go, java, node, python
from runtimepilot.scanners.base import (
    DirectoryWalkStrategy,
    RuntimeScanner,
    bin_marker,
    deduplicate,
    sort_records,
)
from runtimepilot.scanners.custom import create_scanner as create_custom_scanner
from runtimepilot.scanners.homebrew import is_homebrew_install, parse_cellar_path

from .conftest import FailingStrategy, StaticStrategy, make_install, record


def paths(*raw):
    specs = [ScanPathSpec(str(p)) for p in raw]
    return lambda: specs


def no_commands(cmd, **kwargs):
    return None


class TestRecordsOrdering:
    """Test de-duplication and sorting of records."""

    def test_first_report_wins(self):
        records = [
            record("17.0.9", "/jdks/zulu-17/Contents/Home", strategy="java_home"),
            record("zulu-17", "/jdks/zulu-17/Contents/Home/", strategy="directory"),
            record("21.0.1", "/jdks/zulu-21/Contents/Home"),
        ]

        unique = deduplicate(records)

        assert [r.version for r in unique] == ["17.0.9", "21.0.1"]

    def test_sort_descending_numeric_then_source_then_path(self):
        records = [
            record("9.8.0", "/a"),
            record("20.2", "/b"),
            record("20.11.0", "/d", source="NVM"),
            record("20.11.0", "/c", source="Homebrew"),
        ]

        ordered = sort_records(records)

        assert [(r.version, r.source) for r in ordered] == [
            ("20.11.0", "Homebrew"),
            ("20.11.0", "NVM"),
            ("20.2", "Local"),
            ("9.8.0", "Local"),
        ]

    def test_record_identity_is_normalized_path(self):
        a = record("1.0", "/x/y/")
        b = record("1.0", "/x/./y")
        assert a.key == b.key == "/x/y"
        assert a.id != b.id
        assert a.bin_path == "/x/y/bin"


class TestRuntimeScanner:
    """Test strategy composition."""

    def test_higher_priority_strategy_version_kept(self):
        first = StaticStrategy([record("17.0.9", "/jdk/Home", strategy="java_home")], name="java_home")
        second = StaticStrategy([record("17", "/jdk/Home"), record("11.0.2", "/jdk11/Home")])

        result = RuntimeScanner("java", [first, second]).scan()

        assert [(r.version, r.strategy) for r in result] == [("17.0.9", "java_home"), ("11.0.2", "directory")]

    def test_failing_strategy_does_not_abort_scan(self):
        good = StaticStrategy([record("20.11.0", "/node/20")])

        result = RuntimeScanner("node", [FailingStrategy(PermissionError("denied")), good]).scan()

        assert [r.version for r in result] == ["20.11.0"]

    def test_empty_is_a_valid_result(self):
        assert RuntimeScanner("node", [StaticStrategy([])]).scan() == []


class TestDirectoryWalk:
    """Test the directory walk strategy."""

    def test_nvm_scenario(self, fake_home):
        versions = fake_home / ".nvm" / "versions" / "node"
        make_install(versions / "v18.16.0", "bin/node")
        make_install(versions / "v16.0.0", "lib/readme")

        scanner = node.create_scanner(lambda: [ScanPathSpec("~/.nvm/versions/node", PathSource.NVM)])
        result = scanner.scan()

        assert len(result) == 1
        assert result[0].version == "18.16.0"
        assert result[0].source == "NVM"
        assert result[0].install_path == str(versions / "v18.16.0")

    def test_hidden_and_plain_files_skipped(self, tmp_path):
        root = tmp_path / "sdks"
        make_install(root / ".v20.0.0", "bin/node")
        make_install(root, "v21.0.0")
        make_install(root / "v22.1.0", "bin/node")

        walk = DirectoryWalkStrategy(paths(root), bin_marker("node"))

        assert [r.version for r in walk.discover()] == ["22.1.0"]

    def test_inaccessible_path_skipped(self, tmp_path):
        allowed = tmp_path / "allowed"
        denied = tmp_path / "denied"
        make_install(allowed / "v20.1.0", "bin/node")
        make_install(denied / "v21.1.0", "bin/node")
        access = AuthorizedDirectories([str(allowed)])

        scanner = node.create_scanner(paths(denied, allowed), resolver=PathResolver(access=access))
        result = scanner.scan()

        assert [r.version for r in result] == ["20.1.0"]

    def test_missing_scan_path_skipped(self, tmp_path):
        make_install(tmp_path / "real" / "v20.1.0", "bin/node")

        result = node.create_scanner(paths(tmp_path / "gone", tmp_path / "real")).scan()

        assert [r.version for r in result] == ["20.1.0"]

    def test_formula_versions_labeled(self, tmp_path):
        cellar = tmp_path / "Cellar"
        make_install(cellar / "node" / "21.5.0", "bin/node")
        make_install(cellar / "node@20" / "20.11.1_1", "bin/node")
        make_install(cellar / "nodenv" / "1.4.1", "bin/node")

        result = node.create_scanner(paths(cellar / "node*")).scan()

        assert [(r.version, r.source) for r in result] == [
            ("21.5.0", "Homebrew"),
            ("20.11.1", "Homebrew (node@20)"),
        ]


class TestJavaScanner:
    """Test JDK discovery."""

    def test_bundle_layout_uses_release_file(self, tmp_path):
        jvms = tmp_path / "JavaVirtualMachines"
        home = make_install(jvms / "zulu-17.jdk" / "Contents" / "Home", "bin/java")
        (home / "release").write_text('JAVA_VERSION="17.0.9"\n')

        result = java.create_scanner(paths(jvms), run=no_commands).scan()

        assert len(result) == 1
        assert result[0].install_path == str(home)
        assert result[0].version == "17.0.9"
        assert result[0].source == "System JDK"

    def test_homebrew_layout(self, tmp_path):
        cellar = tmp_path / "Cellar"
        home = make_install(
            cellar / "openjdk@17" / "17.0.9" / "libexec" / "openjdk.jdk" / "Contents" / "Home", "bin/java",
        )
        make_install(cellar / "openjdk" / "21.0.1" / "libexec" / "openjdk.jdk" / "Contents" / "Home", "bin/java")

        result = java.create_scanner(paths(cellar / "openjdk*"), run=no_commands).scan()

        assert [(r.version, r.source) for r in result] == [
            ("21.0.1", "OpenJDK (Homebrew)"),
            ("17.0.9", "openjdk@17 (Homebrew)"),
        ]
        assert result[1].install_path == str(home)

    def test_scan_path_that_is_a_home(self, tmp_path):
        home = make_install(tmp_path / "jdk-21.0.2", "bin/java")

        result = java.create_scanner(paths(home), run=no_commands).scan()

        assert [r.install_path for r in result] == [str(home)]
        assert result[0].version == "21.0.2"

    def test_java_home_output_wins_over_walk(self, tmp_path):
        jvms = tmp_path / "JavaVirtualMachines"
        home = make_install(jvms / "zulu-17.jdk" / "Contents" / "Home", "bin/java")
        payload = plistlib.dumps([
            {"JVMHomePath": str(home), "JVMName": "Zulu 17", "JVMVersion": "17.0.9"},
            {"JVMHomePath": str(tmp_path / "gone"), "JVMName": "Gone", "JVMVersion": "11.0.1"},
            {"JVMName": "Incomplete"},
        ])
        calls = []

        def fake_run(cmd, **kwargs):
            calls.append((cmd, kwargs))
            return payload

        result = java.create_scanner(paths(jvms), run=fake_run).scan()

        assert [(r.version, r.strategy) for r in result] == [("17.0.9", "java_home")]
        assert calls[0][0][-1] == "-X"
        assert calls[0][1]["text"] is False

    def test_unparseable_java_home_output(self, tmp_path):
        strategy = java.JavaHomeStrategy(run=lambda cmd, **kw: b"not a plist")
        assert strategy.discover() == []

    def test_locate_jdk_home_rejects_non_jdk(self, tmp_path):
        assert java.locate_jdk_home(str(make_install(tmp_path / "docs", "index.html"))) is None


class TestPythonScanner:
    """Test Python discovery."""

    def test_only_versioned_formulae(self, tmp_path):
        cellar = tmp_path / "Cellar"
        make_install(cellar / "python@3.12" / "3.12.1", "bin/python3.12")
        make_install(cellar / "python" / "3.13.0", "bin/python3")

        result = python.create_scanner(paths(cellar / "python*"), run=no_commands).scan()

        assert [(r.version, r.source) for r in result] == [("3.12.1", "Homebrew (python@3.12)")]

    def test_pyenv_versions(self, fake_home):
        versions = fake_home / ".pyenv" / "versions"
        make_install(versions / "3.11.4", "bin/python3")
        make_install(versions / "2.7.18", "bin/python")

        scanner = python.create_scanner(lambda: [ScanPathSpec("~/.pyenv/versions", PathSource.PYENV)], run=no_commands)

        assert [(r.version, r.source) for r in scanner.scan()] == [("3.11.4", "pyenv"), ("2.7.18", "pyenv")]

    def test_system_python(self, tmp_path):
        root = make_install(tmp_path / "usr", "bin/python3")
        outputs = {
            ("python3", "--version"): "Python 3.9.6",
            ("which", "python3"): str(root / "bin" / "python3"),
        }

        strategy = python.SystemPythonStrategy(run=lambda cmd, **kw: outputs.get(tuple(cmd)))
        result = strategy.discover()

        assert [(r.version, r.install_path, r.source) for r in result] == [("3.9.6", str(root), "System")]

    def test_system_python_missing(self):
        assert python.SystemPythonStrategy(run=no_commands).discover() == []

    def test_parse_python_version(self):
        assert python.parse_python_version("Python 3.12.1") == "3.12.1"
        assert python.parse_python_version("garbage") is None


class TestGoScanner:
    """Test Go discovery."""

    def test_homebrew_libexec_layout(self, tmp_path):
        cellar = tmp_path / "Cellar"
        goroot = make_install(cellar / "go" / "1.22.1" / "libexec", "bin/go")

        result = go.create_scanner(paths(cellar / "go*"), run=no_commands).scan()

        assert [(r.version, r.install_path, r.source) for r in result] == [("1.22.1", str(goroot), "Homebrew")]

    def test_nested_go_directory(self, fake_home):
        installs = fake_home / ".asdf" / "installs" / "golang"
        goroot = make_install(installs / "1.21.5" / "go", "bin/go")

        scanner = go.create_scanner(lambda: [ScanPathSpec("~/.asdf/installs/golang", PathSource.ASDF)], run=no_commands)
        result = scanner.scan()

        assert [(r.version, r.install_path, r.source) for r in result] == [("1.21.5", str(goroot), "asdf")]

    def test_fused_name_versions(self, tmp_path):
        gos = tmp_path / "gos"
        make_install(gos / "go1.21.0", "bin/go")

        result = go.create_scanner(paths(gos), run=no_commands).scan()

        assert [r.version for r in result] == ["1.21.0"]

    def test_system_go_beats_walk(self, tmp_path):
        goroot = make_install(tmp_path / "sdk" / "go1.22.0", "bin/go")
        outputs = {
            ("go", "version"): "go version go1.22.0 darwin/arm64",
            ("go", "env", "GOROOT"): str(goroot) + "\n",
        }

        scanner = go.create_scanner(paths(tmp_path / "sdk"), run=lambda cmd, **kw: outputs.get(tuple(cmd)))
        result = scanner.scan()

        assert [(r.version, r.strategy, r.source) for r in result] == [("1.22.0", "system_command", "System")]

    def test_bad_goroot_ignored(self, tmp_path):
        outputs = {
            ("go", "version"): "go version go1.22.0 darwin/arm64",
            ("go", "env", "GOROOT"): str(tmp_path / "nowhere"),
        }
        strategy = go.SystemGoStrategy(run=lambda cmd, **kw: outputs.get(tuple(cmd)))
        assert strategy.discover() == []

    @pytest.mark.parametrize("output,expected", [
        ("go version go1.22.1 darwin/arm64", "1.22.1"),
        ("go version devel", "devel"),
        ("something else", None),
        (None, None),
    ])
    def test_parse_go_version(self, output, expected):
        assert go.parse_go_version(output) == expected


class TestCustomScanner:
    """Test the config-driven scanner."""

    def test_executable_marker(self, tmp_path):
        rubies = tmp_path / "rubies"
        make_install(rubies / "ruby-3.2.0", "bin/ruby")
        make_install(rubies / "ruby-3.1.4", "lib/empty")
        config = LanguageConfig("ruby", "Ruby", scan_paths=[str(rubies)], executable="ruby")

        result = create_custom_scanner(lambda: config).scan()

        assert [(r.version, r.source) for r in result] == [("3.2.0", "Local")]

    def test_any_directory_without_executable(self, tmp_path):
        sdks = tmp_path / "dotnet-sdk"
        (sdks / "8.0.100").mkdir(parents=True)
        (sdks / "7.0.404").mkdir(parents=True)
        config = LanguageConfig("dotnet", ".NET", scan_paths=[str(sdks)])

        result = create_custom_scanner(lambda: config).scan()

        assert [r.version for r in result] == ["8.0.100", "7.0.404"]

    def test_scan_path_that_is_an_install(self, tmp_path):
        sdk = make_install(tmp_path / "flutter", "bin/flutter")
        config = LanguageConfig("flutter", "Flutter", scan_paths=[str(sdk)], executable="flutter")

        result = create_custom_scanner(lambda: config).scan()

        assert [r.install_path for r in result] == [str(sdk)]

    def test_config_changes_apply_to_next_scan(self, tmp_path):
        first, second = tmp_path / "first", tmp_path / "second"
        make_install(first / "1.0.0", "bin/tool")
        make_install(second / "2.0.0", "bin/tool")
        current = {"config": LanguageConfig("tool", "Tool", scan_paths=[str(first)], executable="tool")}
        scanner = create_custom_scanner(lambda: current["config"])

        assert [r.version for r in scanner.scan()] == ["1.0.0"]
        current["config"] = LanguageConfig("tool", "Tool", scan_paths=[str(second)], executable="tool")
        assert [r.version for r in scanner.scan()] == ["2.0.0"]


class TestHomebrewHelpers:
    """Test Cellar path helpers."""

    def test_parse_cellar_path(self):
        brew = parse_cellar_path("/opt/homebrew/Cellar/python@3.13/3.13.11_1/bin")

        assert brew.formula_name == "python@3.13"
        assert brew.version == "3.13.11_1"
        assert brew.clean_version == "3.13.11"
        assert brew.cellar_path == "/opt/homebrew/Cellar/python@3.13/3.13.11_1"
        assert brew.is_versioned_formula
        assert brew.source_display == "Homebrew (python@3.13)"

    def test_not_in_cellar(self):
        assert parse_cellar_path("/Users/me/sdks/node") is None
        assert parse_cellar_path("/opt/homebrew/Cellar/node") is None

    def test_is_homebrew_install(self):
        assert is_homebrew_install("/opt/homebrew/Cellar/go/1.22.1/libexec")
        assert is_homebrew_install("/usr/local/Cellar/node/20.0.0")
        assert not is_homebrew_install(str(Path("/Users/me/sdks/go")))
