"""Tests for the command-line entry point."""

import json
import subprocess

import pytest
import yaml

from runtimepilot import __version__
from runtimepilot.main import main

from .conftest import make_install


@pytest.fixture
def cli(tmp_path, fake_home, monkeypatch):
    """Run main() against a fresh config dir with no external tools available."""
    def no_tools(cmd, *args, **kwargs):
        raise FileNotFoundError(cmd[0])

    monkeypatch.setattr(subprocess, "run", no_tools)
    config_dir = tmp_path / "config"

    def run(*argv):
        return main(["--config-dir", str(config_dir), *argv])

    run.config_dir = config_dir
    return run


@pytest.fixture
def node_sdks(tmp_path):
    sdks = tmp_path / "sdks"
    make_install(sdks / "v21.6.0", "bin/node")
    make_install(sdks / "v20.11.1", "bin/node")
    return sdks


class TestList:
    """Test the list command."""

    def test_json(self, cli, node_sdks, capsys):
        assert cli("paths", "node", "--add", str(node_sdks)) == 0
        capsys.readouterr()

        assert cli("list", "node", "--format", "json") == 0

        (language,) = json.loads(capsys.readouterr().out)
        assert language["identifier"] == "node"
        assert language["active"] is None
        assert [v["version"] for v in language["versions"]] == ["21.6.0", "20.11.1"]
        assert not any(v["active"] for v in language["versions"])

    def test_yaml(self, cli, node_sdks, capsys):
        cli("paths", "node", "--add", str(node_sdks))
        capsys.readouterr()

        assert cli("list", "node", "--format", "yaml") == 0

        (language,) = yaml.safe_load(capsys.readouterr().out)
        assert language["script"].endswith("node_env.sh")
        assert len(language["versions"]) == 2

    def test_text_marks_active(self, cli, node_sdks, capsys):
        cli("paths", "node", "--add", str(node_sdks))
        cli("use", "node", str(node_sdks / "v20.11.1"))
        capsys.readouterr()

        assert cli("list", "node") == 0

        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "Node.js (node)"
        assert lines[1].strip().startswith("* 20.11.1")

    def test_all_languages_without_installs(self, cli, capsys):
        assert cli("list") == 0

        out = capsys.readouterr().out
        for name in ("Java (java)", "Node.js (node)", "Python (python)", "Go (go)"):
            assert name in out

    def test_unknown_language(self, cli):
        with pytest.raises(SystemExit):
            cli("list", "cobol")

    def test_custom_language_gets_default(self, cli, tmp_path, capsys):
        rubies = tmp_path / "rubies"
        make_install(rubies / "3.2.0", "bin/ruby")
        make_install(rubies / "3.3.0", "bin/ruby")
        cli.config_dir.mkdir()
        (cli.config_dir / "preferences.yaml").write_text(yaml.safe_dump({
            "CustomLanguages": [
                {"identifier": "ruby", "name": "Ruby", "scan_paths": [str(rubies)],
                 "env_var_name": "RUBY_HOME", "executable": "ruby"},
            ],
        }))

        assert cli("list", "ruby", "--format", "json") == 0

        (language,) = json.loads(capsys.readouterr().out)
        assert language["custom"] is True
        assert language["active"] == str(rubies / "3.3.0")
        assert (cli.config_dir / "ruby_env.sh").read_text().startswith(f'export RUBY_HOME="{rubies / "3.3.0"}"')


class TestUse:
    """Test the use command."""

    def test_writes_script_and_preference(self, cli, node_sdks, capsys):
        cli("paths", "node", "--add", str(node_sdks))

        assert cli("use", "node", str(node_sdks / "v21.6.0") + "/") == 0

        assert "21.6.0 is now active" in capsys.readouterr().out
        script = (cli.config_dir / "node_env.sh").read_text()
        assert script == f'export PATH="{node_sdks / "v21.6.0"}/bin:$PATH"\n'
        prefs = yaml.safe_load((cli.config_dir / "preferences.yaml").read_text())
        assert prefs["ActiveVersion_node"] == str(node_sdks / "v21.6.0")

    def test_unknown_install(self, cli, tmp_path, capsys):
        assert cli("use", "go", str(tmp_path / "nowhere")) == 1
        assert "No Go install found" in capsys.readouterr().err
        assert not (cli.config_dir / "go_env.sh").exists()


class TestPaths:
    """Test the paths command."""

    def test_add_and_show(self, cli, node_sdks, capsys):
        assert cli("paths", "node", "--add", str(node_sdks)) == 0

        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == 4
        assert str(node_sdks) in lines[-1]
        assert "custom" in lines[-1]
        assert "2 entries" in lines[-1]

    def test_duplicate_rejected(self, cli, node_sdks, capsys):
        cli("paths", "node", "--add", str(node_sdks))

        assert cli("paths", "node", "--add", str(node_sdks)) == 1
        assert "Not added" in capsys.readouterr().err

    def test_remove(self, cli, node_sdks, capsys):
        cli("paths", "node", "--add", str(node_sdks))
        capsys.readouterr()

        assert cli("paths", "node", "--remove", str(node_sdks)) == 0
        assert str(node_sdks) not in capsys.readouterr().out
        assert cli("paths", "node", "--remove", str(node_sdks)) == 1

    def test_custom_language_paths_are_read_only(self, cli, tmp_path):
        cli.config_dir.mkdir()
        (cli.config_dir / "preferences.yaml").write_text(yaml.safe_dump({
            "CustomLanguages": [{"identifier": "zig", "name": "Zig", "scan_paths": [str(tmp_path)]}],
        }))

        assert cli("paths", "zig", "--add", "/opt/zig") == 1
        assert cli("paths", "zig") == 0


def test_doctor_json(cli, capsys):
    assert cli("doctor", "--json") == 0

    results = json.loads(capsys.readouterr().out)
    assert results["status"] == "partial"
    assert results["checks"]["go"]["available"] is False
    assert results["config_dir"] == str(cli.config_dir)


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])

    assert exc_info.value.code == 0
    assert __version__ in capsys.readouterr().out
