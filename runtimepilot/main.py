#!/usr/bin/env python3
"""RuntimePilot command-line entry point.

Usage:
    runtimepilot list [LANG] [--format text|json|yaml]
    runtimepilot use LANG PATH
    runtimepilot paths LANG [--add PATH | --remove PATH]
    runtimepilot doctor [--json]

Global options:
    --config-dir DIR    Scripts and preferences directory
                        (default: $RUNTIMEPILOT_CONFIG_DIR or ~/.config/devmanager)
    -v, --verbose       Log progress to stderr (twice for debug output)

`use` writes <LANG>_env.sh; add `source ~/.config/devmanager/<LANG>_env.sh`
to the shell profile to pick the active version up in new shells.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

import yaml

from . import __version__
from .active import find_record
from .output.env_script import ScriptWriteError
from .scanners.manager import ActivationError, VersionManager, VersionSnapshot
from .services import RuntimePilot
from .utils.check_prerequisites import check_all_prerequisites, format_human_readable

logger = logging.getLogger(__name__)


def _language_entry(manager: VersionManager, snapshot: VersionSnapshot) -> dict[str, Any]:
    active_key = snapshot.active.key if snapshot.active else None
    return {
        "identifier": manager.identifier,
        "name": manager.language.display_name,
        "custom": manager.language.is_custom,
        "script": str(manager.writer.script_path(manager.language)),
        "active": snapshot.active.install_path if snapshot.active else None,
        "versions": [
            dict(record.to_dict(), active=record.key == active_key)
            for record in snapshot.display_versions()
        ],
    }


def _format_text(languages: list[dict[str, Any]]) -> str:
    lines = []
    for language in languages:
        lines.append(f"{language['name']} ({language['identifier']})")
        if not language["versions"]:
            lines.append("  no versions found")
        for version in language["versions"]:
            marker = "*" if version["active"] else " "
            lines.append(f"  {marker} {version['version']:<14} {version['source']:<24} {version['install_path']}")
        lines.append("")
    return "\n".join(lines).rstrip()


def _managers(pilot: RuntimePilot, identifier: Optional[str]) -> list[VersionManager]:
    if identifier is None:
        return pilot.registry.managers()
    manager = pilot.manager(identifier)
    if manager is None:
        raise SystemExit(f"Unknown language: {identifier}")
    return [manager]


def cmd_list(pilot: RuntimePilot, args: argparse.Namespace) -> int:
    """Scan and print installed versions."""
    managers = _managers(pilot, args.language)
    futures = [(manager, manager.refresh()) for manager in managers]
    languages = [_language_entry(manager, future.result()) for manager, future in futures]

    if args.format == "json":
        print(json.dumps(languages, indent=2))
    elif args.format == "yaml":
        print(yaml.dump(languages, default_flow_style=False, sort_keys=False, allow_unicode=True), end="")
    else:
        print(_format_text(languages))
    return 0


def cmd_use(pilot: RuntimePilot, args: argparse.Namespace) -> int:
    """Activate the install at PATH."""
    manager = _managers(pilot, args.language)[0]
    snapshot = manager.refresh_sync()
    record = find_record(snapshot.versions, args.path)
    if record is None:
        print(f"No {manager.language.display_name} install found at {args.path}", file=sys.stderr)
        print("Run `runtimepilot list %s` to see discovered versions." % manager.identifier, file=sys.stderr)
        return 1

    try:
        script = manager.set_active(record)
    except (ScriptWriteError, ActivationError) as e:
        print(f"Activation failed: {e}", file=sys.stderr)
        return 1

    print(f"{manager.language.display_name} {record.version} is now active ({script})")
    return 0


def cmd_paths(pilot: RuntimePilot, args: argparse.Namespace) -> int:
    """Show, add or remove scan paths."""
    identifier = args.language
    language = pilot.registry.get(identifier)
    if language is None:
        raise SystemExit(f"Unknown language: {identifier}")

    if language.config.is_custom and (args.add or args.remove):
        print("Scan paths of custom languages are edited with the language itself", file=sys.stderr)
        return 1
    if args.add:
        if not pilot.scan_paths.add_custom_path(identifier, args.add):
            print(f"Not added: {args.add} is empty, already present or overlaps a built-in path", file=sys.stderr)
            return 1
    if args.remove:
        if not pilot.scan_paths.remove_custom_path(identifier, args.remove):
            print(f"Not a custom scan path: {args.remove}", file=sys.stderr)
            return 1

    if language.config.is_custom:
        specs = language.config.scan_path_specs()
    else:
        specs = pilot.scan_paths.all_scan_paths(identifier)

    for spec in specs:
        status = pilot.scan_paths.check_path_status(spec.path)
        if not status.exists:
            state = "missing"
        elif not status.is_accessible:
            state = "no access"
        else:
            state = f"{status.version_count} entries"
        kind = "built-in" if spec.is_built_in else "custom"
        print(f"  {spec.path:<45} {spec.label:<24} {kind:<9} {state}")
    return 0


def cmd_doctor(pilot: RuntimePilot, args: argparse.Namespace) -> int:
    """Report which external tools are available."""
    results = check_all_prerequisites()
    results["config_dir"] = str(pilot.config_dir)
    if args.json:
        print(json.dumps(results, indent=2))
    else:
        print(format_human_readable(results))
        print(f"\nConfig directory: {pilot.config_dir}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="runtimepilot", description="Discover and switch language runtimes")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--config-dir", type=Path, help="scripts and preferences directory")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="log to stderr (-vv for debug)")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("list", help="list installed versions")
    p.add_argument("language", nargs="?", help="language identifier (default: all)")
    p.add_argument("--format", choices=("text", "json", "yaml"), default="text")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("use", help="activate an installed version")
    p.add_argument("language")
    p.add_argument("path", help="install path as shown by `list`")
    p.set_defaults(func=cmd_use)

    p = sub.add_parser("paths", help="show or edit scan paths")
    p.add_argument("language")
    group = p.add_mutually_exclusive_group()
    group.add_argument("--add", metavar="PATH")
    group.add_argument("--remove", metavar="PATH")
    p.set_defaults(func=cmd_paths)

    p = sub.add_parser("doctor", help="check external tools")
    p.add_argument("--json", action="store_true")
    p.set_defaults(func=cmd_doctor)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    pilot = RuntimePilot.create(config_dir=args.config_dir)
    return args.func(pilot, args)


if __name__ == "__main__":
    sys.exit(main())
