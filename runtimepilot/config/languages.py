"""Language definitions: built-in languages, custom languages, templates.

A LanguageConfig carries everything the core needs to know about a
language (scan paths, the home variable its script exports, the script
file name) plus presentation metadata the UI renders as-is.

Custom languages are persisted as a list of mappings:

    - identifier: ruby
      name: Ruby
      scan_paths: [~/.rbenv/versions, ~/.rvm/rubies]
      env_var_name: RUBY_HOME
      executable: ruby
      order: 100
"""

import uuid
from dataclasses import dataclass, field, replace
from typing import Any, Optional

from ..discovery.paths import PathSource, ScanPathSpec, built_in_scan_paths
from ..utils.constants import CUSTOM_ORDER_START, ENV_SCRIPT_SUFFIX
from ..utils.path_safety import InvalidIdentifierError, validate_identifier, validate_script_file_name

DEFAULT_ICON = "cube.fill"
DEFAULT_COLOR = "#007AFF"


@dataclass
class LanguageConfig:
    """A registered language.

    Attributes:
        identifier: Stable key ("java", "ruby"); names the script and preferences
        display_name: Label shown to the user
        scan_paths: Raw scan paths of a custom language (built-ins use the
            static table in discovery.paths)
        env_var_name: Home variable exported by the script (None: PATH only)
        config_file_name: Script file name; empty means "<identifier>_env.sh"
        order: Display order
        is_custom: True for user-defined languages
        executable: Name expected in <root>/bin; None accepts any directory
        icon_symbol: Presentation metadata
        color_hex: Presentation metadata
        id: Persistent identity, survives identifier renames
    """
    identifier: str
    display_name: str
    scan_paths: list[str] = field(default_factory=list)
    env_var_name: Optional[str] = None
    config_file_name: str = ""
    order: int = CUSTOM_ORDER_START
    is_custom: bool = True
    executable: Optional[str] = None
    icon_symbol: str = DEFAULT_ICON
    color_hex: str = DEFAULT_COLOR
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def script_file_name(self) -> str:
        return self.config_file_name or f"{self.identifier}{ENV_SCRIPT_SUFFIX}"

    def scan_path_specs(self) -> list[ScanPathSpec]:
        """Scan paths as specifications (static table for built-ins)."""
        if not self.is_custom:
            return built_in_scan_paths(self.identifier)
        return [ScanPathSpec(path, PathSource.CUSTOM, False) for path in self.scan_paths]

    def validation_errors(self) -> list[str]:
        """Problems preventing this config from being saved; empty when valid."""
        errors = []
        if not self.display_name.strip():
            errors.append("Name is required")
        if not self.identifier.strip():
            errors.append("Identifier is required")
        else:
            try:
                validate_identifier(self.identifier)
            except InvalidIdentifierError as e:
                errors.append(str(e))
        if self.is_custom and not [p for p in self.scan_paths if p.strip()]:
            errors.append("At least one scan path is required")
        if self.config_file_name:
            try:
                validate_script_file_name(self.config_file_name)
            except InvalidIdentifierError as e:
                errors.append(str(e))
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "identifier": self.identifier,
            "name": self.display_name,
            "scan_paths": list(self.scan_paths),
            "env_var_name": self.env_var_name,
            "config_file_name": self.config_file_name,
            "order": self.order,
            "executable": self.executable,
            "icon_symbol": self.icon_symbol,
            "color_hex": self.color_hex,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "LanguageConfig":
        """Build a custom language from its persisted mapping.

        Raises:
            KeyError: If identifier or name is missing
        """
        return cls(
            identifier=str(data["identifier"]),
            display_name=str(data["name"]),
            scan_paths=[str(p) for p in data.get("scan_paths") or []],
            env_var_name=data.get("env_var_name") or None,
            config_file_name=data.get("config_file_name") or "",
            order=int(data.get("order", CUSTOM_ORDER_START)),
            is_custom=True,
            executable=data.get("executable") or None,
            icon_symbol=data.get("icon_symbol") or DEFAULT_ICON,
            color_hex=data.get("color_hex") or DEFAULT_COLOR,
            id=data.get("id") or uuid.uuid4().hex,
        )


# =============================================================================
# BUILT-IN LANGUAGES
# =============================================================================

BUILT_IN_CONFIGS: dict[str, LanguageConfig] = {
    "java": LanguageConfig(
        "java", "Java", env_var_name="JAVA_HOME", order=0, is_custom=False,
        executable="java", icon_symbol="cup.and.saucer.fill", color_hex="#E76F00", id="java",
    ),
    "node": LanguageConfig(
        "node", "Node.js", order=1, is_custom=False,
        executable="node", icon_symbol="hexagon.fill", color_hex="#339933", id="node",
    ),
    "python": LanguageConfig(
        "python", "Python", order=2, is_custom=False,
        executable="python3", icon_symbol="chevron.left.forwardslash.chevron.right",
        color_hex="#3776AB", id="python",
    ),
    "go": LanguageConfig(
        "go", "Go", env_var_name="GOROOT", order=3, is_custom=False,
        executable="go", icon_symbol="g.circle.fill", color_hex="#00ADD8", id="go",
    ),
}


def built_in_config(identifier: str) -> LanguageConfig:
    """Return a fresh copy of a built-in language's config.

    Raises:
        KeyError: If identifier is not a built-in language
    """
    return replace(BUILT_IN_CONFIGS[identifier])


def is_built_in(identifier: str) -> bool:
    return identifier in BUILT_IN_CONFIGS


# =============================================================================
# TEMPLATES
# =============================================================================

# Presets offered when adding a custom language
LANGUAGE_TEMPLATES: dict[str, dict[str, Any]] = {
    "ruby": {
        "name": "Ruby",
        "identifier": "ruby",
        "icon_symbol": "diamond.fill",
        "color_hex": "#CC342D",
        "scan_paths": ["~/.rbenv/versions", "~/.rvm/rubies", "/usr/local/Cellar/ruby"],
        "env_var_name": "RUBY_HOME",
        "executable": "ruby",
        "order": 100,
    },
    "rust": {
        "name": "Rust",
        "identifier": "rust",
        "icon_symbol": "gearshape.2.fill",
        "color_hex": "#DEA584",
        "scan_paths": ["~/.rustup/toolchains"],
        "env_var_name": "RUSTUP_HOME",
        "executable": "rustc",
        "order": 101,
    },
    "php": {
        "name": "PHP",
        "identifier": "php",
        "icon_symbol": "ellipsis.curlybraces",
        "color_hex": "#777BB4",
        "scan_paths": ["/usr/local/Cellar/php", "/opt/homebrew/Cellar/php"],
        "env_var_name": "PHP_HOME",
        "executable": "php",
        "order": 102,
    },
    "dotnet": {
        "name": ".NET",
        "identifier": "dotnet",
        "icon_symbol": "square.stack.3d.up.fill",
        "color_hex": "#512BD4",
        "scan_paths": ["/usr/local/share/dotnet/sdk", "~/.dotnet/sdk"],
        "env_var_name": "DOTNET_ROOT",
        "order": 103,
    },
    "flutter": {
        "name": "Flutter",
        "identifier": "flutter",
        "icon_symbol": "bird.fill",
        "color_hex": "#02569B",
        "scan_paths": ["~/flutter", "/opt/flutter"],
        "env_var_name": "FLUTTER_ROOT",
        "executable": "flutter",
        "order": 104,
    },
}

CUSTOM_TEMPLATES = tuple(LANGUAGE_TEMPLATES)


def template_config(name: str) -> LanguageConfig:
    """Create a new custom language from a template (ruby, rust, php, ...).

    Built-in identifiers (java, node, python, go) return their built-in
    config.

    Raises:
        KeyError: If there is no template with that name
    """
    if is_built_in(name):
        return built_in_config(name)
    return LanguageConfig.from_dict(dict(LANGUAGE_TEMPLATES[name], id=uuid.uuid4().hex))
