"""Tests for the language registry."""

import pytest

from runtimepilot.config.languages import LanguageConfig, built_in_config
from runtimepilot.registry import DuplicateLanguageError, LanguageRegistry
from runtimepilot.scanners.manager import VersionManager

from .conftest import static_scanner


@pytest.fixture
def make_manager(resolver, writer):
    def make(config):
        return VersionManager(config, static_scanner(config.identifier, []), resolver, writer)
    return make


class TestLanguageRegistry:
    """Test registration rules and ordering."""

    def test_register_and_get(self, make_manager):
        registry = LanguageRegistry()
        java = built_in_config("java")
        manager = make_manager(java)

        registry.register(java, manager)

        assert registry.is_registered("java")
        assert registry.get("java").manager is manager
        assert registry.get("ruby") is None
        assert len(registry) == 1

    def test_built_in_may_replace_itself(self, make_manager):
        registry = LanguageRegistry()
        registry.register(built_in_config("go"), make_manager(built_in_config("go")))
        replacement = make_manager(built_in_config("go"))

        registry.register(built_in_config("go"), replacement)

        assert registry.get("go").manager is replacement

    def test_custom_cannot_take_built_in_identifier(self, make_manager):
        registry = LanguageRegistry()
        fake = LanguageConfig("java", "My Java", scan_paths=["/j"])

        with pytest.raises(DuplicateLanguageError):
            registry.register(fake, make_manager(fake))

    def test_duplicate_custom_identifier(self, make_manager):
        registry = LanguageRegistry()
        first = LanguageConfig("ruby", "Ruby", scan_paths=["/a"])
        second = LanguageConfig("ruby", "Other Ruby", scan_paths=["/b"])
        registry.register(first, make_manager(first))

        with pytest.raises(DuplicateLanguageError):
            registry.register(second, make_manager(second))

        assert registry.get("ruby").config is first

    def test_unregister(self, make_manager):
        registry = LanguageRegistry()
        ruby = LanguageConfig("ruby", "Ruby", scan_paths=["/a"])
        registry.register(ruby, make_manager(ruby))

        assert registry.unregister("ruby") is True
        assert registry.unregister("ruby") is False
        assert len(registry) == 0

    def test_ordering(self, make_manager):
        registry = LanguageRegistry()
        configs = [
            LanguageConfig("zig", "Zig", scan_paths=["/z"], order=100),
            built_in_config("go"),
            LanguageConfig("ada", "Ada", scan_paths=["/a"], order=100),
            built_in_config("java"),
        ]
        for config in configs:
            registry.register(config, make_manager(config))

        assert [c.identifier for c in registry.all()] == ["java", "go", "ada", "zig"]
        assert [m.identifier for m in registry.managers()] == ["java", "go", "ada", "zig"]
