"""
Unit tests for the extension manager.

Covers discovery, validation failures, configuration toggles, lifecycle
hooks and statistics.
"""

import json
from unittest.mock import Mock

from islamwiki.core.configuration import ConfigurationManager
from islamwiki.extensions import ExtensionManager
from islamwiki.extensions.manager import config_flag_key
from islamwiki.server.core.config import Settings


class TestExtensionDiscovery:
    """Test available and enabled extension listing."""

    def test_available_extensions_are_sorted(self, container, write_extension, extensions_dir):
        write_extension("Zakat")
        write_extension("Adhan")
        (extensions_dir / "NoManifest").mkdir()
        (extensions_dir / "README.txt").write_text("not an extension")

        manager = ExtensionManager(container, extensions_dir)

        assert manager.get_available_extensions() == ["Adhan", "Zakat"]

    def test_missing_extensions_path(self, container, tmp_path):
        manager = ExtensionManager(container, tmp_path / "does-not-exist")

        assert manager.get_available_extensions() == []
        assert manager.load_extensions() == 0

    def test_extensions_path_from_settings(self, container, make_settings, extensions_dir):
        container.instance(Settings, make_settings())

        manager = ExtensionManager(container)

        assert manager.extensions_path == extensions_dir

    def test_enabled_extensions_from_settings_list(self, container, make_settings, write_extension, extensions_dir):
        write_extension("Adhan")
        write_extension("Zakat")
        container.instance(Settings, make_settings(ISLAMWIKI_ENABLED_EXTENSIONS=["Zakat"]))

        manager = ExtensionManager(container)

        assert manager.get_enabled_extensions() == ["Zakat"]
        assert manager.load_extensions() == 1
        assert manager.is_extension_loaded("Zakat")
        assert not manager.is_extension_loaded("Adhan")

    def test_configuration_flag_disables_extension(self, container, write_extension, extensions_dir):
        write_extension("EnhancedMarkdown")
        write_extension("GitIntegration")
        config = Mock(spec=ConfigurationManager)
        config.get_value.side_effect = lambda key, default=None: {
            "extensions.enable_git_integration": False
        }.get(key, default)
        container.instance(ConfigurationManager, config)

        manager = ExtensionManager(container, extensions_dir)

        assert manager.get_enabled_extensions() == ["EnhancedMarkdown"]

    def test_config_flag_key(self):
        assert config_flag_key("EnhancedMarkdown") == "extensions.enable_enhanced_markdown"
        assert config_flag_key("GitIntegration") == "extensions.enable_git_integration"
        assert config_flag_key("quran-links") == "extensions.enable_quran_links"


class TestExtensionLoading:
    """Test loading and its failure modes."""

    def test_load_extensions_loads_all(self, container, hook_manager, write_extension, extensions_dir):
        write_extension("Adhan")
        write_extension("Zakat")
        loaded_events = []
        hook_manager.register("ExtensionLoaded", lambda name, extension: loaded_events.append(name))

        manager = ExtensionManager(container, extensions_dir)

        assert manager.load_extensions() == 2
        assert sorted(manager.get_loaded_extensions()) == ["Adhan", "Zakat"]
        assert loaded_events == ["Adhan", "Zakat"]
        assert manager.get_extension_metadata("Adhan")["version"] == "1.2.0"
        assert set(manager.get_all_extension_metadata()) == {"Adhan", "Zakat"}

    def test_loading_twice_is_a_no_op(self, container, hook_manager, write_extension, extensions_dir):
        write_extension("Adhan")
        manager = ExtensionManager(container, extensions_dir)

        assert manager.load_extension("Adhan")
        assert manager.load_extension("Adhan")
        assert len(hook_manager.get_hook_callbacks("ContentParse")) == 1

    def test_class_name_from_manifest(self, container, write_extension, extensions_dir):
        source = (
            "from islamwiki.extensions import Extension\n"
            "\n"
            "class PrayerTimesExtension(Extension):\n"
            "    pass\n"
        )
        write_extension(
            "PrayerTimes",
            source=source,
            main="prayer_times.py",
            manifest={"name": "PrayerTimes", "version": "0.1.0", "main": "prayer_times.py", "class": "PrayerTimesExtension"},
        )
        manager = ExtensionManager(container, extensions_dir)

        assert manager.load_extension("PrayerTimes")
        assert type(manager.get_extension("PrayerTimes")).__name__ == "PrayerTimesExtension"

    def test_missing_directory(self, container, extensions_dir):
        manager = ExtensionManager(container, extensions_dir)

        assert manager.load_extension("Ghost") is False

    def test_invalid_manifest_json(self, container, extensions_dir):
        directory = extensions_dir / "Broken"
        directory.mkdir()
        (directory / "extension.json").write_text("{not json")

        manager = ExtensionManager(container, extensions_dir)

        assert manager.load_extension("Broken") is False

    def test_missing_required_fields(self, container, write_extension, extensions_dir):
        write_extension("Partial", manifest={"name": "Partial", "main": "extension.py"})
        manager = ExtensionManager(container, extensions_dir)

        assert manager.load_extension("Partial") is False

    def test_missing_main_file(self, container, extensions_dir):
        directory = extensions_dir / "NoMain"
        directory.mkdir()
        (directory / "extension.json").write_text(json.dumps({"name": "NoMain", "version": "1.0.0", "main": "missing.py"}))
        manager = ExtensionManager(container, extensions_dir)

        assert manager.load_extension("NoMain") is False

    def test_class_not_found(self, container, write_extension, extensions_dir):
        write_extension("WrongClass", source="VALUE = 1\n")
        manager = ExtensionManager(container, extensions_dir)

        assert manager.load_extension("WrongClass") is False

    def test_class_must_subclass_extension(self, container, write_extension, extensions_dir):
        write_extension("NotAnExtension", source="class NotAnExtension:\n    pass\n")
        manager = ExtensionManager(container, extensions_dir)

        assert manager.load_extension("NotAnExtension") is False
        assert not manager.is_extension_loaded("NotAnExtension")

    def test_import_error_is_contained(self, container, write_extension, extensions_dir):
        write_extension("Exploding", source="raise RuntimeError('import time failure')\n")
        manager = ExtensionManager(container, extensions_dir)

        assert manager.load_extension("Exploding") is False

    def test_initialize_error_is_contained(self, container, write_extension, extensions_dir):
        source = (
            "from islamwiki.extensions import Extension\n"
            "\n"
            "class Faulty(Extension):\n"
            "    def on_initialize(self):\n"
            "        raise ValueError('cannot start')\n"
        )
        write_extension("Faulty", source=source)
        manager = ExtensionManager(container, extensions_dir)

        assert manager.load_extension("Faulty") is False
        assert manager.get_extension("Faulty") is None

    def test_initialize_error_removes_registered_hooks(self, container, hook_manager, write_extension, extensions_dir):
        source = (
            "from islamwiki.extensions import Extension\n"
            "\n"
            "class HalfStarted(Extension):\n"
            "    def register_hooks(self):\n"
            "        self.add_hook('ContentParse', self.on_content_parse)\n"
            "\n"
            "    def on_content_parse(self, text):\n"
            "        return text.upper()\n"
            "\n"
            "    def on_initialize(self):\n"
            "        raise ValueError('cannot start')\n"
        )
        write_extension("HalfStarted", source=source)
        manager = ExtensionManager(container, extensions_dir)

        assert manager.load_extension("HalfStarted") is False
        assert not hook_manager.has_hook("ContentParse")
        assert hook_manager.run("ContentParse", "text") == []


class TestExtensionLifecycleManagement:
    """Test enable/disable and statistics."""

    def test_disable_extension(self, container, hook_manager, write_extension, extensions_dir):
        write_extension("Adhan")
        disabled_events = []
        hook_manager.register("ExtensionDisabled", lambda name, extension: disabled_events.append(name))
        manager = ExtensionManager(container, extensions_dir)
        manager.load_extension("Adhan")

        assert manager.disable_extension("Adhan") is True
        assert manager.disable_extension("Adhan") is False
        assert not manager.is_extension_loaded("Adhan")
        assert manager.get_extension_metadata("Adhan") is None
        assert hook_manager.run("ContentParse", "text") == []
        assert disabled_events == ["Adhan"]

    def test_enable_extension(self, container, write_extension, extensions_dir):
        write_extension("Adhan")
        manager = ExtensionManager(container, extensions_dir)

        assert manager.enable_extension("Adhan") is True
        assert manager.enable_extension("Adhan") is True
        assert manager.is_extension_loaded("Adhan")

    def test_statistics(self, container, write_extension, extensions_dir):
        write_extension("Adhan")
        write_extension("Zakat")
        manager = ExtensionManager(container, extensions_dir)
        manager.load_extension("Adhan")

        stats = manager.get_statistics()

        assert stats["total_extensions"] == 1
        assert stats["available_extensions"] == 2
        assert stats["enabled_extensions"] == 2
        assert stats["extensions"]["Adhan"]["hooks"] == ["ContentParse"]
        assert manager.hook_manager is container.get(type(manager.hook_manager))
        assert manager.container is container
