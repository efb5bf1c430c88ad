"""Tests for plugin discovery and registration."""

import sys
import types
from importlib.metadata import EntryPoint

import pytest

from docgraph.config.constants import PLUGIN_ENTRY_POINT_GROUP
from docgraph.config.models import ConverterConfig
from docgraph.converter import Converter
from docgraph.core.errors import ErrorCode, InternalError
from docgraph.plugins import loader
from docgraph.plugins.comment import CommentPlugin
from docgraph.plugins.module_names import ModuleNamePlugin
from docgraph.plugins.sort import SortPlugin


class RecordingPlugin:
    registered: list[Converter] = []

    def register(self, converter: Converter) -> None:
        RecordingPlugin.registered.append(converter)


@pytest.fixture
def no_entry_points(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(loader, "entry_points", lambda group: [])


@pytest.fixture
def fake_plugin_module(monkeypatch: pytest.MonkeyPatch) -> str:
    module = types.ModuleType("fake_docgraph_plugin")
    module.RecordingPlugin = RecordingPlugin
    module.instance = RecordingPlugin()
    module.not_a_plugin = object()
    monkeypatch.setitem(sys.modules, "fake_docgraph_plugin", module)
    RecordingPlugin.registered = []
    return "fake_docgraph_plugin"


class TestImportPlugin:
    """Dotted path imports."""

    @pytest.mark.parametrize("path", ["no_colon", ":attr", "module:"])
    def test_given_malformed_path_when_imported_then_load_failed(self, path: str) -> None:
        with pytest.raises(InternalError) as exc_info:
            loader.import_plugin(path)
        assert exc_info.value.code == ErrorCode.INTERNAL_PLUGIN_LOAD_FAILED

    def test_given_missing_module_when_imported_then_load_failed(self) -> None:
        with pytest.raises(InternalError) as exc_info:
            loader.import_plugin("docgraph_no_such_module:Plugin")
        assert exc_info.value.details["plugin"] == "docgraph_no_such_module:Plugin"

    def test_given_missing_attribute_when_imported_then_load_failed(self, fake_plugin_module: str) -> None:
        with pytest.raises(InternalError, match="Failed to load plugin"):
            loader.import_plugin(f"{fake_plugin_module}:Missing")

    def test_given_object_without_register_when_imported_then_load_failed(self, fake_plugin_module: str) -> None:
        with pytest.raises(InternalError, match="register"):
            loader.import_plugin(f"{fake_plugin_module}:not_a_plugin")

    def test_given_class_when_imported_then_instantiated(self, fake_plugin_module: str) -> None:
        plugin = loader.import_plugin(f"{fake_plugin_module}:RecordingPlugin")
        assert isinstance(plugin, RecordingPlugin)

    def test_given_instance_when_imported_then_returned_as_is(self, fake_plugin_module: str) -> None:
        plugin = loader.import_plugin(f"{fake_plugin_module}:instance")
        assert plugin is sys.modules[fake_plugin_module].instance


class TestDiscoverPlugins:
    """Entry point discovery."""

    def test_given_entry_points_when_discovered_then_disabled_skipped(self, monkeypatch: pytest.MonkeyPatch) -> None:
        # Given
        found = [
            EntryPoint("sorter", "docgraph.plugins.sort:SortPlugin", PLUGIN_ENTRY_POINT_GROUP),
            EntryPoint("off", "docgraph.plugins.comment:CommentPlugin", PLUGIN_ENTRY_POINT_GROUP),
        ]
        monkeypatch.setattr(loader, "entry_points", lambda group: found if group == PLUGIN_ENTRY_POINT_GROUP else [])

        # When
        plugins = loader.discover_plugins({"off"})

        # Then
        assert [name for name, _ in plugins] == ["sorter"]
        assert isinstance(plugins[0][1], SortPlugin)

    def test_given_broken_entry_point_when_discovered_then_load_failed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        # Given
        broken = [EntryPoint("broken", "docgraph_no_such_module:Plugin", PLUGIN_ENTRY_POINT_GROUP)]
        monkeypatch.setattr(loader, "entry_points", lambda group: broken)

        # When / Then
        with pytest.raises(InternalError) as exc_info:
            loader.discover_plugins(set())
        assert exc_info.value.details["plugin"] == "broken"


class TestLoadPlugins:
    """Registration with a converter."""

    @pytest.mark.usefixtures("no_entry_points")
    def test_given_default_config_when_loaded_then_builtins_registered(self) -> None:
        # Given
        converter = Converter()

        # When
        plugins = loader.load_plugins(converter)

        # Then
        assert [type(p) for p in plugins] == [CommentPlugin, SortPlugin, ModuleNamePlugin]
        assert converter.events.listener_count(converter.EVENT_END) == 1
        assert converter.events.listener_count(converter.EVENT_FINALIZE_NAMES) == 1

    @pytest.mark.usefixtures("no_entry_points")
    def test_given_disabled_builtin_when_loaded_then_skipped(self) -> None:
        # Given
        converter = Converter(ConverterConfig(disable_plugins=["sort"]))

        # When
        plugins = loader.load_plugins(converter)

        # Then
        assert not any(isinstance(p, SortPlugin) for p in plugins)
        assert converter.events.listener_count(converter.EVENT_END) == 0

    @pytest.mark.usefixtures("no_entry_points")
    def test_given_configured_path_when_loaded_then_registered_last(self, fake_plugin_module: str) -> None:
        # Given
        converter = Converter(
            ConverterConfig(plugins=[f"{fake_plugin_module}:RecordingPlugin"], disable_plugins=["comment"])
        )

        # When
        plugins = loader.load_plugins(converter)

        # Then
        assert isinstance(plugins[-1], RecordingPlugin)
        assert RecordingPlugin.registered == [converter]
        assert len(plugins) == 3
