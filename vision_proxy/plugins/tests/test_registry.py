"""Tests for plugin registry ordering and collection."""

from typing import Any, Callable, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from ..base import CommandParameter, UserCommand, parse_command_args
from ..registry import PluginRegistry
from ..types import ToolSchema


class StubPlugin:
    """Minimal plugin exposing a fixed set of tools."""

    def __init__(self, name: str, tools: Dict[str, Callable[[Dict[str, Any]], Any]],
                 commands: Optional[List[UserCommand]] = None):
        self._name = name
        self._tools = tools
        self._commands = commands or []
        self.initialize_calls: List[Optional[Dict[str, Any]]] = []
        self.shutdown_calls = 0

    @property
    def name(self) -> str:
        return self._name

    def get_tool_schemas(self) -> List[ToolSchema]:
        return [ToolSchema(name=t, description=f"{self._name}:{t}", parameters={}) for t in self._tools]

    def get_executors(self) -> Dict[str, Callable[[Dict[str, Any]], Any]]:
        return dict(self._tools)

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        self.initialize_calls.append(config)

    def shutdown(self) -> None:
        self.shutdown_calls += 1

    def get_system_instructions(self) -> Optional[str]:
        return None

    def get_auto_approved_tools(self) -> List[str]:
        return list(self._tools)

    def get_user_commands(self) -> List[UserCommand]:
        return self._commands


@pytest.fixture
def registry():
    return PluginRegistry()


class TestEnableDisable:
    """Tests for enabling and disabling plugins."""

    def test_enable_unknown_plugin(self, registry):
        with pytest.raises(ValueError, match="not found"):
            registry.enable("missing")

    def test_enable_initializes_once(self, registry):
        plugin = StubPlugin("a", {})
        registry.register(plugin)

        registry.enable("a", config={"x": 1})
        registry.enable("a", config={"x": 1})

        assert plugin.initialize_calls == [{"x": 1}]
        assert registry.list_enabled() == ["a"]

    def test_new_config_reinitializes(self, registry):
        plugin = StubPlugin("a", {})
        registry.register(plugin)

        registry.enable("a", config={"x": 1})
        registry.enable("a", config={"x": 2})

        assert plugin.initialize_calls == [{"x": 1}, {"x": 2}]
        assert plugin.shutdown_calls == 1

    def test_disable_all_in_reverse_order(self, registry):
        order = []
        for name in ("a", "b"):
            plugin = StubPlugin(name, {})
            plugin.shutdown = lambda n=name: order.append(n)
            registry.register(plugin)
            registry.enable(name)

        registry.disable_all()

        assert order == ["b", "a"]
        assert registry.list_enabled() == []

    def test_list_enabled_keeps_enable_order(self, registry):
        for name in ("b", "a", "c"):
            registry.register(StubPlugin(name, {}))
        for name in ("c", "a"):
            registry.enable(name)

        assert registry.list_enabled() == ["c", "a"]


class TestOverrideOrdering:
    """Tests for later-enabled plugins overriding tool names."""

    def test_later_plugin_wins(self, registry):
        base_read, proxy_read = MagicMock(), MagicMock()
        registry.register(StubPlugin("base", {"readFile": base_read, "other": MagicMock()}))
        registry.register(StubPlugin("proxy", {"readFile": proxy_read}))

        registry.enable("base")
        registry.enable("proxy")
        executors = registry.get_enabled_executors()

        assert executors["readFile"] is proxy_read
        assert "other" in executors

    def test_enable_order_not_registration_order(self, registry):
        base_read, proxy_read = MagicMock(), MagicMock()
        registry.register(StubPlugin("base", {"readFile": base_read}))
        registry.register(StubPlugin("proxy", {"readFile": proxy_read}))

        registry.enable("proxy")
        registry.enable("base")

        assert registry.get_enabled_executors()["readFile"] is base_read


class TestUserCommands:
    """Tests for user command collection and argument parsing."""

    def test_plugin_for_command(self, registry):
        command = UserCommand("analyze", "Analyze something")
        registry.register(StubPlugin("a", {}, commands=[command]))
        registry.enable("a")

        assert registry.get_enabled_user_commands() == [command]
        assert registry.get_plugin_for_command("analyze").name == "a"
        assert registry.get_plugin_for_command("other") is None

    def test_later_plugin_serves_shared_command(self, registry):
        command = UserCommand("analyze", "Analyze something")
        registry.register(StubPlugin("a", {}, commands=[command]))
        registry.register(StubPlugin("b", {}, commands=[command]))
        registry.enable("a")
        registry.enable("b")

        assert registry.get_plugin_for_command("analyze").name == "b"

    def test_disabled_plugin_commands_hidden(self, registry):
        registry.register(StubPlugin("a", {}, commands=[UserCommand("analyze", "Analyze")]))
        registry.enable("a")
        registry.disable("a")

        assert registry.get_enabled_user_commands() == []
        assert registry.get_plugin_for_command("analyze") is None

    def test_parse_without_parameters(self):
        command = UserCommand("cmd", "desc")
        assert parse_command_args(command, "a  b") == {"args": ["a", "b"]}

    def test_parse_capture_rest_keeps_spacing(self):
        command = UserCommand("cmd", "desc", parameters=[
            CommandParameter("mode", "Mode", required=True),
            CommandParameter("path", "Path", capture_rest=True),
        ])
        assert parse_command_args(command, "fast  my  file.png ") == {
            "mode": "fast",
            "path": "my  file.png",
        }

    def test_parse_empty(self):
        command = UserCommand("cmd", "desc", parameters=[CommandParameter("path", "Path")])
        assert parse_command_args(command, "   ") == {}
