"""Plugin registry for discovering, loading, and managing tool plugins."""

import importlib
import logging
import pkgutil
from pathlib import Path
from typing import Dict, List, Callable, Any, Optional

from .base import ToolPlugin, UserCommand

logger = logging.getLogger(__name__)


class PluginRegistry:
    """Manages plugin discovery, lifecycle, and enable/disable state.

    Enable order matters: when two enabled plugins expose a tool with the
    same name, the plugin enabled last provides the executor. Wrapping
    plugins (such as image_summary over file_read) rely on this.

    Usage:
        registry = PluginRegistry()
        registry.discover()

        print(registry.list_available())  # ['file_read', 'image_summary']

        registry.enable('file_read')
        registry.enable('image_summary', config={'model_name': 'glm-4.7'})

        commands = registry.get_enabled_user_commands()
        executors = registry.get_enabled_executors()

        registry.disable_all()
    """

    def __init__(self):
        self._plugins: Dict[str, ToolPlugin] = {}
        # Insertion-ordered; values are unused
        self._enabled: Dict[str, None] = {}
        self._configs: Dict[str, Dict[str, Any]] = {}

    def discover(self, plugin_dir: Optional[Path] = None) -> List[str]:
        """Discover all plugins from the plugins directory.

        Scans the plugin directory for Python modules that export a
        `create_plugin()` factory function, and instantiates each plugin.

        Args:
            plugin_dir: Directory to scan. Defaults to this package's directory.

        Returns:
            List of discovered plugin names.
        """
        if plugin_dir is None:
            plugin_dir = Path(__file__).parent

        discovered = []

        for finder, name, ispkg in pkgutil.iter_modules([str(plugin_dir)]):
            # Skip internal modules
            if name.startswith('_') or name in ('base', 'registry', 'types', 'tests'):
                continue

            try:
                module = importlib.import_module(f".{name}", package=__package__)

                if hasattr(module, 'create_plugin'):
                    plugin = module.create_plugin()

                    if isinstance(plugin, ToolPlugin):
                        self.register(plugin)
                        discovered.append(plugin.name)
                    else:
                        logger.warning(f"{name}: plugin does not implement ToolPlugin protocol")
                else:
                    logger.debug(f"{name}: no create_plugin() function found")

            except Exception as exc:
                logger.warning(f"Error loading plugin '{name}': {exc}")

        return discovered

    def register(self, plugin: ToolPlugin) -> None:
        """Register an already-constructed plugin instance."""
        self._plugins[plugin.name] = plugin

    def list_available(self) -> List[str]:
        """List all discovered plugin names."""
        return list(self._plugins.keys())

    def list_enabled(self) -> List[str]:
        """List currently enabled plugin names, in enable order."""
        return list(self._enabled)

    def get_plugin(self, name: str) -> Optional[ToolPlugin]:
        """Get a plugin by name, or None if not found."""
        return self._plugins.get(name)

    def get_plugin_for_command(self, command_name: str) -> Optional[ToolPlugin]:
        """Get the enabled plugin that declares a user command."""
        for name in reversed(list(self._enabled)):
            plugin = self._plugins[name]
            if any(cmd.name == command_name for cmd in plugin.get_user_commands()):
                return plugin
        return None

    def enable(self, name: str, config: Optional[Dict[str, Any]] = None) -> None:
        """Enable a plugin.

        Calls the plugin's initialize() method if this is the first time
        enabling it, or if a new config is provided.

        Args:
            name: Plugin name to enable.
            config: Optional configuration dict for the plugin.

        Raises:
            ValueError: If the plugin is not found.
        """
        if name not in self._plugins:
            raise ValueError(f"Plugin '{name}' not found. Available: {self.list_available()}")

        plugin = self._plugins[name]

        if name not in self._enabled:
            plugin.initialize(config)
            if config:
                self._configs[name] = config
            self._enabled[name] = None
        elif config and config != self._configs.get(name):
            # Re-initialize with new config
            plugin.shutdown()
            plugin.initialize(config)
            self._configs[name] = config

    def disable(self, name: str) -> None:
        """Disable a plugin, calling its shutdown() method."""
        if name in self._enabled:
            self._plugins[name].shutdown()
            del self._enabled[name]
            self._configs.pop(name, None)

    def disable_all(self) -> None:
        """Disable all enabled plugins."""
        for name in reversed(list(self._enabled)):
            self.disable(name)

    def get_enabled_executors(self) -> Dict[str, Callable[[Dict[str, Any]], Any]]:
        """Get executor callables from all enabled plugins.

        Later-enabled plugins override earlier ones for the same tool name.
        """
        executors = {}
        for name in self._enabled:
            try:
                executors.update(self._plugins[name].get_executors())
            except Exception as exc:
                logger.warning(f"Error getting executors from '{name}': {exc}")
        return executors

    def get_enabled_user_commands(self) -> List[UserCommand]:
        """Get user command declarations from all enabled plugins."""
        commands: List[UserCommand] = []
        for name in self._enabled:
            commands.extend(self._plugins[name].get_user_commands())
        return commands

