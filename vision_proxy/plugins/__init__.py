"""Plugin system for tool discovery and management.

This package provides a plugin architecture for tool implementations that
can be discovered, enabled/disabled, and dispatched by the ToolExecutor.

Usage:
    from vision_proxy.plugins import PluginRegistry

    registry = PluginRegistry()
    registry.discover()

    # List available plugins
    print(registry.list_available())  # ['file_read', 'image_summary']

    # Enable specific plugins (later ones override earlier tool names)
    registry.enable('file_read')
    registry.enable('image_summary', config={'model_name': 'glm-4.7'})

    executors = registry.get_enabled_executors()

    # Disable when done
    registry.disable_all()
"""

from .base import ToolPlugin
from .registry import PluginRegistry

__all__ = ['ToolPlugin', 'PluginRegistry']
