"""File reading plugin.

This plugin provides the `readFile` tool that returns text file contents,
or base64-encoded data for image files.
"""

from .plugin import FileReadPlugin, create_plugin

# Plugin kind identifier for registry discovery
PLUGIN_KIND = "tool"

__all__ = [
    "FileReadPlugin",
    "create_plugin",
]
