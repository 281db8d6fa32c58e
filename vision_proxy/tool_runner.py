"""Tool execution infrastructure.

This module provides the ToolExecutor class for dispatching tool calls to
plugin executors with support for:
- Per-call cancellation tokens
- Per-call streaming output callbacks
- Output callbacks for real-time plugin output

Per-call values live in thread-local storage for the duration of one
execute() call, so plugins running concurrently on different threads each
see only their own token and callback. Plugins read them through
get_current_cancel_token() and get_current_tool_output_callback().
"""

import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple, TYPE_CHECKING

from vision_proxy.plugins.base import OutputCallback, ToolOutputCallback
from vision_proxy.plugins.types import CancelToken

if TYPE_CHECKING:
    from vision_proxy.plugins.registry import PluginRegistry

logger = logging.getLogger(__name__)

_thread_local = threading.local()


def get_current_cancel_token() -> Optional[CancelToken]:
    """Return the cancel token of the tool call running on this thread."""
    return getattr(_thread_local, 'cancel_token', None)


def get_current_tool_output_callback() -> Optional[ToolOutputCallback]:
    """Return the streaming callback of the tool call running on this thread."""
    return getattr(_thread_local, 'tool_output_callback', None)


class ToolExecutor:
    """Registry mapping tool names to callables.

    Executors accept a single dict argument and return a JSON-serializable
    result. Exceptions raised by an executor are reported as
    ``(False, {'error': str(exc)})`` so the calling model sees a tool error
    instead of the host crashing.
    """

    def __init__(self):
        self._map: Dict[str, Callable[[Dict[str, Any]], Any]] = {}

        # Registry reference for plugin lookups (set via set_registry)
        self._registry: Optional['PluginRegistry'] = None

    def register(self, name: str, fn: Callable[[Dict[str, Any]], Any]) -> None:
        self._map[name] = fn

    def set_registry(self, registry: Optional['PluginRegistry']) -> None:
        """Set the plugin registry and register its enabled executors.

        Args:
            registry: PluginRegistry instance, or None to clear.
        """
        self._registry = registry
        if registry is not None:
            for name, fn in registry.get_enabled_executors().items():
                self.register(name, fn)

    def set_output_callback(self, callback: Optional[OutputCallback]) -> None:
        """Set the output callback for real-time plugin output.

        The callback is forwarded to enabled plugins that implement
        set_output_callback().
        """
        if self._registry:
            for plugin_name in self._registry.list_enabled():
                plugin = self._registry.get_plugin(plugin_name)
                if plugin and hasattr(plugin, 'set_output_callback'):
                    plugin.set_output_callback(callback)

    def execute(
        self,
        name: str,
        args: Dict[str, Any],
        cancel_token: Optional[CancelToken] = None,
        tool_output_callback: Optional[ToolOutputCallback] = None,
    ) -> Tuple[bool, Any]:
        """Execute a tool call.

        Args:
            name: Tool name.
            args: Arguments dict.
            cancel_token: Optional token the caller uses to abort this call.
            tool_output_callback: Optional callback receiving progress chunks.

        Returns:
            Tuple of (success, result).
        """
        fn = self._map.get(name)
        if not fn:
            return False, {'error': f'No executor registered for {name}'}

        previous_token = get_current_cancel_token()
        previous_callback = get_current_tool_output_callback()
        _thread_local.cancel_token = cancel_token
        _thread_local.tool_output_callback = tool_output_callback
        try:
            logger.debug(f"execute: invoking {name}")
            result = fn(args)
            return True, result
        except Exception as exc:
            logger.debug(f"execute: {name} raised {exc}")
            return False, {'error': str(exc)}
        finally:
            _thread_local.cancel_token = previous_token
            _thread_local.tool_output_callback = previous_callback


__all__ = [
    'ToolExecutor',
    'get_current_cancel_token',
    'get_current_tool_output_callback',
]
