"""Shared types for tool plugins.

This module defines the small set of types that plugins and the tool
executor exchange: tool declarations and cooperative cancellation.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class ToolSchema:
    """Provider-agnostic tool/function declaration.

    Attributes:
        name: Unique tool name (e.g., 'readFile').
        description: Human-readable description of what the tool does.
        parameters: JSON Schema object describing the tool's parameters.
        category: Optional category for tool organization and filtering.
    """
    name: str
    description: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    category: Optional[str] = None


class CancelledException(Exception):
    """Raised when an operation is cancelled via CancelToken."""

    def __init__(self, message: str = "Operation was cancelled"):
        self.message = message
        super().__init__(self.message)


class CancelToken:
    """Cross-thread request to stop one tool call.

    The host cancels (e.g. on Ctrl-C) while the call runs on a worker
    thread. Long-running work either polls ``is_cancelled`` or registers a
    listener with ``on_cancel()``; the image analyzer uses a listener to
    kill its child process.

    Example:
        token = CancelToken()
        token.on_cancel(process.kill)
        try:
            process.communicate()
        finally:
            token.remove_callback(process.kill)
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._listeners: List[Callable[[], None]] = []

    @property
    def is_cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Mark the call cancelled and run each pending listener once."""
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            listeners, self._listeners = self._listeners, []
        for listener in listeners:
            _run_listener(listener)

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled; False when ``timeout`` seconds pass first."""
        return self._event.wait(timeout)

    def on_cancel(self, listener: Callable[[], None]) -> None:
        """Run ``listener`` on cancel, or right away if already cancelled."""
        with self._lock:
            if not self._event.is_set():
                self._listeners.append(listener)
                return
        _run_listener(listener)

    def remove_callback(self, listener: Callable[[], None]) -> None:
        """Forget a listener once the work it guards has finished."""
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)


def _run_listener(listener: Callable[[], None]) -> None:
    # Listeners run on the cancelling thread; one failure must not stop the rest
    try:
        listener()
    except Exception:
        logger.debug("cancel listener failed", exc_info=True)
