"""Rich terminal implementation of the command UI.

Notifications and results are rendered with Rich; results open in the
user's editor ($EDITOR or $VISUAL) when one is configured.
"""

import os
import subprocess
import tempfile
import threading
from typing import Any, Callable, Dict, Optional, TypeVar

from rich.console import Console
from rich.markdown import Markdown
from rich.markup import escape
from rich.panel import Panel
from rich.text import Text

from .plugins.types import CancelToken

T = TypeVar("T")

LEVEL_STYLES = {
    "info": "cyan",
    "warning": "yellow",
    "error": "bold red",
}


def get_editor() -> Optional[str]:
    """Get the user's preferred editor, or None when none is configured."""
    return os.environ.get("EDITOR") or os.environ.get("VISUAL")


class ConsoleCommandUI:
    """CommandUI backed by a Rich console.

    Args:
        console: Console to render to (default: a new stderr-aware Console).
        interactive: Override terminal detection; None means use the
            console's own is_terminal check.
    """

    def __init__(self, console: Optional[Console] = None, interactive: Optional[bool] = None):
        self.console = console or Console()
        self._interactive = interactive
        # Set when the user pressed Ctrl-C during the last loader
        self.cancelled = False

    @property
    def has_ui(self) -> bool:
        if self._interactive is not None:
            return self._interactive
        return self.console.is_terminal

    def notify(self, message: str, level: str = "info") -> None:
        self.console.print(Text(message, style=LEVEL_STYLES.get(level, "")))

    def editor(self, title: str, text: str) -> None:
        editor = get_editor()
        if not editor:
            self.console.print(Panel(Markdown(text), title=title, border_style="cyan"))
            return

        with tempfile.NamedTemporaryFile(
            mode='w',
            suffix='.md',
            prefix='image-analysis-',
            delete=False,
            encoding='utf-8',
        ) as f:
            f.write(text)
            temp_path = f.name

        try:
            result = subprocess.run([editor, temp_path], check=False)
            if result.returncode != 0:
                self.notify(f"Editor exited with code {result.returncode}", "warning")
        except OSError as e:
            self.notify(f"Could not start editor {editor}: {e}", "warning")
            self.console.print(Panel(Markdown(text), title=title, border_style="cyan"))
        finally:
            os.unlink(temp_path)

    def run_with_loader(self, label: str, task: Callable[[], T], cancel_token: CancelToken) -> T:
        """Run task on a worker thread under a spinner; Ctrl-C cancels the token."""
        outcome: Dict[str, Any] = {}
        self.cancelled = False

        def worker() -> None:
            try:
                outcome["result"] = task()
            except BaseException as e:
                outcome["error"] = e

        thread = threading.Thread(target=worker, name="analyze-image", daemon=True)
        thread.start()

        with self.console.status(f"{escape(label)} [dim](Ctrl-C to cancel)[/]"):
            while thread.is_alive():
                try:
                    thread.join(0.1)
                except KeyboardInterrupt:
                    self.cancelled = True
                    cancel_token.cancel()

        if "error" in outcome:
            raise outcome["error"]
        return outcome["result"]
