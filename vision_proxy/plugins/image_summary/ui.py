"""UI surface consumed by the analyze-image command."""

from typing import Callable, Protocol, TypeVar, runtime_checkable

from ..types import CancelToken

T = TypeVar("T")


@runtime_checkable
class CommandUI(Protocol):
    """Interactive surface a host provides to user commands.

    Levels passed to notify() are "info", "warning" or "error".
    """

    @property
    def has_ui(self) -> bool:
        """False in headless/print modes where nothing can be shown."""
        ...

    def notify(self, message: str, level: str = "info") -> None:
        ...

    def editor(self, title: str, text: str) -> None:
        """Present text in an editor/pager surface."""
        ...

    def run_with_loader(self, label: str, task: Callable[[], T], cancel_token: CancelToken) -> T:
        """Run task while showing a loader labelled with label.

        A user abort must call cancel_token.cancel(). Returns the task's
        result or re-raises its exception once the task has finished.
        """
        ...
