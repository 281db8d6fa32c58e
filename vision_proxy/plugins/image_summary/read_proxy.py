"""readFile decorator that swaps image bytes for a vision-model analysis."""

import logging
import os
from typing import Any, Callable, Dict, Optional

from ..base import ToolOutputCallback
from ..types import CancelToken
from ...tool_runner import get_current_cancel_token, get_current_tool_output_callback
from ...trace import trace
from .classifier import is_supported_image, requires_vision_proxy
from .invoker import ABORTED_MESSAGE, AnalysisAbortedError, AnalysisError, ImageAnalyzer
from .output import extract_category

logger = logging.getLogger(__name__)

ReadExecutor = Callable[[Dict[str, Any]], Any]


class ImageAnalysisError(Exception):
    """Raised by the proxied readFile when the analysis did not complete.

    Attributes:
        aborted: True when the failure was a user cancellation.
    """

    def __init__(self, message: str, aborted: bool = False):
        super().__init__(f"Image analysis failed: {message}")
        self.aborted = aborted


class VisionProxyReadTool:
    """Executor that proxies image reads for text-only models.

    Holds the original readFile executor and delegates to it unchanged
    unless the active model needs the vision proxy and the path is a
    supported image.

    Args:
        original: The wrapped readFile executor.
        analyzer: ImageAnalyzer used for proxied reads.
        model_provider: Returns the active model ID (or None if unknown).
        workspace_root: Returns the directory relative paths resolve against.
    """

    def __init__(
        self,
        original: ReadExecutor,
        analyzer: ImageAnalyzer,
        model_provider: Callable[[], Optional[str]],
        workspace_root: Callable[[], str],
    ) -> None:
        self._original = original
        self._analyzer = analyzer
        self._model_provider = model_provider
        self._workspace_root = workspace_root

    def should_proxy(self, absolute_path: str) -> bool:
        return requires_vision_proxy(self._model_provider()) and is_supported_image(absolute_path)

    def __call__(self, args: Dict[str, Any]) -> Any:
        path = args.get("path") or ""
        absolute_path = os.path.abspath(os.path.join(self._workspace_root(), os.path.expanduser(path)))

        if not path or not self.should_proxy(absolute_path):
            return self._original(args)

        return self.analyze(
            absolute_path,
            cancel_token=get_current_cancel_token(),
            on_update=get_current_tool_output_callback(),
        )

    def analyze(
        self,
        absolute_path: str,
        cancel_token: Optional[CancelToken] = None,
        on_update: Optional[ToolOutputCallback] = None,
    ) -> Dict[str, Any]:
        """Analyze an image in place of reading it.

        Raises:
            ImageAnalysisError: The analysis failed or was cancelled.
        """
        vision_model = self._analyzer.vision_model
        trace("image_summary", f"proxying read of {absolute_path} to {vision_model}")

        if on_update:
            on_update(f"[Analyzing image with {vision_model}...]")

        try:
            summary = self._analyzer.analyze(absolute_path, cancel_token)
            # A cancel that raced a successful exit still wins
            if cancel_token is not None and cancel_token.is_cancelled:
                raise AnalysisAbortedError()
        except AnalysisAbortedError as e:
            raise ImageAnalysisError(str(e), aborted=True) from e
        except AnalysisError as e:
            # The child may die of the same Ctrl-C before the kill lands
            if cancel_token is not None and cancel_token.is_cancelled:
                raise ImageAnalysisError(ABORTED_MESSAGE, aborted=True) from e
            logger.warning(f"Image analysis of {absolute_path} failed: {e}")
            raise ImageAnalysisError(str(e)) from e

        content = f"[Image analyzed with {vision_model}]\n\n{summary}"
        if on_update:
            on_update(content)

        return {
            "path": absolute_path,
            "content": content,
            "vision_model": vision_model,
            "category": extract_category(summary),
        }
