"""Image summary plugin.

When a text-only GLM model (glm-4.6, glm-4.7, glm-4.7-flash) is active, this
plugin replaces readFile for image files: instead of returning image bytes
the model cannot see, it runs the analysis CLI with the vision model
(glm-4.6v) and returns the textual analysis.

Commands:
    analyze-image <path>    - Analyze an image and show the result in an editor
"""

import os
from typing import Any, Callable, Dict, List, Optional

from ..base import CommandParameter, OutputCallback, UserCommand
from ..file_read import FileReadPlugin
from ..types import CancelToken, ToolSchema
from ...trace import trace
from .classifier import is_supported_image, requires_vision_proxy
from .invoker import AnalysisAbortedError, AnalysisError, ImageAnalyzer
from .read_proxy import VisionProxyReadTool
from .ui import CommandUI

COMMAND_NAME = "analyze-image"


class ImageSummaryPlugin:
    """Plugin that routes image reads of text-only models to a vision model.

    Tools provided:
    - readFile: Same contract as the file_read plugin; image files are
      returned as a vision-model analysis when the active model is text-only.

    User commands:
    - analyze-image: Manual analysis of an image file.
    """

    def __init__(self):
        self._local_read = FileReadPlugin()
        self._analyzer: Optional[ImageAnalyzer] = None
        self._read_tool: Optional[VisionProxyReadTool] = None
        self._model_name: Optional[str] = None
        self._session: Optional[Any] = None
        self._ui: Optional[CommandUI] = None
        self._output_callback: Optional[OutputCallback] = None
        self._initialized = False

    @property
    def name(self) -> str:
        return "image_summary"

    @property
    def analyzer(self) -> ImageAnalyzer:
        if self._analyzer is None:
            self._analyzer = ImageAnalyzer()
        return self._analyzer

    @property
    def model_name(self) -> Optional[str]:
        """Active model: the session's when one is set, else the configured one."""
        if self._session is not None:
            session_model = getattr(self._session, "model_name", None)
            if session_model:
                return session_model
        return self._model_name

    def _trace(self, msg: str) -> None:
        trace("image_summary", msg)

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the plugin.

        Args:
            config: Optional configuration dict with:
                - workspace_root: Directory relative paths resolve against
                - model_name: Active model ID
                - cli_command: Analysis CLI command (string or argv list)
                - vision_provider: Provider passed to the CLI
                - vision_model: Vision model passed to the CLI
        """
        config = config or {}
        self._local_read.initialize({"workspace_root": config.get("workspace_root")})
        self._model_name = config.get("model_name")
        self._analyzer = ImageAnalyzer(
            cli_command=config.get("cli_command"),
            vision_provider=config.get("vision_provider"),
            vision_model=config.get("vision_model"),
        )
        self._read_tool = VisionProxyReadTool(
            original=self._local_read.get_executors()["readFile"],
            analyzer=self._analyzer,
            model_provider=lambda: self.model_name,
            workspace_root=lambda: str(self._local_read.workspace_root),
        )
        self._initialized = True
        self._trace(
            f"initialize: model={self._model_name}, cli={self._analyzer.cli_command}, "
            f"vision_model={self._analyzer.vision_model}"
        )

    def shutdown(self) -> None:
        """Clean up resources."""
        self._local_read.shutdown()
        self._read_tool = None
        self._session = None
        self._ui = None
        self._initialized = False

    def set_model_name(self, model_name: Optional[str]) -> None:
        """Update the active model (e.g. after the user switches models)."""
        self._model_name = model_name

    def set_session(self, session: Any) -> None:
        """Receive the host session; its ``model_name`` attribute is tracked."""
        self._session = session

    def set_command_ui(self, ui: Optional[CommandUI]) -> None:
        """Set the interactive surface used by user commands."""
        self._ui = ui

    def set_output_callback(self, callback: Optional[OutputCallback]) -> None:
        """Set the output callback for real-time output during commands."""
        self._output_callback = callback

    def _emit(self, text: str, mode: str = "write") -> None:
        if self._output_callback:
            self._output_callback(self.name, text, mode)

    # ==================== Model Tools ====================

    def get_tool_schemas(self) -> List[ToolSchema]:
        """readFile keeps the schema of the capability it wraps."""
        return self._local_read.get_tool_schemas()

    def get_executors(self) -> Dict[str, Callable[[Dict[str, Any]], Any]]:
        """Return the proxied readFile plus the user command."""
        if self._read_tool is None:
            self.initialize()
        return {
            "readFile": self._read_tool,
            COMMAND_NAME: lambda args: self.execute_user_command(COMMAND_NAME, args),
        }

    def get_system_instructions(self) -> Optional[str]:
        """Tell a text-only model how image reads behave."""
        if not requires_vision_proxy(self.model_name):
            return None
        return (
            "Your model cannot view images directly. When you use `readFile` on an image "
            f"(jpg, jpeg, png, gif, webp), the image is analyzed by {self.analyzer.vision_model} "
            "and you receive a textual analysis starting with its **Category** "
            "(ui-screenshot, code-screenshot, error-screenshot, diagram, chart or general). "
            "Treat that analysis as the content of the image."
        )

    def get_auto_approved_tools(self) -> List[str]:
        """readFile stays low risk; the user command needs no approval."""
        return ["readFile", COMMAND_NAME]

    def get_user_commands(self) -> List[UserCommand]:
        return [
            UserCommand(
                name=COMMAND_NAME,
                description=f"Analyze an image file using {self.analyzer.vision_model}",
                share_with_model=False,
                parameters=[
                    CommandParameter(
                        name="path",
                        description="Path to the image file",
                        required=True,
                        capture_rest=True,  # Paths may contain spaces
                    ),
                ],
            ),
        ]

    # ==================== User Commands ====================

    def execute_user_command(self, command: str, args: Dict[str, Any]) -> Optional[str]:
        """Execute a user command.

        Returns:
            The analysis text on success (possibly empty), None when the
            command failed or was cancelled. Problems are reported through
            the command UI, never raised.
        """
        if command != COMMAND_NAME:
            return f"Unknown command: {command}"
        return self._cmd_analyze_image(str(args.get("path") or ""))

    def _cmd_analyze_image(self, raw_path: str) -> Optional[str]:
        ui = self._ui
        if ui is None or not ui.has_ui:
            self._notify(ui, f"{COMMAND_NAME} requires interactive mode", "error")
            return None

        image_path = raw_path.strip()
        if not image_path:
            ui.notify(f"Usage: {COMMAND_NAME} <path-to-image>", "error")
            return None

        absolute_path = os.path.abspath(
            os.path.join(str(self._local_read.workspace_root), os.path.expanduser(image_path))
        )
        if not is_supported_image(absolute_path):
            ui.notify("Not a supported image file", "error")
            return None

        cancel_token = CancelToken()
        try:
            result = ui.run_with_loader(
                f"Analyzing {image_path}...",
                lambda: self.analyzer.analyze(absolute_path, cancel_token),
                cancel_token,
            )
            if cancel_token.is_cancelled:
                raise AnalysisAbortedError()
        except AnalysisAbortedError:
            ui.notify("Cancelled", "info")
            return None
        except AnalysisError as e:
            if cancel_token.is_cancelled:
                ui.notify("Cancelled", "info")
                return None
            self._trace(f"analyze-image failed: {e}")
            ui.notify(f"Analysis failed: {e}", "error")
            return None

        ui.editor("Image Analysis", result)
        return result

    def _notify(self, ui: Optional[CommandUI], message: str, level: str) -> None:
        """Notify through the UI when there is one, else the output callback."""
        if ui is not None:
            ui.notify(message, level)
        else:
            self._emit(f"{message}\n")


def create_plugin() -> ImageSummaryPlugin:
    """Factory function for plugin discovery."""
    return ImageSummaryPlugin()
