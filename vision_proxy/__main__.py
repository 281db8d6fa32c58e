"""Command-line entry point for vision-proxy.

Examples:
  # Analyze an image and open the result in $EDITOR
  python -m vision_proxy analyze-image ./screenshot.png

  # Run a readFile tool call as a host would with a text-only model
  python -m vision_proxy read /tmp/shot.png --model glm-4.7
"""

import argparse
import json
import logging
import os
import sys
import threading
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.text import Text

from .console_ui import ConsoleCommandUI
from .plugins import PluginRegistry
from .plugins.base import parse_command_args
from .plugins.image_summary.plugin import COMMAND_NAME as ANALYZE_IMAGE_COMMAND
from .plugins.types import CancelToken
from .tool_runner import ToolExecutor

EXIT_OK = 0
EXIT_TOOL_ERROR = 1
EXIT_CANCELLED = 130


def build_registry(workspace_root: str, model_name: Optional[str]) -> PluginRegistry:
    """Discover plugins and enable readFile with the image proxy on top."""
    registry = PluginRegistry()
    registry.discover()
    registry.enable("file_read", config={"workspace_root": workspace_root})
    registry.enable("image_summary", config={
        "workspace_root": workspace_root,
        "model_name": model_name,
    })
    return registry


def build_executor(registry: PluginRegistry, console: Console) -> ToolExecutor:
    executor = ToolExecutor()
    executor.set_registry(registry)
    executor.set_output_callback(lambda source, text, mode: console.print(text, end="", markup=False))
    return executor


def run_analyze_image(path: str, workspace_root: str, console: Console) -> int:
    registry = build_registry(workspace_root, model_name=None)
    build_executor(registry, console)

    plugin = registry.get_plugin_for_command(ANALYZE_IMAGE_COMMAND)
    command = next(
        cmd for cmd in registry.get_enabled_user_commands()
        if cmd.name == ANALYZE_IMAGE_COMMAND
    )
    ui = ConsoleCommandUI(console)
    plugin.set_command_ui(ui)

    try:
        result = plugin.execute_user_command(command.name, parse_command_args(command, path))
    finally:
        registry.disable_all()
    if result is not None:
        return EXIT_OK
    return EXIT_CANCELLED if ui.cancelled else EXIT_TOOL_ERROR


def run_read(path: str, model: Optional[str], workspace_root: str, console: Console) -> int:
    registry = build_registry(workspace_root, model)
    executor = build_executor(registry, console)

    cancel_token = CancelToken()
    outcome: Dict[str, Any] = {}

    def on_progress(chunk: str) -> None:
        # The final chunk repeats the result content
        if chunk.startswith("[Analyzing"):
            console.print(Text(chunk, style="dim"))

    def worker() -> None:
        outcome["value"] = executor.execute(
            "readFile",
            {"path": path},
            cancel_token=cancel_token,
            tool_output_callback=on_progress,
        )

    thread = threading.Thread(target=worker, name="readFile", daemon=True)
    thread.start()
    while thread.is_alive():
        try:
            thread.join(0.1)
        except KeyboardInterrupt:
            cancel_token.cancel()

    registry.disable_all()

    ok, result = outcome["value"]
    print(json.dumps(result, indent=2, ensure_ascii=False))
    if ok:
        return EXIT_OK
    if cancel_token.is_cancelled:
        return EXIT_CANCELLED
    return EXIT_TOOL_ERROR


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="vision-proxy",
        description="Route image reads of text-only GLM models to a vision model",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__.split("\n\n", 1)[1],
    )
    parser.add_argument(
        "--env-file",
        default=".env",
        help="Path to .env file (default: .env)",
    )
    parser.add_argument(
        "--cwd",
        metavar="DIR",
        help="Directory relative paths resolve against (default: current directory)",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze = subparsers.add_parser(
        "analyze-image",
        help="Analyze an image with the vision model and open the result",
    )
    analyze.add_argument("path", nargs="+", help="Path to the image file")

    read = subparsers.add_parser(
        "read",
        help="Run a readFile tool call and print the JSON result",
    )
    read.add_argument("path", help="File to read")
    read.add_argument(
        "--model",
        help="Active model ID (e.g. glm-4.7); text-only GLM models get the vision proxy",
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    load_dotenv(args.env_file)

    workspace_root = os.path.abspath(args.cwd or os.getcwd())
    console = Console(stderr=True)

    if args.command == "analyze-image":
        return run_analyze_image(" ".join(args.path), workspace_root, console)
    return run_read(args.path, args.model, workspace_root, console)


if __name__ == "__main__":
    sys.exit(main())
