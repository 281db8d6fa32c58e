"""File reading plugin implementation.

Provides the readFile tool: text files come back as content with line
metadata, image files come back base64-encoded for models that accept
image input directly.
"""

import base64
import mimetypes
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..base import UserCommand
from ..types import ToolSchema
from ...trace import trace

# Older interpreters ship without a webp mapping
mimetypes.add_type("image/webp", ".webp")


class FileReadPlugin:
    """Plugin for reading files from the workspace.

    Tools provided:
    - readFile: Read file contents (auto-approved, low risk)

    Relative paths are resolved against the workspace root, which defaults
    to the process working directory.
    """

    def __init__(self):
        self._workspace_root: Optional[Path] = None
        self._initialized = False

    @property
    def name(self) -> str:
        return "file_read"

    @property
    def workspace_root(self) -> Path:
        return self._workspace_root or Path(os.getcwd())

    def _trace(self, msg: str) -> None:
        trace("FILE_READ", msg)

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Initialize the file read plugin.

        Args:
            config: Optional configuration dict with:
                - workspace_root: Directory relative paths resolve against
        """
        config = config or {}
        workspace_root = config.get("workspace_root")
        self._workspace_root = Path(workspace_root) if workspace_root else None
        self._initialized = True
        self._trace(f"initialize: workspace_root={self.workspace_root}")

    def shutdown(self) -> None:
        """Shutdown the plugin."""
        self._trace("shutdown")
        self._workspace_root = None
        self._initialized = False

    def get_tool_schemas(self) -> List[ToolSchema]:
        """Return the readFile tool schema."""
        return [
            ToolSchema(
                name="readFile",
                description="Read the contents of a file. Returns text content with line "
                            "metadata, or base64 data and MIME type for image files.",
                parameters={
                    "type": "object",
                    "properties": {
                        "path": {
                            "type": "string",
                            "description": "Path to the file to read"
                        },
                        "offset": {
                            "type": "integer",
                            "description": "1-based line number to start reading from (text files)"
                        },
                        "limit": {
                            "type": "integer",
                            "description": "Maximum number of lines to return (text files)"
                        }
                    },
                    "required": ["path"]
                },
                category="filesystem",
            )
        ]

    def get_executors(self) -> Dict[str, Callable[[Dict[str, Any]], Any]]:
        """Return executor functions for each tool."""
        return {
            "readFile": self._execute_read_file,
        }

    def get_system_instructions(self) -> Optional[str]:
        return None

    def get_auto_approved_tools(self) -> List[str]:
        """readFile is a low-risk operation."""
        return ["readFile"]

    def get_user_commands(self) -> List[UserCommand]:
        """File read plugin provides model tools only."""
        return []

    def resolve_path(self, path: str) -> Path:
        """Resolve a tool path against the workspace root."""
        file_path = Path(path).expanduser()
        if not file_path.is_absolute():
            file_path = self.workspace_root / file_path
        return file_path

    def _execute_read_file(self, args: Dict[str, Any]) -> Dict[str, Any]:
        """Execute readFile tool."""
        path = args.get("path", "")
        self._trace(f"readFile: path={path}")

        if not path:
            return {"error": "path is required"}

        file_path = self.resolve_path(path)
        if not file_path.exists():
            return {"error": f"File not found: {path}"}

        if not file_path.is_file():
            return {"error": f"Not a file: {path}"}

        mime_type, _ = mimetypes.guess_type(str(file_path))
        try:
            if mime_type and mime_type.startswith("image/"):
                data = file_path.read_bytes()
                return {
                    "path": path,
                    "mime_type": mime_type,
                    "size": len(data),
                    "data": base64.b64encode(data).decode("ascii"),
                }

            content = file_path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            return {"error": f"Failed to read file: {e}"}

        return self._text_result(path, content, args.get("offset"), args.get("limit"))

    def _text_result(
        self,
        path: str,
        content: str,
        offset: Optional[int],
        limit: Optional[int],
    ) -> Dict[str, Any]:
        lines = content.splitlines(keepends=True)
        total = len(lines)

        if offset is None and limit is None:
            return {
                "path": path,
                "content": content,
                "size": len(content),
                "lines": total,
            }

        start = max(int(offset or 1), 1) - 1
        end = total if limit is None else start + max(int(limit), 0)
        window = "".join(lines[start:end])
        result: Dict[str, Any] = {
            "path": path,
            "content": window,
            "size": len(content),
            "lines": total,
        }
        if start > 0 or end < total:
            result["truncated"] = True
        return result


def create_plugin() -> FileReadPlugin:
    """Factory function to create the file read plugin instance."""
    return FileReadPlugin()
