"""Base protocol for tool plugins."""

from typing import Protocol, List, Dict, Any, Callable, Optional, NamedTuple, runtime_checkable

from .types import ToolSchema


# Output callback type for real-time output from plugins
#
# Parameters:
#   source: Origin of the output (plugin name, "system", etc.)
#   text: The output text content
#   mode: How to handle the output:
#         - "write": Start a new output block
#         - "append": Add to the current block from the same source
#
# The frontend/client decides how to render (terminal, web UI, logging).
OutputCallback = Callable[[str, str, str], None]

# Streaming callback for a single running tool call (one chunk per call).
ToolOutputCallback = Callable[[str], None]


class CommandParameter(NamedTuple):
    """Definition of a command parameter for argument parsing.

    Attributes:
        name: Parameter name (used as key in parsed args dict).
        description: Brief description for help text.
        required: Whether the parameter is required (default: False).
        capture_rest: If True, this parameter captures all remaining args as a
            single string (useful for paths with spaces). Only valid for last param.
    """
    name: str
    description: str = ""
    required: bool = False
    capture_rest: bool = False


class UserCommand(NamedTuple):
    """Declaration of a user-facing command.

    User commands can be invoked directly by the user (human or agent)
    without going through the model's function calling.

    Attributes:
        name: Command name for invocation and autocompletion.
        description: Brief description shown in autocompletion/help.
        share_with_model: If True, command output is added to conversation
            history so the model can see/use it. If False (default),
            output is only shown to the user.
        parameters: Optional list of CommandParameter definitions for
            argument parsing. If provided, enables generic parsing.
    """
    name: str
    description: str
    share_with_model: bool = False
    parameters: Optional[List[CommandParameter]] = None


def parse_command_args(
    command: UserCommand,
    raw_args: str
) -> Dict[str, Any]:
    """Parse raw argument string into named arguments based on command schema.

    Args:
        command: The UserCommand with optional parameters definition.
        raw_args: Raw argument string from user input.

    Returns:
        Dictionary of named arguments. If command has no parameters defined,
        returns {"args": [list of split args]}.
    """
    raw_args = raw_args.strip()
    result: Dict[str, Any] = {}

    if not command.parameters:
        return {"args": raw_args.split() if raw_args else []}

    if not raw_args:
        return result

    arg_parts = raw_args.split()
    arg_index = 0

    for param in command.parameters:
        if arg_index >= len(arg_parts):
            break

        if param.capture_rest:
            # Keep the original spacing of the remainder
            remainder = raw_args
            for part in arg_parts[:arg_index]:
                remainder = remainder[len(part):].lstrip()
            result[param.name] = remainder
            break
        else:
            result[param.name] = arg_parts[arg_index]
            arg_index += 1

    return result


@runtime_checkable
class ToolPlugin(Protocol):
    """Interface that all tool plugins must implement.

    Plugins provide two types of capabilities:
    1. Model tools: Functions the AI model can invoke via function calling
    2. User commands: Commands the user can invoke directly (without model mediation)

    Model tools are declared via get_tool_schemas() and executed via
    get_executors(). User commands are declared via get_user_commands()
    and are executed through execute_user_command() when the plugin
    provides it.
    """

    @property
    def name(self) -> str:
        """Unique identifier for this plugin."""
        ...

    def get_tool_schemas(self) -> List[ToolSchema]:
        """Return provider-agnostic tool schemas for this plugin's tools."""
        ...

    def get_executors(self) -> Dict[str, Callable[[Dict[str, Any]], Any]]:
        """Return a mapping of tool names to their executor callables.

        Each executor should accept a dict of arguments and return a
        JSON-serializable result.
        """
        ...

    def initialize(self, config: Optional[Dict[str, Any]] = None) -> None:
        """Called once when the plugin is enabled."""
        ...

    def shutdown(self) -> None:
        """Called when the plugin is disabled. Clean up resources here."""
        ...

    def get_system_instructions(self) -> Optional[str]:
        """Return system instructions describing this plugin's capabilities."""
        ...

    def get_auto_approved_tools(self) -> List[str]:
        """Return tool/command names that need no permission prompt.

        User commands defined in get_user_commands() should typically be
        listed here, since the user invokes them directly.
        """
        ...

    def get_user_commands(self) -> List[UserCommand]:
        """Return user-facing commands this plugin provides.

        Most plugins only provide model tools and should return an empty list.
        """
        ...
