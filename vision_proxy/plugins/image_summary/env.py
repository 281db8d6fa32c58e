"""Environment variable resolution for the image summary plugin.

The analysis runs through a coding-agent CLI that already knows how to talk
to the Z.AI vision model, so the only settings are which command to run and
which provider/model it should use.
"""

import os
import shlex
from typing import List, Optional, Sequence, Union


DEFAULT_CLI_COMMAND = "pi"
DEFAULT_VISION_PROVIDER = "zai"
DEFAULT_VISION_MODEL = "glm-4.6v"


def resolve_cli_command(
    config_value: Optional[Union[str, Sequence[str]]] = None,
) -> List[str]:
    """Resolve the analysis CLI command.

    Checks:
    1. config_value (string is shell-split, sequences are used as-is)
    2. IMAGE_SUMMARY_CLI environment variable (shell-split)

    Returns:
        Command prefix as an argv list (default: ["pi"]).
    """
    if config_value:
        if isinstance(config_value, str):
            return shlex.split(config_value)
        return [str(part) for part in config_value]
    value = os.environ.get("IMAGE_SUMMARY_CLI")
    if value:
        return shlex.split(value)
    return [DEFAULT_CLI_COMMAND]


def resolve_vision_provider(config_value: Optional[str] = None) -> str:
    """Resolve the vision provider.

    Checks:
    1. config_value
    2. IMAGE_SUMMARY_PROVIDER environment variable

    Returns:
        Provider name (default: zai).
    """
    return config_value or os.environ.get("IMAGE_SUMMARY_PROVIDER") or DEFAULT_VISION_PROVIDER


def resolve_vision_model(config_value: Optional[str] = None) -> str:
    """Resolve the vision model.

    Checks:
    1. config_value
    2. IMAGE_SUMMARY_MODEL environment variable

    Returns:
        Model name (default: glm-4.6v).
    """
    return config_value or os.environ.get("IMAGE_SUMMARY_MODEL") or DEFAULT_VISION_MODEL
