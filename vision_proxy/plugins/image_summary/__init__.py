"""Image summary plugin.

Routes image reads of text-only GLM models to the glm-4.6v vision model and
returns a textual analysis in place of the image bytes.
"""

from .classifier import is_supported_image, requires_vision_proxy
from .invoker import (
    AnalysisAbortedError,
    AnalysisError,
    AnalysisExitError,
    AnalysisLaunchError,
    ImageAnalyzer,
    ProcessOutcome,
    analyze_image,
)
from .output import extract_text
from .plugin import ImageSummaryPlugin, create_plugin
from .read_proxy import ImageAnalysisError, VisionProxyReadTool
from .ui import CommandUI

# Plugin kind identifier for registry discovery
PLUGIN_KIND = "tool"

__all__ = [
    "ImageSummaryPlugin",
    "create_plugin",
    "VisionProxyReadTool",
    "ImageAnalysisError",
    "ImageAnalyzer",
    "ProcessOutcome",
    "AnalysisError",
    "AnalysisLaunchError",
    "AnalysisExitError",
    "AnalysisAbortedError",
    "CommandUI",
    "analyze_image",
    "extract_text",
    "is_supported_image",
    "requires_vision_proxy",
]
