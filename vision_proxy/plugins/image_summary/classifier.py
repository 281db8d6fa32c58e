"""Routing predicates for the vision proxy.

Both predicates are pure. The read override combines them with a logical
AND: a read is proxied only when the active model cannot see images and
the path names a supported image.
"""

from typing import FrozenSet, Optional


SUPPORTED_IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "gif", "webp")

# Text-only GLM models; image reads are routed to the vision model instead
NON_VISION_MODELS = ("glm-4.6", "glm-4.7", "glm-4.7-flash")

_SUPPORTED_EXTENSIONS: FrozenSet[str] = frozenset(SUPPORTED_IMAGE_EXTENSIONS)
_NON_VISION_MODELS: FrozenSet[str] = frozenset(NON_VISION_MODELS)


def is_supported_image(path: str) -> bool:
    """Check if a file path points to a supported image file.

    Only the text after the last "." counts, compared case-insensitively.
    Paths without a "." are not images.
    """
    if not path or "." not in path:
        return False
    extension = path.rsplit(".", 1)[1]
    return extension.lower() in _SUPPORTED_EXTENSIONS


def requires_vision_proxy(model_id: Optional[str]) -> bool:
    """Check if a model ID is a non-vision model that needs the vision proxy.

    An unknown (None) model passes through rather than being proxied.
    """
    return model_id is not None and model_id in _NON_VISION_MODELS
