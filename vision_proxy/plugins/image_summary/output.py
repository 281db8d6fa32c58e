"""Types and text extraction for the analysis CLI's JSON output.

With ``--json`` the analysis CLI prints a transcript record::

    {"messages": [
        {"role": "user", "content": [{"type": "text", "text": "..."},
                                     {"type": "image", "data": "..."}]},
        {"role": "assistant", "content": [{"type": "text", "text": "..."}]}
    ]}

extract_text() recovers the analysis from the last assistant message. Any
output that does not have this shape is returned untouched rather than
treated as an error, so the caller always gets something to show.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .prompts import ANALYSIS_CATEGORIES


ASSISTANT_ROLE = "assistant"
TEXT_BLOCK_TYPE = "text"

_CATEGORY_RE = re.compile(r"\*?\*?Category\*?\*?:\s*(\S+)", re.IGNORECASE)


# ==================== Transcript Types ====================


@dataclass
class TranscriptContentBlock:
    """One content segment of a transcript message."""

    type: str
    text: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranscriptContentBlock":
        text = data.get("text")
        return cls(
            type=str(data.get("type", "")),
            text=None if text is None else str(text),
        )


@dataclass
class TranscriptMessage:
    """One turn of the transcript.

    ``content`` is None when the message carried no content list at all,
    which extraction treats differently from an empty list.
    """

    role: str
    content: Optional[List[TranscriptContentBlock]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranscriptMessage":
        raw_content = data.get("content")
        content = None
        if isinstance(raw_content, list):
            content = [
                TranscriptContentBlock.from_dict(block)
                for block in raw_content
                if isinstance(block, dict)
            ]
        return cls(role=str(data.get("role", "")), content=content)


@dataclass
class TranscriptOutput:
    """Parsed top-level JSON record."""

    messages: List[TranscriptMessage] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TranscriptOutput":
        raw_messages = data.get("messages")
        if not isinstance(raw_messages, list):
            return cls()
        return cls(messages=[
            TranscriptMessage.from_dict(msg)
            for msg in raw_messages
            if isinstance(msg, dict)
        ])

    def last_assistant_message(self) -> Optional[TranscriptMessage]:
        for message in reversed(self.messages):
            if message.role == ASSISTANT_ROLE:
                return message
        return None


def parse_transcript(output: str) -> Optional[TranscriptOutput]:
    """Parse CLI output as a transcript record.

    Returns:
        The parsed record, or None when the output is not a JSON object.
    """
    try:
        data = json.loads(output)
    except (ValueError, TypeError, RecursionError):
        return None
    if not isinstance(data, dict):
        return None
    return TranscriptOutput.from_dict(data)


# ==================== Extraction ====================


def extract_text(output: str) -> str:
    """Extract the analysis text from CLI output.

    Joins the text segments of the last assistant message with newlines.
    A text segment without a payload contributes an empty line. Falls back
    to returning ``output`` unchanged when it is not JSON, has no messages,
    has no assistant message, or the assistant message has no content.
    """
    transcript = parse_transcript(output)
    if transcript is None:
        return output

    message = transcript.last_assistant_message()
    if message is None or not message.content:
        return output

    return "\n".join(
        block.text or ""
        for block in message.content
        if block.type == TEXT_BLOCK_TYPE
    )


def extract_category(analysis: str) -> Optional[str]:
    """Return the category named by a ``**Category**: <name>`` header.

    Returns None when there is no header or it names something outside
    the known category set.
    """
    match = _CATEGORY_RE.search(analysis)
    if not match:
        return None
    category = re.sub(r"[^a-z-]", "", match.group(1).lower())
    return category if category in ANALYSIS_CATEGORIES else None
