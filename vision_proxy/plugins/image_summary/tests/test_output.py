"""Tests for transcript parsing and analysis text extraction."""

import json

import pytest

from ..output import (
    TranscriptOutput,
    extract_category,
    extract_text,
    parse_transcript,
)


def transcript(*messages):
    return json.dumps({"messages": list(messages)})


def assistant(*blocks):
    return {"role": "assistant", "content": list(blocks)}


def text(value):
    return {"type": "text", "text": value}


class TestParseTranscript:
    """Tests for parse_transcript()."""

    def test_not_json(self):
        assert parse_transcript("not json") is None

    def test_json_array_is_not_a_record(self):
        assert parse_transcript("[1, 2]") is None

    def test_json_scalar_is_not_a_record(self):
        assert parse_transcript("42") is None

    def test_deeply_nested_json_is_not_a_record(self):
        assert parse_transcript("[" * 100000 + "]" * 100000) is None

    def test_record_without_messages(self):
        assert parse_transcript('{"foo": 1}') == TranscriptOutput(messages=[])

    def test_messages_keep_order(self):
        parsed = parse_transcript(transcript(
            assistant(text("first")),
            {"role": "user", "content": [text("mid")]},
        ))
        assert [m.role for m in parsed.messages] == ["assistant", "user"]

    def test_missing_content_is_none(self):
        parsed = parse_transcript(transcript({"role": "assistant"}))
        assert parsed.messages[0].content is None


class TestExtractText:
    """Tests for extract_text()."""

    def test_single_assistant_message(self):
        assert extract_text(transcript(assistant(text("A"), text("B")))) == "A\nB"

    def test_empty_string(self):
        assert extract_text("") == ""

    def test_plain_text_returned_unchanged(self):
        assert extract_text("not json") == "not json"

    def test_record_without_messages_returned_unchanged(self):
        raw = '{"result": "ok"}'
        assert extract_text(raw) == raw

    def test_empty_messages_returned_unchanged(self):
        raw = '{"messages": []}'
        assert extract_text(raw) == raw

    def test_no_assistant_message_returned_unchanged(self):
        raw = transcript({"role": "user", "content": [text("hello")]})
        assert extract_text(raw) == raw

    def test_last_assistant_wins(self):
        raw = transcript(
            assistant(text("first")),
            {"role": "user", "content": [text("mid")]},
            assistant(text("final")),
        )
        assert extract_text(raw) == "final"

    def test_non_text_blocks_filtered(self):
        raw = transcript(assistant(
            text("X"),
            {"type": "image", "data": "aGVsbG8=", "mimeType": "image/png"},
            text("Y"),
        ))
        assert extract_text(raw) == "X\nY"

    def test_missing_text_payload_keeps_position(self):
        raw = transcript(assistant(text("A"), {"type": "text"}, text("C")))
        assert extract_text(raw) == "A\n\nC"

    def test_deeply_nested_json_returned_unchanged(self):
        raw = "[" * 100000 + "]" * 100000
        assert extract_text(raw) == raw

    def test_non_string_text_payload_stringified(self):
        raw = transcript(assistant(text("total:"), text(5)))
        assert extract_text(raw) == "total:\n5"

    def test_null_text_payload_keeps_position(self):
        raw = transcript(assistant(text("A"), text(None), text("C")))
        assert extract_text(raw) == "A\n\nC"

    def test_all_empty_text_gives_empty_string(self):
        assert extract_text(transcript(assistant(text("")))) == ""

    def test_assistant_without_content_returned_unchanged(self):
        raw = transcript({"role": "assistant"})
        assert extract_text(raw) == raw

    def test_assistant_with_empty_content_returned_unchanged(self):
        raw = transcript(assistant())
        assert extract_text(raw) == raw

    def test_only_non_text_blocks_gives_empty_string(self):
        raw = transcript(assistant({"type": "thinking", "thinking": "hmm"}))
        assert extract_text(raw) == ""

    @pytest.mark.parametrize("raw", [
        "",
        "plain analysis",
        "**Category**: chart\nBars.",
        "{not json",
        "[1, 2, 3]",
    ])
    def test_idempotent_on_plain_text(self, raw):
        once = extract_text(raw)
        assert extract_text(once) == once

    def test_chart_transcript(self):
        raw = transcript(assistant(text("**Category**: chart\n...")))
        assert extract_text(raw).startswith("**Category**: chart")


class TestExtractCategory:
    """Tests for extract_category()."""

    def test_bold_header(self):
        assert extract_category("**Category**: chart\nBars.") == "chart"

    def test_plain_header(self):
        assert extract_category("Category: diagram") == "diagram"

    def test_header_with_trailing_punctuation(self):
        assert extract_category("**Category**: ui-screenshot.") == "ui-screenshot"

    def test_unknown_category(self):
        assert extract_category("**Category**: landscape") is None

    def test_no_header(self):
        assert extract_category("A photo of a cat.") is None
