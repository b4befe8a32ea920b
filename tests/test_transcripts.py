"""Tests for transcript parsing."""

import json

import pytest

from claude_graph.core.transcripts import find_conversation, parse_transcript
from claude_graph.exceptions import TranscriptError
from claude_graph.models.conversation import ContextRecord, MessageType


def jsonl(*entries):
    return "\n".join(json.dumps(e) for e in entries)


def test_parse_flat_and_nested_messages():
    """Test both flat content and nested message payloads."""
    text = jsonl(
        {
            "type": "user",
            "content": "Add a login page",
            "timestamp": "2025-03-01T10:00:00Z",
            "uuid": "u1",
            "parentUuid": None,
        },
        {
            "type": "assistant",
            "message": {
                "role": "assistant",
                "content": [
                    {"type": "text", "text": "Sure."},
                    {"type": "tool_use", "name": "Edit"},
                    {"type": "text", "text": "Done."},
                ],
            },
            "uuid": "u2",
            "parentUuid": "u1",
        },
    )
    conversation = parse_transcript("ctx-1", text)

    assert conversation.context_id == "ctx-1"
    assert conversation.total_messages == 2
    first, second = conversation.messages
    assert first.type == MessageType.USER
    assert first.content == "Add a login page"
    assert first.timestamp.year == 2025
    assert second.content == "Sure.\nDone."
    assert second.parent_uuid == "u1"


def test_bookkeeping_and_blank_lines_are_skipped():
    text = "\n" + jsonl(
        {"type": "summary", "summary": "Login work"},
        {"type": "system", "content": "Session resumed"},
    ) + "\n\n"
    conversation = parse_transcript("ctx", text)
    assert [m.type for m in conversation.messages] == [MessageType.SYSTEM]
    assert conversation.by_type(MessageType.USER) == []


def test_invalid_json_line():
    with pytest.raises(TranscriptError, match="line 2"):
        parse_transcript("ctx", '{"type": "user", "content": "hi"}\n{oops')


def test_find_conversation_uses_fullest_record():
    """Test the record with the most messages supplies the transcript."""
    short = jsonl({"type": "user", "content": "one"})
    full = jsonl({"type": "user", "content": "one"}, {"type": "assistant", "content": "two"})
    records = {
        "a": ContextRecord(commit_sha="a", context_id="x", total_messages=1, jsonl_data=short),
        "b": ContextRecord(commit_sha="b", context_id="x", total_messages=2, jsonl_data=full),
        "c": ContextRecord(commit_sha="c", context_id="y", total_messages=5),
    }

    conversation = find_conversation(records, "x")
    assert conversation.total_messages == 2
    assert find_conversation(records, "y") is None
    assert find_conversation(records, "missing") is None
