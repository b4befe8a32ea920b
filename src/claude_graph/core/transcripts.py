"""Parse Claude JSONL transcripts stored with conversation contexts."""

import json
import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from claude_graph.exceptions import TranscriptError
from claude_graph.models.conversation import (
    ContextRecord,
    Conversation,
    Message,
    MessageType,
)

logger = logging.getLogger(__name__)


def _extract_text(content: Any) -> str:
    """Flatten string or content-block message payloads to text."""
    if content is None:
        return ""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for block in content:
            if isinstance(block, str):
                parts.append(block)
            elif isinstance(block, dict) and block.get("type") == "text":
                parts.append(block.get("text", ""))
        return "\n".join(p for p in parts if p)
    return str(content)


def _to_message(entry: Dict[str, Any]) -> Optional[Message]:
    message_type = entry.get("type")
    if message_type not in {t.value for t in MessageType}:
        # Summaries, tool results and other bookkeeping lines
        return None

    payload = entry.get("message")
    content = entry.get("content")
    if content is None and isinstance(payload, dict):
        content = payload.get("content")

    return Message(
        type=message_type,
        content=_extract_text(content),
        timestamp=entry.get("timestamp"),
        uuid=entry.get("uuid") or "",
        parent_uuid=entry.get("parentUuid", entry.get("parent_uuid")),
    )


def parse_transcript(context_id: str, jsonl_text: str) -> Conversation:
    """Parse a JSONL transcript into a :class:`Conversation`."""
    messages: List[Message] = []
    for line_number, line in enumerate(jsonl_text.splitlines(), 1):
        line = line.strip()
        if not line:
            continue
        try:
            entry = json.loads(line)
        except json.JSONDecodeError as e:
            raise TranscriptError(
                f"Transcript {context_id} line {line_number} is not valid JSON: {e}"
            ) from e
        if not isinstance(entry, dict):
            continue
        try:
            message = _to_message(entry)
        except ValidationError as e:
            raise TranscriptError(
                f"Transcript {context_id} line {line_number} is malformed: {e}"
            ) from e
        if message is not None:
            messages.append(message)

    logger.debug("Parsed %d messages for context %s", len(messages), context_id)
    return Conversation(context_id=context_id, messages=messages)


def find_conversation(
    records: Dict[str, ContextRecord], context_id: str
) -> Optional[Conversation]:
    """Collect the transcript of ``context_id`` across its records.

    A session spans several commits; the record with the most messages holds
    the fullest transcript.
    """
    candidates = [
        r for r in records.values() if r.context_id == context_id and r.jsonl_data
    ]
    if not candidates:
        return None
    best = max(candidates, key=lambda r: r.total_messages)
    return parse_transcript(context_id, best.jsonl_data)
