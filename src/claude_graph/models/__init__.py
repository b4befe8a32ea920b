"""Data models for Claude Graph."""

from .commit import Commit, CommitDetail, ConversationContext, FileChange
from .conversation import ContextRecord, Conversation, Message, MessageType
from .layout import (
    ConnectionKind,
    ConnectionPath,
    GraphLayout,
    LayoutNode,
    LineageStyle,
    NodeKind,
    ViewportBounds,
)

__all__ = [
    "Commit",
    "CommitDetail",
    "FileChange",
    "ConversationContext",
    "ContextRecord",
    "Conversation",
    "Message",
    "MessageType",
    "ConnectionKind",
    "ConnectionPath",
    "GraphLayout",
    "LayoutNode",
    "LineageStyle",
    "NodeKind",
    "ViewportBounds",
]
