"""Commit model for the graph layout engine."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

SHORT_SHA_LENGTH = 7


class ConversationContext(BaseModel):
    """Reference to the Claude session tied to a commit."""

    context_id: str
    total_messages: int = Field(default=0, ge=0)
    is_new_session: bool = True


class Commit(BaseModel):
    """Represents a commit as supplied by a commit source."""

    sha: str
    short_sha: str = ""
    message: str = ""
    author_email: str = ""
    author_name: Optional[str] = None
    timestamp: Optional[datetime] = None
    parent_sha: Optional[str] = None  # First parent only
    branches: List[str] = []
    conversation_context: Optional[ConversationContext] = None

    @model_validator(mode="before")
    @classmethod
    def _derive_short_sha(cls, data):
        if isinstance(data, dict) and not data.get("short_sha") and data.get("sha"):
            data = {**data, "short_sha": data["sha"][:SHORT_SHA_LENGTH]}
        return data

    @property
    def has_context(self) -> bool:
        """Check if a conversation context is attached."""
        return self.conversation_context is not None

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.strip().split("\n")[0] if self.message else ""


class FileChange(BaseModel):
    """A file touched by a commit, relative to its first parent."""

    path: str
    status: str = "modified"
    additions: int = 0
    deletions: int = 0


class CommitDetail(BaseModel):
    """Everything shown when a single commit is opened."""

    sha: str
    short_sha: str
    subject: str
    body: str = ""
    author_name: str = ""
    author_email: str = ""
    committer_name: str = ""
    committer_email: str = ""
    authored_at: datetime
    committed_at: datetime
    parent_shas: List[str] = []
    tree_sha: str
    files_changed: int = 0
    insertions: int = 0
    deletions: int = 0
    files: List[FileChange] = []
    patch: Optional[str] = None
