"""Exceptions raised outside the layout engine."""


class ClaudeGraphError(Exception):
    """Base class for Claude Graph errors."""


class CommitSourceError(ClaudeGraphError):
    """Commits could not be read from the repository."""


class ContextSourceError(ClaudeGraphError):
    """Conversation contexts could not be loaded."""


class TranscriptError(ClaudeGraphError):
    """A conversation transcript is malformed."""


class ConfigError(ClaudeGraphError):
    """The layout configuration file is unreadable or invalid."""
