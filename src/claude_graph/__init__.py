"""Claude Graph - Git history and Claude sessions laid out as one graph."""

__version__ = "0.1.0"
