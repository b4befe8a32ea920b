"""Command line interface for Claude Graph."""
