"""Command-line interface for ai-hooks."""
