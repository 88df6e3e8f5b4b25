"""Command-line interface for gh-pr-notify."""
