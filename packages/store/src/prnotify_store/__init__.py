"""Durable approval state for gh-pr-notify."""
