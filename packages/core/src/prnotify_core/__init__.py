"""Approval-transition detection and polling for gh-pr-notify."""
