"""Lighthouse CI result notifications for Slack and GitHub check runs."""

__version__ = "1.0.0"
