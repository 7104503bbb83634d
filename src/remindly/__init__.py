"""Remindly: personal task reminders with local persistence and desktop notifications."""

__version__ = "0.1.0"
