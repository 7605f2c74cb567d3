"""Notifications module - in-portal messages with optional attachments."""
