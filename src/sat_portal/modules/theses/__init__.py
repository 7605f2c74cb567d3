"""Theses module - proposals, seminars and final defenses."""
