"""Internships module - KP / Magang registrations."""
