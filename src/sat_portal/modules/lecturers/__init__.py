"""Lecturers module - lecturer directory."""
