"""Lesson application layer: lesson sessions, answers and completion."""
