"""Progression application layer: unlock rules over the content hierarchy."""
