"""Gamification application layer: hearts, streaks and XP."""
