"""
Domain layer.

Core rules of the progression engine: the content hierarchy, unlock
evaluation, hearts, streaks, XP and review scheduling. No framework or
database dependencies live here; time is always passed in explicitly.
"""
