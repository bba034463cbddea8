from .spaced_repetition import SchedulingPolicy, compose_session

__all__ = ["SchedulingPolicy", "compose_session"]
