from .progress_repository import ProgressRepository

__all__ = ["ProgressRepository"]
