from .progress_record import TRACKED_KINDS, ProgressRecord

__all__ = ["TRACKED_KINDS", "ProgressRecord"]
