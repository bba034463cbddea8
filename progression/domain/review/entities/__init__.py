from .review_record import ReviewMode, ReviewRecord
from .struggling_entry import StrugglingEntry

__all__ = ["ReviewMode", "ReviewRecord", "StrugglingEntry"]
