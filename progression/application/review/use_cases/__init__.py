from .review_session_use_case import ReviewSessionUseCase
from .scheduler_use_case import SchedulerUseCase

__all__ = ["ReviewSessionUseCase", "SchedulerUseCase"]
