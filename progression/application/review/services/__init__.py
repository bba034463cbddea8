from .scheduler_service import SchedulerService, parse_review_mode
from .submission_service import SubmissionService, validate_session_id

__all__ = [
    "SchedulerService",
    "SubmissionService",
    "parse_review_mode",
    "validate_session_id",
]
