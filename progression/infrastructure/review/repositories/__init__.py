from .review_repository import ReviewRepository
from .struggling_repository import StrugglingRepository
from .submission_repository import SubmissionRepository

__all__ = ["ReviewRepository", "StrugglingRepository", "SubmissionRepository"]
