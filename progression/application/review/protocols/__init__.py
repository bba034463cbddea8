from .review_repository import ReviewRepositoryProtocol
from .struggling_repository import StrugglingRepositoryProtocol
from .submission_repository import StoredSubmission, SubmissionRepositoryProtocol

__all__ = [
    "ReviewRepositoryProtocol",
    "StoredSubmission",
    "StrugglingRepositoryProtocol",
    "SubmissionRepositoryProtocol",
]
