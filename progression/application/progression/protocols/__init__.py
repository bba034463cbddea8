from .content_repository import ContentRepositoryProtocol
from .path_access_policy import PathAccessPolicyProtocol
from .progress_repository import ProgressRepositoryProtocol

__all__ = [
    "ContentRepositoryProtocol",
    "PathAccessPolicyProtocol",
    "ProgressRepositoryProtocol",
]
