"""
Cache invalidation tags.

Mutating outcomes carry the set of tags whose cached views they made stale.
The engine never talks to a cache itself; callers forward the tags.
"""

from collections.abc import Iterable


def progress_tag(user_id: int, path_id: int) -> str:
    return f"user:{user_id}:progress:path:{path_id}"


def hearts_tag(user_id: int, path_id: int) -> str:
    return f"user:{user_id}:hearts:path:{path_id}"


def reviews_tag(user_id: int) -> str:
    return f"user:{user_id}:reviews"


def stats_tag(user_id: int) -> str:
    return f"user:{user_id}:stats"


def tags(*groups: Iterable[str] | str) -> frozenset[str]:
    """Flatten tags and tag iterables into one frozenset."""
    result: set[str] = set()
    for group in groups:
        if isinstance(group, str):
            result.add(group)
        else:
            result.update(group)
    return frozenset(result)
