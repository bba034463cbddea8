from .unlock_evaluator import (
    HierarchyLookup,
    UnlockDecision,
    UnlockEvaluator,
    allow_unlocked_paths,
)

__all__ = [
    "HierarchyLookup",
    "UnlockDecision",
    "UnlockEvaluator",
    "allow_unlocked_paths",
]
