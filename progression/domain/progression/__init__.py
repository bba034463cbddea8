"""Progression module domain layer."""

from .entities import ProgressRecord
from .services import UnlockDecision, UnlockEvaluator

__all__ = ["ProgressRecord", "UnlockDecision", "UnlockEvaluator"]
