"""Content hierarchy domain layer."""

from .entities import ContentNode, NodeKind, UnlockRequirement

__all__ = ["ContentNode", "NodeKind", "UnlockRequirement"]
