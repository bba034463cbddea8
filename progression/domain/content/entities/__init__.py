from .content_node import ContentNode, NodeKind, UnlockRequirement

__all__ = ["ContentNode", "NodeKind", "UnlockRequirement"]
