from .content_node_mapper import ContentNodeMapper

__all__ = ["ContentNodeMapper"]
