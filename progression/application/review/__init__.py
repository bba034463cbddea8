"""Review application layer: scheduling and review sessions."""
