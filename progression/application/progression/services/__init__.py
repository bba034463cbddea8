from .unlock_service import UnlockService

__all__ = ["UnlockService"]
