from .unlock_use_case import UnlockUseCase

__all__ = ["UnlockUseCase"]
