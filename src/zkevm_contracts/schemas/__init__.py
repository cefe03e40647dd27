from .bases import CanonicalModel

__all__ = [
    "CanonicalModel",
]
