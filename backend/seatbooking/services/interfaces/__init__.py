"""
Service interfaces for dependency inversion.
Allows swapping implementations without changing business logic.
"""

from .repository import OwnedSeatRepository

__all__ = ['OwnedSeatRepository']
