"""
Validation schemas for command-line input.
"""

from shuffler.schemas.requests import ShuffleRequest

__all__ = ["ShuffleRequest"]
