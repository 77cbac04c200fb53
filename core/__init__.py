"""
Core Domain Components.

Contains the storefront data structures, separated from storage
and web concerns.

Structure:
    models/: Pure data structures (no business logic)
"""

from . import models

__all__ = [
    'models',
]
