"""Stockpick API v1"""

from . import picking

__all__ = ["picking"]
