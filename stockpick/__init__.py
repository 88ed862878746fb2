"""Stockpick - warehouse stock picking allocation"""

__version__ = "1.0.0"
