"""
Blogger post store.
"""

from .store import BloggerStore

__all__ = ["BloggerStore"]
