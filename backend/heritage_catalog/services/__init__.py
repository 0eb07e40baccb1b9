"""
Persistence services
"""

from .content_store import ContentStore

__all__ = ["ContentStore"]
