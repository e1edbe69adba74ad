"""Draft storage.

Unsent drafts live in memory and are flushed to a key-value store on request.
"""

from .store import DraftStore

__all__ = ["DraftStore"]
