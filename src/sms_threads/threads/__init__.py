"""Conversation threads folded from backend messages."""

from .builders import create_thread, thread_from_draft, thread_from_message
from .index import ThreadIndex

__all__ = ["ThreadIndex", "create_thread", "thread_from_draft", "thread_from_message"]
