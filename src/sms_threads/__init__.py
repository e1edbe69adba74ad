"""SMS Threads - draft and conversation thread indexes for a messaging client.

This package keeps unsent drafts and backend conversation threads in memory,
backed by an asynchronous key-value store for drafts.
"""

__version__ = "0.1.0"
__author__ = "Trickl"

from sms_threads.config import Settings, get_settings
from sms_threads.drafts import DraftStore
from sms_threads.session import MessagingSession
from sms_threads.threads import ThreadIndex

__all__ = [
    "DraftStore",
    "MessagingSession",
    "Settings",
    "ThreadIndex",
    "get_settings",
    "__version__",
    "__author__",
]
