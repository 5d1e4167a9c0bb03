"""
Schema models for working memory.

Working memory is a single text blob stored under the ``workingMemory`` key
of either a conversation's or a user's metadata.
"""

from __future__ import annotations

from enum import Enum

WORKING_MEMORY_KEY = "workingMemory"


class WorkingMemoryScope(str, Enum):
    """Selects which entity's metadata holds the working memory."""

    CONVERSATION = "conversation"
    USER = "user"
