"""
Services built on top of the database layer.

- memory_adapter: ``MemoryAdapter``, the storage boundary used by the agent runtime
"""

from .memory_adapter import MemoryAdapter, UIMessage, WorkflowStateEntry

__all__ = ["MemoryAdapter", "UIMessage", "WorkflowStateEntry"]
