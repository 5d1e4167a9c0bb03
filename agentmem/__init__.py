"""agentmem.

Persistence layer for a conversational-agent runtime.

High-level architecture
-----------------------

- ``agentmem.core.database``:

  - SQLModel entities for conversations, messages, users, conversation
    steps and workflow execution state.
  - Pydantic schemas validating every write before it reaches the store.
  - One async repository per entity, bundled by ``build_repos``.

- ``agentmem.services``:

  - ``MemoryAdapter``, the runtime-facing boundary converting datetimes,
    generating missing message ids and opening one session per operation.

Typical workflow
----------------

1. Create a conversation.
2. Append messages and observability steps as the agent works.
3. Read back the most recent message window to build the next prompt.
4. Persist workflow state when a run suspends and resume from it later.
5. Remove the conversation, cascading to its messages and steps.
"""
