"""
Shared schema building blocks.

Every schema exchanged with the agent runtime uses camelCase field names on
the wire while keeping snake_case attribute names in Python.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from agentmem.core.errors import ErrorKind

JsonMap = Dict[str, Any]


class CamelModel(BaseModel):
    """Base model serializing to camelCase and accepting either spelling."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_record(self) -> Dict[str, Any]:
        """Dump as a plain camelCase record, omitting fields that were never set."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class MutationResult(CamelModel):
    """Acknowledgment returned by every mutation."""

    success: bool = Field(default=True, description="Whether the mutation was applied")
    id: Optional[str] = Field(default=None, description="External id of the affected entity")
    count: Optional[int] = Field(default=None, description="Number of affected records")
    error: Optional[ErrorKind] = Field(default=None, description="Error kind for failed results")
