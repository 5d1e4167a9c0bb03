"""
Message part schemas.

A message is an ordered list of parts. Each part is one variant of a tagged
union discriminated by ``type``; unknown fields are rejected so a malformed
part never reaches the store.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import ConfigDict, Field, JsonValue, TypeAdapter

from .common import CamelModel

ProviderOptions = Dict[str, Dict[str, Any]]


class _PartBase(CamelModel):
    model_config = ConfigDict(extra="forbid")

    provider_options: Optional[ProviderOptions] = None
    provider_metadata: Optional[ProviderOptions] = None


class TextPart(_PartBase):
    type: Literal["text"]
    text: str


class ImagePart(_PartBase):
    type: Literal["image"]
    image: str = Field(description="Base64 payload or URL")
    mime_type: Optional[str] = None


class FilePart(_PartBase):
    type: Literal["file"]
    data: str
    filename: Optional[str] = None
    mime_type: str


class ToolCallPart(_PartBase):
    type: Literal["tool-call"]
    tool_call_id: str
    tool_name: str
    args: Dict[str, Any]
    state: Optional[Literal["partial-call", "call"]] = None
    provider_executed: Optional[bool] = None


class ToolResultPart(_PartBase):
    type: Literal["tool-result"]
    tool_call_id: str
    tool_name: str
    result: Optional[JsonValue] = None
    is_error: Optional[bool] = None
    provider_executed: Optional[bool] = None


class ReasoningPart(_PartBase):
    type: Literal["reasoning"]
    text: str
    signature: Optional[str] = None


class RedactedReasoningPart(_PartBase):
    type: Literal["redacted-reasoning"]
    data: str


class SourcePart(_PartBase):
    type: Literal["source"]
    source_type: Literal["url", "document"]
    id: str
    url: Optional[str] = None
    title: Optional[str] = None
    media_type: Optional[str] = None
    filename: Optional[str] = None


MessagePart = Annotated[
    Union[
        TextPart,
        ImagePart,
        FilePart,
        ToolCallPart,
        ToolResultPart,
        ReasoningPart,
        RedactedReasoningPart,
        SourcePart,
    ],
    Field(discriminator="type"),
]

_parts_adapter: TypeAdapter[List[MessagePart]] = TypeAdapter(List[MessagePart])


def validate_parts(parts: Any) -> List[MessagePart]:
    """Validate raw parts (dicts or part models) into typed parts."""
    return _parts_adapter.validate_python(parts)


def dump_parts(parts: List[MessagePart]) -> List[Dict[str, Any]]:
    """Serialize typed parts exactly as supplied, for storage."""
    return [part.to_record() for part in parts]
