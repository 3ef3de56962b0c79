"""Pydantic models for API requests and responses."""

from typing import Any, Dict, List
from pydantic import BaseModel, Field


# Response Models
class ContentTypeResponse(BaseModel):
    id: str
    codename: str
    name: str = ""
    elements: List[Dict[str, Any]] = Field(default_factory=list)


class TypesResponse(BaseModel):
    """Current type of an item and the types it can move to."""
    current_type: ContentTypeResponse
    other_types: List[ContentTypeResponse]


class ChangeTypeResponse(BaseModel):
    """Result of a type change."""
    total_api_calls: int
    total_milliseconds: int
    new_item: Dict[str, Any]
    updated_variants: List[Dict[str, Any]] = Field(default_factory=list)


class ErrorBody(BaseModel):
    kind: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    error: ErrorBody
