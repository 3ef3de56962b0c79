"""Data models for the type change application."""

from .reference import (
    Reference,
    ReferenceKind,
)
from .content import (
    ElementType,
    ElementDefinition,
    ContentType,
    ContentSnippet,
    ContentItem,
    FieldValue,
    LanguageVariant,
    WorkflowStep,
    WorkflowClassification,
    SUPPORTING_ELEMENT_TYPES,
)
from .migration import (
    MigrationConfig,
    MigrationRequest,
    MigrationResult,
    TypeListing,
    parse_mapping_json,
)

__all__ = [
    "Reference",
    "ReferenceKind",
    "ElementType",
    "ElementDefinition",
    "ContentType",
    "ContentSnippet",
    "ContentItem",
    "FieldValue",
    "LanguageVariant",
    "WorkflowStep",
    "WorkflowClassification",
    "SUPPORTING_ELEMENT_TYPES",
    "MigrationConfig",
    "MigrationRequest",
    "MigrationResult",
    "TypeListing",
    "parse_mapping_json",
]
