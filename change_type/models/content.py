"""Content models: types, items, language variants and workflow steps."""

import copy
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
from enum import Enum
from datetime import datetime
from dateutil import parser as date_parser

from .reference import Reference

logger = logging.getLogger(__name__)


class ElementType(str, Enum):
    """Element types a content type can declare."""
    ASSET = "asset"
    SNIPPET = "snippet"
    CUSTOM = "custom"
    DATE_TIME = "date_time"
    GUIDELINES = "guidelines"
    MODULAR_CONTENT = "modular_content"
    NUMBER = "number"
    MULTIPLE_CHOICE = "multiple_choice"
    RICH_TEXT = "rich_text"
    TAXONOMY = "taxonomy"
    TEXT = "text"
    URL_SLUG = "url_slug"


# Elements that structure a type but never hold item data
SUPPORTING_ELEMENT_TYPES = frozenset({ElementType.SNIPPET, ElementType.GUIDELINES})


class WorkflowClassification(str, Enum):
    """Workflow steps that matter when editing a variant."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"
    CUSTOM = "custom"


# Steps are recognised by their display name
_STEP_NAMES = {
    "Draft": WorkflowClassification.DRAFT,
    "Published": WorkflowClassification.PUBLISHED,
    "Archived": WorkflowClassification.ARCHIVED,
}


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return date_parser.isoparse(value)


def _optional_reference(data: Optional[Dict[str, Any]]) -> Optional[Reference]:
    if not data:
        return None
    return Reference.from_dict(data)


def _element_definitions(owner: str, data: List[Dict[str, Any]]) -> List["ElementDefinition"]:
    """Build element definitions, leaving out element types this tool does not know."""
    known = {t.value for t in ElementType}
    elements = []
    for element in data:
        if element.get("type", "text") not in known:
            logger.warning(
                f"Skipping element {element.get('codename') or element.get('id')} of {owner}: "
                f"unsupported element type {element.get('type')}"
            )
            continue
        elements.append(ElementDefinition.from_dict(element))
    return elements


@dataclass
class ElementDefinition:
    """Definition of an element in a content type or snippet."""
    id: str
    codename: str
    type: ElementType
    name: str = ""
    snippet: Optional[Reference] = None  # Only for snippet elements
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_supporting(self) -> bool:
        return self.type in SUPPORTING_ELEMENT_TYPES

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = dict(self.extra)
        result.update({
            "id": self.id,
            "codename": self.codename,
            "name": self.name,
            "type": self.type.value,
        })
        if self.snippet:
            result["snippet"] = self.snippet.to_dict()
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ElementDefinition":
        """Create from dictionary representation."""
        known = {"id", "codename", "name", "type", "snippet"}
        return cls(
            id=data.get("id", ""),
            codename=data.get("codename", ""),
            name=data.get("name", ""),
            type=ElementType(data.get("type", "text")),
            snippet=_optional_reference(data.get("snippet")),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass
class ContentType:
    """A content type: an ordered list of element definitions."""
    id: str
    codename: str
    name: str = ""
    elements: List[ElementDefinition] = field(default_factory=list)

    @property
    def reference(self) -> Reference:
        return Reference.by_id(self.id)

    def element_ids(self) -> List[str]:
        return [element.id for element in self.elements]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "codename": self.codename,
            "name": self.name,
            "elements": [e.to_dict() for e in self.elements],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentType":
        """Create from dictionary representation."""
        return cls(
            id=data.get("id", ""),
            codename=data.get("codename", ""),
            name=data.get("name", ""),
            elements=_element_definitions(data.get("codename", ""), data.get("elements") or []),
        )


@dataclass
class ContentSnippet:
    """A reusable group of elements included in content types."""
    id: str
    codename: str
    name: str = ""
    elements: List[ElementDefinition] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentSnippet":
        """Create from dictionary representation."""
        return cls(
            id=data.get("id", ""),
            codename=data.get("codename", ""),
            name=data.get("name", ""),
            elements=_element_definitions(data.get("codename", ""), data.get("elements") or []),
        )


@dataclass
class ContentItem:
    """A language-independent content item."""
    type: Reference
    id: Optional[str] = None
    name: str = ""
    codename: Optional[str] = None
    external_id: Optional[str] = None
    collection: Optional[Reference] = None
    last_modified: Optional[datetime] = None

    @property
    def reference(self) -> Reference:
        """Best available reference to this item."""
        if self.id:
            return Reference.by_id(self.id)
        if self.external_id:
            return Reference.by_external_id(self.external_id)
        return Reference.by_codename(self.codename or "")

    def as_migrated(self, external_id: str, target_type: Reference) -> "ContentItem":
        """
        Build the item that replaces this one under a new type.

        The migrated item is a new item, not a rename: the codename is cleared
        so the platform generates a fresh one.
        """
        return ContentItem(
            type=target_type,
            name=self.name,
            codename=None,
            external_id=external_id,
            collection=self.collection,
        )

    def to_upsert_dict(self) -> Dict[str, Any]:
        """Request body for creating or updating the item."""
        body: Dict[str, Any] = {
            "name": self.name,
            "type": self.type.to_dict(),
        }
        if self.codename:
            body["codename"] = self.codename
        if self.collection:
            body["collection"] = self.collection.to_dict()
        return body

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "codename": self.codename,
            "external_id": self.external_id,
            "type": self.type.to_dict(),
            "collection": self.collection.to_dict() if self.collection else None,
            "last_modified": self.last_modified.isoformat() if self.last_modified else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ContentItem":
        """Create from dictionary representation."""
        return cls(
            id=data.get("id"),
            name=data.get("name", ""),
            codename=data.get("codename"),
            external_id=data.get("external_id"),
            type=Reference.from_dict(data.get("type") or {}),
            collection=_optional_reference(data.get("collection")),
            last_modified=_parse_timestamp(data.get("last_modified")),
        )


@dataclass
class FieldValue:
    """The value of one element in a language variant."""
    element: Reference
    value: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)  # e.g. components, mode

    def retarget(self, element: Reference) -> "FieldValue":
        """Deep copy of this value pointing at another element."""
        return FieldValue(
            element=element,
            value=copy.deepcopy(self.value),
            extra=copy.deepcopy(self.extra),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = dict(self.extra)
        result["element"] = self.element.to_dict()
        result["value"] = self.value
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldValue":
        """Create from dictionary representation."""
        return cls(
            element=Reference.from_dict(data.get("element") or {}),
            value=data.get("value"),
            extra={k: v for k, v in data.items() if k not in ("element", "value")},
        )


@dataclass
class LanguageVariant:
    """Per-language element values and workflow state of an item."""
    item: Reference
    language: Reference
    elements: List[FieldValue] = field(default_factory=list)
    workflow_step: Optional[Reference] = None
    last_modified: Optional[datetime] = None

    def find_element(self, element_id: str) -> Optional[FieldValue]:
        """Get the value stored for an element id."""
        for value in self.elements:
            if value.element.value == element_id:
                return value
        return None

    def to_upsert_dict(self) -> Dict[str, Any]:
        """Request body for upserting the variant."""
        return {"elements": [e.to_dict() for e in self.elements]}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "item": self.item.to_dict(),
            "language": self.language.to_dict(),
            "elements": [e.to_dict() for e in self.elements],
            "workflow_step": self.workflow_step.to_dict() if self.workflow_step else None,
            "last_modified": self.last_modified.isoformat() if self.last_modified else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LanguageVariant":
        """Create from dictionary representation."""
        step = data.get("workflow_step")
        if not step and data.get("workflow"):
            # Newer payloads nest the step under "workflow"
            step = data["workflow"].get("step_identifier")

        return cls(
            item=Reference.from_dict(data.get("item") or {}),
            language=Reference.from_dict(data.get("language") or {}),
            elements=[FieldValue.from_dict(e) for e in data.get("elements") or []],
            workflow_step=_optional_reference(step),
            last_modified=_parse_timestamp(data.get("last_modified")),
        )


@dataclass
class WorkflowStep:
    """A step of the project workflow."""
    id: str
    name: str
    codename: Optional[str] = None
    transitions_to: List[str] = field(default_factory=list)

    @property
    def reference(self) -> Reference:
        return Reference.by_id(self.id)

    @property
    def classification(self) -> WorkflowClassification:
        """Classify by display name; renamed steps fall through to custom."""
        return _STEP_NAMES.get(self.name, WorkflowClassification.CUSTOM)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "id": self.id,
            "name": self.name,
            "codename": self.codename,
            "transitions_to": self.transitions_to,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorkflowStep":
        """Create from dictionary representation."""
        transitions = []
        for transition in data.get("transitions_to") or []:
            if isinstance(transition, dict):
                step = transition.get("step") or transition
                transitions.append(step.get("id", ""))
            else:
                transitions.append(str(transition))

        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            codename=data.get("codename"),
            transitions_to=transitions,
        )
