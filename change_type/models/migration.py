"""Migration request, result and configuration models."""

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .reference import Reference
from ..errors import ValidationError
from .content import ContentItem, ContentType, LanguageVariant


DEFAULT_BASE_URL = "https://manage.kontent.ai/v2"
DEFAULT_LANGUAGE = "default"


@dataclass
class MigrationRequest:
    """A request to move an item to another content type."""
    item: Reference
    target_type: Reference
    field_mapping: List[Tuple[str, str]] = field(default_factory=list)  # (target element id, source element id)
    language: Optional[Reference] = None  # Project default when omitted

    @classmethod
    def from_mapping_pairs(
        cls,
        item: Reference,
        target_type: Reference,
        pairs: Iterable[Tuple[str, str]],
        language: Optional[Reference] = None
    ) -> "MigrationRequest":
        """Create a request from (target element id, source element id) pairs."""
        return cls(
            item=item,
            target_type=target_type,
            field_mapping=[(str(target), str(source)) for target, source in pairs],
            language=language,
        )

    def language_or(self, default_codename: str) -> Reference:
        """Get the requested language, falling back to the default language."""
        return self.language or Reference.by_codename(default_codename)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "item": self.item.to_dict(),
            "language": self.language.to_dict() if self.language else None,
            "target_type": self.target_type.to_dict(),
            "field_mapping": [list(pair) for pair in self.field_mapping],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MigrationRequest":
        """Create from dictionary representation."""
        language = data.get("language")
        return cls.from_mapping_pairs(
            item=Reference.from_dict(data["item"]),
            target_type=Reference.from_dict(data["target_type"]),
            pairs=[tuple(pair) for pair in data.get("field_mapping") or []],
            language=Reference.from_dict(language) if language else None,
        )


@dataclass
class MigrationResult:
    """Outcome of a successful type change."""
    total_api_calls: int
    total_milliseconds: int
    new_item: ContentItem
    updated_variants: List[LanguageVariant] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "total_api_calls": self.total_api_calls,
            "total_milliseconds": self.total_milliseconds,
            "new_item": self.new_item.to_dict(),
            "updated_variants": [v.to_dict() for v in self.updated_variants],
        }


@dataclass
class TypeListing:
    """The item's current type and every other type it could move to."""
    current_type: ContentType
    other_types: List[ContentType] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "current_type": self.current_type.to_dict(),
            "other_types": [t.to_dict() for t in self.other_types],
        }


@dataclass
class MigrationConfig:
    """Connection settings for the Management API."""
    project_id: str = ""
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    default_language: str = DEFAULT_LANGUAGE

    # Transport options
    rate_limit: float = 10.0  # Requests per second
    timeout: float = 30.0  # Seconds per call
    retry_config: Dict[str, Any] = field(default_factory=lambda: {
        "max_retries": 3,
        "backoff_factor": 2.0,
    })

    def validate(self) -> List[str]:
        """Return a list of configuration problems."""
        errors = []
        if not self.project_id:
            errors.append("Project ID is required")
        if not self.api_key:
            errors.append("Management API key is required")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation (without the API key)."""
        return {
            "project_id": self.project_id,
            "base_url": self.base_url,
            "default_language": self.default_language,
            "rate_limit": self.rate_limit,
            "timeout": self.timeout,
            "retry_config": self.retry_config,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MigrationConfig":
        """Create from dictionary representation."""
        config = cls(
            project_id=data.get("project_id", ""),
            api_key=data.get("api_key"),
            base_url=data.get("base_url", DEFAULT_BASE_URL),
            default_language=data.get("default_language", DEFAULT_LANGUAGE),
            rate_limit=float(data.get("rate_limit", 10.0)),
            timeout=float(data.get("timeout", 30.0)),
        )
        if data.get("retry_config"):
            config.retry_config.update(data["retry_config"])
        return config

    @classmethod
    def from_json_file(cls, file_path: str) -> "MigrationConfig":
        """Load configuration from a JSON file."""
        with open(file_path, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def from_env(cls) -> "MigrationConfig":
        """Load configuration from KONTENT_* environment variables."""
        return cls(
            project_id=os.environ.get("KONTENT_PROJECT_ID", ""),
            api_key=os.environ.get("KONTENT_MANAGEMENT_API_KEY"),
            base_url=os.environ.get("KONTENT_BASE_URL", DEFAULT_BASE_URL),
            default_language=os.environ.get("KONTENT_DEFAULT_LANGUAGE", DEFAULT_LANGUAGE),
            rate_limit=float(os.environ.get("KONTENT_RATE_LIMIT", 10.0)),
            timeout=float(os.environ.get("KONTENT_TIMEOUT", 30.0)),
        )


class _MappingPairs(list):
    """JSON object decoded as its list of (key, value) pairs."""


def parse_mapping_json(text: Union[str, bytes]) -> List[Tuple[str, str]]:
    """
    Parse an element mapping JSON object, keeping repeated keys.

    A plain dict would silently keep only the last of repeated target
    elements, so the object is decoded as pairs and duplicates are left
    for mapping validation to reject.

    Raises:
        ValidationError: if the text is not a JSON object of strings
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValidationError(f"Element mapping is not valid UTF-8: {e}") from e

    try:
        data = json.loads(text, object_pairs_hook=_MappingPairs)
    except ValueError as e:
        raise ValidationError(f"Element mapping is not valid JSON: {e}") from e

    if not isinstance(data, _MappingPairs):
        raise ValidationError("Element mapping must be a JSON object of target -> source element ids")

    pairs = []
    for target, source in data:
        if not isinstance(source, str):
            raise ValidationError(
                f"Source element for target {target} must be an element id string",
                {"target": target},
            )
        pairs.append((target, source))
    return pairs
