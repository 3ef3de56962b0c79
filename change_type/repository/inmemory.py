"""In-memory implementation of ContentRepository."""

import copy
import logging
import uuid
from typing import Dict, List, Optional, Tuple

from .base import ContentRepository
from ..errors import NotFoundError, RemoteCallError
from ..models.reference import Reference, ReferenceKind
from ..models.content import (
    ContentItem,
    ContentSnippet,
    ContentType,
    LanguageVariant,
    WorkflowClassification,
    WorkflowStep,
)
from ..tracker import UsageTracker

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE_ID = "00000000-0000-0000-0000-000000000000"


class InMemoryRepository(ContentRepository):
    """In-memory repository for testing and development.

    Mimics the platform's workflow rules: variants in a Published or
    Archived step reject upserts, new versions can only be created from
    published variants. A variant not stored yet is treated as sitting in
    the workflow step it declares.

    Every call is appended to `operations` as (operation, *arguments), and
    failures can be injected per operation with `fail_on`.
    """

    def __init__(self) -> None:
        self._items: Dict[str, ContentItem] = {}
        self._languages: Dict[str, str] = {DEFAULT_LANGUAGE_ID: "default"}  # id -> codename
        self._variants: Dict[Tuple[str, str], LanguageVariant] = {}
        self._types: List[ContentType] = []
        self._snippets: Dict[str, ContentSnippet] = {}
        self._steps: List[WorkflowStep] = []
        self._failures: Dict[str, int] = {}
        self._call_counts: Dict[str, int] = {}
        self.operations: List[Tuple[str, ...]] = []

    # Setup
    def add_language(self, language_id: str, codename: str) -> None:
        self._languages[language_id] = codename

    def add_item(self, item: ContentItem) -> ContentItem:
        if not item.id:
            item.id = str(uuid.uuid4())
        self._items[item.id] = copy.deepcopy(item)
        return item

    def add_variant(self, variant: LanguageVariant) -> LanguageVariant:
        key = (self._resolve_item(variant.item).id, self._resolve_language(variant.language))
        stored = copy.deepcopy(variant)
        stored.item = Reference.by_id(key[0])
        stored.language = Reference.by_id(key[1])
        self._variants[key] = stored
        return stored

    def add_type(self, content_type: ContentType) -> None:
        self._types.append(copy.deepcopy(content_type))

    def add_snippet(self, snippet: ContentSnippet) -> None:
        self._snippets[snippet.id] = copy.deepcopy(snippet)

    def add_workflow_step(self, step: WorkflowStep) -> None:
        self._steps.append(copy.deepcopy(step))

    def fail_on(self, operation: str, occurrence: int = 1) -> None:
        """Make the given (1-based) occurrence of an operation fail."""
        self._failures[operation] = occurrence

    # Inspection
    def stored_variants(self, item_id: str) -> List[LanguageVariant]:
        return [copy.deepcopy(v) for (i, _), v in self._variants.items() if i == item_id]

    def classify(self, step: Optional[Reference]) -> WorkflowClassification:
        for candidate in self._steps:
            if step and candidate.id == step.value:
                return candidate.classification
        return WorkflowClassification.CUSTOM

    def find_items(self, **filters) -> List[ContentItem]:
        """Get stored items whose attributes match all filters."""
        return [
            copy.deepcopy(item) for item in self._items.values()
            if all(getattr(item, key) == value for key, value in filters.items())
        ]

    # Internals
    def _record(self, tracker: UsageTracker, operation: str, *args: str) -> None:
        tracker.record_call(operation)
        self.operations.append((operation,) + args)
        self._call_counts[operation] = self._call_counts.get(operation, 0) + 1
        if self._failures.get(operation) == self._call_counts[operation]:
            raise RemoteCallError(f"{operation} failed (injected)", operation=operation, remote_status=500)

    def _resolve_item(self, reference: Reference) -> ContentItem:
        for item in self._items.values():
            if reference.kind == ReferenceKind.ID and item.id == reference.value:
                return item
            if reference.kind == ReferenceKind.CODENAME and item.codename == reference.value:
                return item
            if reference.kind == ReferenceKind.EXTERNAL_ID and item.external_id == reference.value:
                return item
        raise NotFoundError(f"Item not found: {reference}")

    def _resolve_language(self, reference: Reference) -> str:
        if reference.kind == ReferenceKind.ID and reference.value in self._languages:
            return reference.value
        if reference.kind == ReferenceKind.CODENAME:
            for language_id, codename in self._languages.items():
                if codename == reference.value:
                    return language_id
        raise NotFoundError(f"Language not found: {reference}")

    def _step_by_classification(self, classification: WorkflowClassification) -> WorkflowStep:
        for step in self._steps:
            if step.classification == classification:
                return step
        raise NotFoundError(f"No {classification.value} workflow step")

    def _key(self, variant: LanguageVariant) -> Tuple[str, str]:
        return (self._resolve_item(variant.item).id, self._resolve_language(variant.language))

    def _current_step(self, variant: LanguageVariant) -> Optional[Reference]:
        stored = self._variants.get(self._key(variant))
        return stored.workflow_step if stored else variant.workflow_step

    def _store(self, variant: LanguageVariant, step: Optional[Reference]) -> LanguageVariant:
        key = self._key(variant)
        stored = copy.deepcopy(variant)
        stored.item = Reference.by_id(key[0])
        stored.language = Reference.by_id(key[1])
        stored.workflow_step = step
        if key in self._variants and not variant.elements:
            stored.elements = self._variants[key].elements
        self._variants[key] = stored
        return copy.deepcopy(stored)

    # ContentRepository
    def get_item(self, tracker: UsageTracker, item: Reference) -> ContentItem:
        self._record(tracker, "get_item", item.value)
        return copy.deepcopy(self._resolve_item(item))

    def get_variant(
        self,
        tracker: UsageTracker,
        item: Reference,
        language: Reference
    ) -> LanguageVariant:
        self._record(tracker, "get_variant", item.value, language.value)
        key = (self._resolve_item(item).id, self._resolve_language(language))
        if key not in self._variants:
            raise NotFoundError(f"Variant not found: {item} / {language}")
        return copy.deepcopy(self._variants[key])

    def list_variants(self, tracker: UsageTracker, item: Reference) -> List[LanguageVariant]:
        self._record(tracker, "list_variants", item.value)
        return self.stored_variants(self._resolve_item(item).id)

    def upsert_item(self, tracker: UsageTracker, item: ContentItem) -> ContentItem:
        self._record(tracker, "upsert_item", item.id or item.external_id or "")
        stored = copy.deepcopy(item)
        for existing in self._items.values():
            if (item.id and existing.id == item.id) or (
                item.external_id and existing.external_id == item.external_id
            ):
                stored.id = existing.id
                break
        else:
            stored.id = stored.id or str(uuid.uuid4())
        if not stored.codename:
            stored.codename = f"{stored.name.lower().replace(' ', '_')}_{stored.id[:8]}"
        self._items[stored.id] = stored
        return copy.deepcopy(stored)

    def upsert_variant(self, tracker: UsageTracker, variant: LanguageVariant) -> LanguageVariant:
        key = self._key(variant)
        self._record(tracker, "upsert_variant", key[0], key[1])
        current = self._current_step(variant)
        if self.classify(current) in (WorkflowClassification.PUBLISHED, WorkflowClassification.ARCHIVED):
            raise RemoteCallError(
                "upsert_variant failed: variant is published or archived",
                operation="upsert_variant",
                remote_status=400,
            )
        return self._store(variant, current)

    def create_new_version(self, tracker: UsageTracker, variant: LanguageVariant) -> None:
        key = self._key(variant)
        self._record(tracker, "create_new_version", key[0], key[1])
        if self.classify(self._current_step(variant)) != WorkflowClassification.PUBLISHED:
            raise RemoteCallError(
                "create_new_version failed: variant is not published",
                operation="create_new_version",
                remote_status=400,
            )
        draft = self._step_by_classification(WorkflowClassification.DRAFT)
        self._store(variant, draft.reference)

    def publish_variant(self, tracker: UsageTracker, variant: LanguageVariant) -> None:
        key = self._key(variant)
        self._record(tracker, "publish_variant", key[0], key[1])
        published = self._step_by_classification(WorkflowClassification.PUBLISHED)
        self._store(variant, published.reference)

    def change_workflow_step(
        self,
        tracker: UsageTracker,
        variant: LanguageVariant,
        step: Reference
    ) -> None:
        key = self._key(variant)
        self._record(tracker, "change_workflow_step", key[0], key[1], step.value)
        if not any(s.id == step.value for s in self._steps):
            raise RemoteCallError(
                f"change_workflow_step failed: unknown step {step}",
                operation="change_workflow_step",
                remote_status=400,
            )
        self._store(variant, step)

    def list_workflow_steps(self, tracker: UsageTracker) -> List[WorkflowStep]:
        self._record(tracker, "list_workflow_steps")
        return copy.deepcopy(self._steps)

    def list_content_types(self, tracker: UsageTracker) -> List[ContentType]:
        self._record(tracker, "list_content_types")
        return copy.deepcopy(self._types)

    def get_snippet(self, tracker: UsageTracker, snippet: Reference) -> ContentSnippet:
        self._record(tracker, "get_snippet", snippet.value)
        for candidate in self._snippets.values():
            if candidate.id == snippet.value or candidate.codename == snippet.value:
                return copy.deepcopy(candidate)
        raise NotFoundError(f"Snippet not found: {snippet}")
