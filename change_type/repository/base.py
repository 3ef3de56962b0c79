"""Repository interface for the content management project."""

from abc import ABC, abstractmethod
from typing import List
import uuid

from ..models.reference import Reference
from ..models.content import (
    ContentItem,
    ContentSnippet,
    ContentType,
    LanguageVariant,
    WorkflowStep,
)
from ..tracker import UsageTracker


class ContentRepository(ABC):
    """
    Base class for content repositories.

    Every remote operation takes the tracker of the request it runs for and
    records exactly one call on it per round trip. Failures are raised,
    never reported as success.
    """

    @abstractmethod
    def get_item(self, tracker: UsageTracker, item: Reference) -> ContentItem:
        pass

    @abstractmethod
    def get_variant(
        self,
        tracker: UsageTracker,
        item: Reference,
        language: Reference
    ) -> LanguageVariant:
        pass

    @abstractmethod
    def list_variants(self, tracker: UsageTracker, item: Reference) -> List[LanguageVariant]:
        """Get every language variant of an item."""
        pass

    @abstractmethod
    def upsert_item(self, tracker: UsageTracker, item: ContentItem) -> ContentItem:
        """
        Create or update an item.

        Items without an id are addressed by their external id.
        """
        pass

    @abstractmethod
    def upsert_variant(self, tracker: UsageTracker, variant: LanguageVariant) -> LanguageVariant:
        pass

    @abstractmethod
    def create_new_version(self, tracker: UsageTracker, variant: LanguageVariant) -> None:
        """Create an editable draft version of a published variant."""
        pass

    @abstractmethod
    def publish_variant(self, tracker: UsageTracker, variant: LanguageVariant) -> None:
        pass

    @abstractmethod
    def change_workflow_step(
        self,
        tracker: UsageTracker,
        variant: LanguageVariant,
        step: Reference
    ) -> None:
        pass

    @abstractmethod
    def list_workflow_steps(self, tracker: UsageTracker) -> List[WorkflowStep]:
        pass

    @abstractmethod
    def list_content_types(self, tracker: UsageTracker) -> List[ContentType]:
        pass

    @abstractmethod
    def get_snippet(self, tracker: UsageTracker, snippet: Reference) -> ContentSnippet:
        pass

    def new_external_id(self) -> str:
        """Allocate an external id for a new item. Not a remote call."""
        return str(uuid.uuid4())
