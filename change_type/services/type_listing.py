"""Content type listing with snippet elements expanded inline."""

import logging
from typing import List, Optional

from ..errors import NotFoundError
from ..models.reference import Reference, ReferenceKind
from ..models.content import ContentType, ElementType
from ..models.migration import TypeListing
from ..repository.base import ContentRepository
from ..tracker import UsageTracker

logger = logging.getLogger(__name__)


def find_type(types: List[ContentType], reference: Reference) -> Optional[ContentType]:
    """Find a type by id or codename reference."""
    for content_type in types:
        if reference.kind == ReferenceKind.ID and content_type.id == reference.value:
            return content_type
        if reference.kind == ReferenceKind.CODENAME and content_type.codename == reference.value:
            return content_type
    return None


class TypeListingService:
    """
    Lists the types an item can be moved to.

    Elements coming from snippets are fetched and appended to each type's
    element list; snippet and guidelines elements are removed since they
    never hold item data.
    """

    def __init__(self, repository: ContentRepository):
        self.repository = repository

    def expand_type(self, tracker: UsageTracker, content_type: ContentType) -> ContentType:
        """Get a copy of a type with snippet elements inlined and supporting elements removed."""
        elements = list(content_type.elements)

        for element in content_type.elements:
            if element.type == ElementType.SNIPPET and element.snippet:
                snippet = self.repository.get_snippet(tracker, element.snippet)
                elements.extend(snippet.elements)
                logger.debug(
                    f"Expanded snippet {snippet.codename} into {content_type.codename} "
                    f"({len(snippet.elements)} elements)"
                )

        return ContentType(
            id=content_type.id,
            codename=content_type.codename,
            name=content_type.name,
            elements=[e for e in elements if not e.is_supporting],
        )

    def list_types(self, tracker: UsageTracker, item: Reference) -> TypeListing:
        """
        Get the item's current type and all other types.

        Raises:
            NotFoundError: if the item or its type does not exist
        """
        types = [self.expand_type(tracker, t) for t in self.repository.list_content_types(tracker)]
        content_item = self.repository.get_item(tracker, item)

        current = find_type(types, content_item.type)
        if current is None:
            raise NotFoundError(
                f"Type {content_item.type.value} of item {item.value} not found",
                {"type": content_item.type.value},
            )

        return TypeListing(
            current_type=current,
            other_types=[t for t in types if t.id != current.id],
        )
