"""Collects every language variant that has to move with an item."""

import logging
from typing import List

from .remapper import ElementMapping, FieldRemapper
from ..models.reference import Reference
from ..models.content import ContentItem, LanguageVariant
from ..repository.base import ContentRepository
from ..tracker import UsageTracker

logger = logging.getLogger(__name__)


class VariantHarvester:
    """
    Produces the pending variants of the new item, one per language.

    Element ids are shared by all languages of an item, so the mapping of
    the requested language applies to every other language as well.
    """

    def __init__(self, repository: ContentRepository, remapper: FieldRemapper):
        self.repository = repository
        self.remapper = remapper

    def harvest(
        self,
        tracker: UsageTracker,
        source_item: ContentItem,
        requested: LanguageVariant,
        mapping: ElementMapping,
        new_item: Reference
    ) -> List[LanguageVariant]:
        """
        Build the pending variants of the new item.

        Args:
            tracker: Tracker of the current request
            source_item: Item being migrated
            requested: Already remapped variant of the requested language
            mapping: Element mapping of the request
            new_item: Reference to the item being created

        Returns:
            The requested variant followed by one remapped variant per other
            language, in listing order. Each keeps its original workflow step.
        """
        # A failed listing is fatal: every variant drives a later mutation
        variants = self.repository.list_variants(tracker, source_item.reference)

        pending = [requested]
        for variant in variants:
            if variant.language == requested.language:
                continue
            pending.append(self.remapper.remap_variant(variant, mapping, new_item))

        logger.info(
            f"Harvested {len(pending)} variants of item {source_item.codename or source_item.id} "
            f"({len(pending) - 1} besides the requested language)"
        )
        return pending
