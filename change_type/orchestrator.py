"""Type change orchestrator - coordinates one type change request."""

import logging
from typing import List, Optional

from .errors import ChangeTypeError, NotFoundError
from .models.reference import Reference
from .models.content import ContentItem, ContentType, LanguageVariant
from .models.migration import (
    MigrationConfig,
    MigrationRequest,
    MigrationResult,
    TypeListing,
)
from .repository.base import ContentRepository
from .services.remapper import FieldRemapper
from .services.harvester import VariantHarvester
from .services.workflow import WorkflowSteps, WorkflowTransitionOrchestrator
from .services.type_listing import TypeListingService, find_type
from .tracker import UsageTracker

logger = logging.getLogger(__name__)


class ChangeTypeOrchestrator:
    """
    Orchestrates moving an item to another content type.

    Handles:
    - Mapping validation before any remote call
    - Resolving the source item, variant and target type
    - Remapping every language variant
    - Creating the new item
    - Editing each variant through its workflow step
    - Call and timing statistics

    The new item is created alongside the source item, which is left
    untouched. Calls are not rolled back on failure, so a request that
    failed part way must not simply be retried: it would create another item.
    """

    def __init__(
        self,
        repository: ContentRepository,
        config: Optional[MigrationConfig] = None
    ):
        """
        Initialize the orchestrator.

        Args:
            repository: Repository of the content project
            config: Settings; only the default language is used here
        """
        self.repository = repository
        self.config = config or MigrationConfig()
        self.remapper = FieldRemapper()
        self.harvester = VariantHarvester(repository, self.remapper)
        self.workflow = WorkflowTransitionOrchestrator(repository)
        self.type_listing = TypeListingService(repository)

    def change_type(self, request: MigrationRequest) -> MigrationResult:
        """
        Run a type change request.

        Args:
            request: The item, target type and element mapping

        Returns:
            MigrationResult with the new item and its variants

        Raises:
            ValidationError: if the mapping is malformed
            NotFoundError: if a referenced object does not exist
            RemoteCallError: if an API call fails
        """
        tracker = UsageTracker().start()
        mapping = request.field_mapping
        language = request.language_or(self.config.default_language)
        external_id: Optional[str] = None
        mutating = False

        logger.info(
            f"=== CHANGE TYPE: item {request.item.value} ({language.value}) "
            f"-> type {request.target_type.value} ==="
        )

        try:
            self.remapper.validate_mapping(mapping)

            logger.info("=== PHASE 1: SOURCE ===")
            source_item = self.repository.get_item(tracker, request.item)
            source_variant = self.repository.get_variant(tracker, source_item.reference, language)

            external_id = self.repository.new_external_id()
            new_item_ref = Reference.by_external_id(external_id)
            requested = self.remapper.remap_variant(source_variant, mapping, new_item_ref)

            logger.info("=== PHASE 2: TARGET TYPE ===")
            target_type = self._resolve_target_type(tracker, request.target_type, mapping)

            logger.info("=== PHASE 3: LANGUAGE VARIANTS ===")
            pending = self.harvester.harvest(tracker, source_item, requested, mapping, new_item_ref)

            steps = WorkflowSteps(self.repository.list_workflow_steps(tracker))
            planned = self.workflow.plan_all(pending, steps)

            logger.info("=== PHASE 4: MUTATIONS ===")
            mutating = True
            logger.info(f"Creating item {external_id} of type {target_type.codename}")
            new_item = self.repository.upsert_item(
                tracker, source_item.as_migrated(external_id, target_type.reference)
            )
            updated = self.workflow.execute(tracker, planned)

        except ChangeTypeError as e:
            tracker.stop()
            if mutating:
                e.details["new_item_external_id"] = external_id
            logger.error(
                f"Type change failed after {tracker.api_calls} API calls "
                f"({tracker.elapsed_milliseconds} ms): {e.message}"
            )
            raise

        result = self._aggregate(tracker, new_item, updated)
        logger.info(
            f"=== CHANGE TYPE COMPLETED: {len(updated)} variants, "
            f"{result.total_api_calls} API calls, {result.total_milliseconds} ms ==="
        )
        return result

    def list_types(self, item: Reference) -> TypeListing:
        """Get the item's current type and the types it can move to."""
        tracker = UsageTracker().start()
        listing = self.type_listing.list_types(tracker, item)
        tracker.stop()

        logger.info(
            f"Listed {len(listing.other_types) + 1} types for item {item.value} "
            f"({tracker.api_calls} API calls, {tracker.elapsed_milliseconds} ms)"
        )
        return listing

    def _resolve_target_type(
        self,
        tracker: UsageTracker,
        reference: Reference,
        mapping: List
    ) -> ContentType:
        """Find the target type and check that every mapped target element belongs to it."""
        target_type = find_type(self.repository.list_content_types(tracker), reference)
        if target_type is None:
            raise NotFoundError(f"Content type not found: {reference.value}", {"type": reference.value})

        expanded = self.type_listing.expand_type(tracker, target_type)
        known = set(expanded.element_ids())
        missing = [target for target, _ in mapping if target not in known]
        if missing:
            raise NotFoundError(
                f"Elements not found in type {target_type.codename}: {', '.join(missing)}",
                {"type": target_type.id, "missing_elements": missing},
            )

        return target_type

    def _aggregate(
        self,
        tracker: UsageTracker,
        new_item: ContentItem,
        updated: List[LanguageVariant]
    ) -> MigrationResult:
        """Assemble the result; the clock stops once it is built."""
        result = MigrationResult(
            total_api_calls=tracker.api_calls,
            total_milliseconds=0,
            new_item=new_item,
            updated_variants=updated,
        )
        tracker.stop()
        result.total_milliseconds = tracker.elapsed_milliseconds
        return result
