"""Remapping of variant element values onto another content type."""

import logging
from typing import Iterable, List, Sequence, Tuple

from ..errors import NotFoundError, ValidationError
from ..models.reference import Reference
from ..models.content import FieldValue, LanguageVariant

logger = logging.getLogger(__name__)

ElementMapping = Sequence[Tuple[str, str]]  # (target element id, source element id)


class FieldRemapper:
    """
    Rewrites a variant's element values under an element mapping.

    Each mapping entry copies the value of its source element to its target
    element. Elements not named in the mapping are dropped.
    """

    @staticmethod
    def validate_mapping(mapping: ElementMapping) -> None:
        """
        Check the structure of a mapping without calling out.

        Raises:
            ValidationError: if an entry has a blank id or a target
                element is repeated
        """
        seen = set()
        duplicates = []
        for target, source in mapping:
            if not target or not source:
                raise ValidationError(
                    "Element mapping entries need both a target and a source element id",
                    {"target": target, "source": source},
                )
            if target in seen:
                duplicates.append(target)
            seen.add(target)

        if duplicates:
            raise ValidationError(
                f"Element mapping repeats target elements: {', '.join(duplicates)}",
                {"duplicate_targets": duplicates},
            )

    def remap(self, elements: Iterable[FieldValue], mapping: ElementMapping) -> List[FieldValue]:
        """
        Produce one value per mapping entry.

        Args:
            elements: Element values of the source variant
            mapping: (target element id, source element id) pairs

        Returns:
            Deep copies of the source values, retargeted to the target elements

        Raises:
            NotFoundError: if a source element has no value in the variant
        """
        by_element = {value.element.value: value for value in elements}

        remapped = []
        for target, source in mapping:
            source_value = by_element.get(source)
            if source_value is None:
                raise NotFoundError(
                    f"Source element {source} not found in variant",
                    {"source_element": source, "target_element": target},
                )
            remapped.append(source_value.retarget(Reference.by_id(target)))

        return remapped

    def remap_variant(
        self,
        variant: LanguageVariant,
        mapping: ElementMapping,
        item: Reference
    ) -> LanguageVariant:
        """Build the variant of the new item from a source variant."""
        try:
            elements = self.remap(variant.elements, mapping)
        except NotFoundError as e:
            e.details["language"] = variant.language.value
            raise

        logger.debug(
            f"Remapped {len(elements)} of {len(variant.elements)} elements "
            f"for language {variant.language.value}"
        )

        return LanguageVariant(
            item=item,
            language=variant.language,
            elements=elements,
            workflow_step=variant.workflow_step,
        )
