"""Element type compatibility used when presenting mapping choices.

The table only decides which current elements are offered for a target
element. Migrations never check it: any structurally valid mapping is
accepted.
"""

from typing import Dict, List, Tuple

from ..models.content import ContentType, ElementDefinition, ElementType


# Target element type -> source element types offered for it
ELEMENT_COMPATIBILITY: Dict[ElementType, Tuple[ElementType, ...]] = {
    ElementType.ASSET: (ElementType.ASSET,),
    ElementType.SNIPPET: (ElementType.SNIPPET,),
    ElementType.CUSTOM: (ElementType.CUSTOM,),
    ElementType.DATE_TIME: (ElementType.DATE_TIME,),
    ElementType.GUIDELINES: (ElementType.GUIDELINES, ElementType.TEXT),
    ElementType.MODULAR_CONTENT: (ElementType.MODULAR_CONTENT,),
    ElementType.NUMBER: (ElementType.NUMBER,),
    ElementType.MULTIPLE_CHOICE: (ElementType.MULTIPLE_CHOICE,),
    ElementType.RICH_TEXT: (ElementType.RICH_TEXT,),
    ElementType.TAXONOMY: (ElementType.TAXONOMY,),
    ElementType.TEXT: (
        ElementType.TEXT,
        ElementType.DATE_TIME,
        ElementType.CUSTOM,
        ElementType.NUMBER,
        ElementType.RICH_TEXT,
    ),
    ElementType.URL_SLUG: (ElementType.TEXT, ElementType.URL_SLUG),
}


def compatible_elements(
    target: ElementDefinition,
    candidates: List[ElementDefinition]
) -> List[ElementDefinition]:
    """Get the candidate elements that may be offered as a source for `target`."""
    allowed = ELEMENT_COMPATIBILITY.get(target.type, ())
    return [c for c in candidates if c.type in allowed]


def mapping_choices(
    target_type: ContentType,
    current_type: ContentType
) -> List[Tuple[ElementDefinition, List[ElementDefinition]]]:
    """Pair every element of the target type with its compatible current elements."""
    return [
        (element, compatible_elements(element, current_type.elements))
        for element in target_type.elements
    ]
