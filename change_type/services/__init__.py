"""Service layer for the type change application."""

from .remapper import FieldRemapper
from .harvester import VariantHarvester
from .workflow import (
    TransitionOperation,
    TransitionStep,
    WorkflowSteps,
    WorkflowTransitionOrchestrator,
)
from .type_listing import TypeListingService, find_type
from .compatibility import ELEMENT_COMPATIBILITY, compatible_elements, mapping_choices

__all__ = [
    "FieldRemapper",
    "VariantHarvester",
    "TransitionOperation",
    "TransitionStep",
    "WorkflowSteps",
    "WorkflowTransitionOrchestrator",
    "TypeListingService",
    "find_type",
    "ELEMENT_COMPATIBILITY",
    "compatible_elements",
    "mapping_choices",
]
