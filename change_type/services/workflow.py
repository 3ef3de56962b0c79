"""Workflow transitions that allow editing a variant in any workflow step."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from enum import Enum

from ..errors import NotFoundError, RemoteCallError
from ..models.reference import Reference, ReferenceKind
from ..models.content import LanguageVariant, WorkflowClassification, WorkflowStep
from ..repository.base import ContentRepository
from ..tracker import UsageTracker

logger = logging.getLogger(__name__)


class TransitionOperation(str, Enum):
    """Remote operations used while transitioning a variant."""
    CREATE_NEW_VERSION = "create_new_version"
    CHANGE_WORKFLOW_STEP = "change_workflow_step"
    UPSERT = "upsert_variant"
    PUBLISH = "publish_variant"


@dataclass(frozen=True)
class TransitionStep:
    """One remote operation of a variant's transition."""
    operation: TransitionOperation
    target_step: Optional[Reference] = None  # Only for workflow step changes

    def __str__(self) -> str:
        if self.target_step:
            return f"{self.operation.value}({self.target_step.value})"
        return self.operation.value


class WorkflowSteps:
    """The project's workflow steps, classified by name."""

    def __init__(self, steps: List[WorkflowStep]):
        self.steps = steps
        self._by_id: Dict[str, WorkflowStep] = {step.id: step for step in steps}

    def classify(self, step: Optional[Reference]) -> WorkflowClassification:
        """
        Classify a variant's step.

        Steps missing from the workflow are treated as custom; a variant
        without a step is a draft.
        """
        if step is None:
            return WorkflowClassification.DRAFT
        known = None
        if step.kind == ReferenceKind.ID:
            known = self._by_id.get(step.value)
        elif step.kind == ReferenceKind.CODENAME:
            for candidate in self.steps:
                if candidate.codename == step.value:
                    known = candidate
                    break
        return known.classification if known else WorkflowClassification.CUSTOM

    def find(self, classification: WorkflowClassification) -> WorkflowStep:
        for step in self.steps:
            if step.classification == classification:
                return step
        raise NotFoundError(
            f"Workflow has no step named {classification.value.capitalize()}",
            {"classification": classification.value},
        )


class WorkflowTransitionOrchestrator:
    """
    Edits variants regardless of their workflow step and restores the step.

    Published and Archived variants cannot be edited directly:
    - Published: create a new version, upsert, publish
    - Archived: move to Draft, upsert, move back to the original step
    - Draft and custom steps: upsert, move back to the original step

    Variants are processed one at a time. A failed call aborts the whole
    request; variants transitioned before it stay as they are.
    """

    def __init__(self, repository: ContentRepository):
        self.repository = repository

    def plan(self, variant: LanguageVariant, steps: WorkflowSteps) -> List[TransitionStep]:
        """
        Get the ordered operations that edit a variant and restore its step.

        Raises:
            NotFoundError: if a required workflow step does not exist
        """
        classification = steps.classify(variant.workflow_step)
        original = variant.workflow_step or steps.find(WorkflowClassification.DRAFT).reference

        if classification == WorkflowClassification.PUBLISHED:
            return [
                TransitionStep(TransitionOperation.CREATE_NEW_VERSION),
                TransitionStep(TransitionOperation.UPSERT),
                TransitionStep(TransitionOperation.PUBLISH),
            ]

        plan = []
        if classification == WorkflowClassification.ARCHIVED:
            draft = steps.find(WorkflowClassification.DRAFT)
            plan.append(TransitionStep(TransitionOperation.CHANGE_WORKFLOW_STEP, draft.reference))

        plan.append(TransitionStep(TransitionOperation.UPSERT))
        plan.append(TransitionStep(TransitionOperation.CHANGE_WORKFLOW_STEP, original))
        return plan

    def plan_all(
        self,
        variants: List[LanguageVariant],
        steps: WorkflowSteps
    ) -> List[Tuple[LanguageVariant, List[TransitionStep]]]:
        """Plan every variant up front so missing steps fail before any mutation."""
        return [(variant, self.plan(variant, steps)) for variant in variants]

    def transition(
        self,
        tracker: UsageTracker,
        variant: LanguageVariant,
        plan: List[TransitionStep]
    ) -> LanguageVariant:
        """
        Execute a variant's plan.

        Returns:
            The upserted variant, reporting the workflow step it ends in
        """
        updated = variant

        for step in plan:
            logger.debug(f"Language {variant.language.value}: {step}")

            if step.operation == TransitionOperation.CREATE_NEW_VERSION:
                self.repository.create_new_version(tracker, variant)
            elif step.operation == TransitionOperation.CHANGE_WORKFLOW_STEP:
                self.repository.change_workflow_step(tracker, variant, step.target_step)
            elif step.operation == TransitionOperation.UPSERT:
                updated = self.repository.upsert_variant(tracker, variant)
            elif step.operation == TransitionOperation.PUBLISH:
                self.repository.publish_variant(tracker, variant)

        updated.workflow_step = variant.workflow_step or updated.workflow_step
        return updated

    def execute(
        self,
        tracker: UsageTracker,
        planned: List[Tuple[LanguageVariant, List[TransitionStep]]]
    ) -> List[LanguageVariant]:
        """
        Transition all planned variants in order.

        Raises:
            RemoteCallError: on the first failed call, with the languages
                already transitioned in its details
        """
        completed: List[LanguageVariant] = []

        for variant, plan in planned:
            try:
                completed.append(self.transition(tracker, variant, plan))
            except RemoteCallError as e:
                e.details["failed_language"] = variant.language.value
                e.details["transitioned_languages"] = [v.language.value for v in completed]
                logger.error(
                    f"Transition of language {variant.language.value} failed after "
                    f"{len(completed)} completed variants: {e.message}"
                )
                raise

            logger.info(
                f"Transitioned language {variant.language.value}: "
                f"{', '.join(str(step) for step in plan)}"
            )

        return completed
