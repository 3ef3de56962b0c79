"""Unit tests for workflow step planning and execution."""

import pytest

from change_type.errors import NotFoundError, RemoteCallError
from change_type.models.reference import Reference
from change_type.models.content import ContentItem, WorkflowClassification, WorkflowStep
from change_type.repository.inmemory import InMemoryRepository
from change_type.services.workflow import (
    TransitionOperation,
    TransitionStep,
    WorkflowSteps,
    WorkflowTransitionOrchestrator,
)
from tests.factories import ARCHIVED, DRAFT, EN, ES, POST_TYPE, PUBLISHED, REVIEW, ContentFactory

NEW_ITEM = Reference.by_external_id("ext-1")


@pytest.fixture
def steps() -> WorkflowSteps:
    return WorkflowSteps(ContentFactory.workflow_steps())


@pytest.fixture
def workflow(repository: InMemoryRepository) -> WorkflowTransitionOrchestrator:
    return WorkflowTransitionOrchestrator(repository)


@pytest.fixture
def new_item(repository: InMemoryRepository, tracker) -> ContentItem:
    """The item the transitioned variants belong to."""
    return repository.upsert_item(
        tracker, ContentItem(type=Reference.by_id(POST_TYPE), name="My Article", external_id="ext-1")
    )


def _pending(language: str, step):
    variant = ContentFactory.article_variant(language, step, item=NEW_ITEM)
    variant.elements = variant.elements[:1]
    return variant


class TestWorkflowSteps:
    """Tests for step classification."""

    def test_classify_by_id_and_codename(self, steps: WorkflowSteps) -> None:
        assert steps.classify(Reference.by_id(PUBLISHED)) == WorkflowClassification.PUBLISHED
        assert steps.classify(Reference.by_codename("archived")) == WorkflowClassification.ARCHIVED
        assert steps.classify(Reference.by_id(REVIEW)) == WorkflowClassification.CUSTOM

    def test_missing_step_is_draft(self, steps: WorkflowSteps) -> None:
        assert steps.classify(None) == WorkflowClassification.DRAFT

    def test_unknown_step_is_custom(self, steps: WorkflowSteps) -> None:
        assert steps.classify(Reference.by_id("step-gone")) == WorkflowClassification.CUSTOM

    def test_id_reference_does_not_match_codename(self) -> None:
        steps = WorkflowSteps([
            WorkflowStep(id="step-1", name="Archived", codename="archived"),
            WorkflowStep(id="archived", name="Legal review", codename="legal_review"),
        ])

        assert steps.classify(Reference.by_id("archived")) == WorkflowClassification.CUSTOM
        assert steps.classify(Reference.by_codename("archived")) == WorkflowClassification.ARCHIVED
        assert steps.classify(Reference.by_codename("step-1")) == WorkflowClassification.CUSTOM

    def test_find_missing_classification(self) -> None:
        steps = WorkflowSteps(ContentFactory.workflow_steps(include_draft=False))

        with pytest.raises(NotFoundError):
            steps.find(WorkflowClassification.DRAFT)


class TestPlan:
    """Tests for per-variant transition plans."""

    def test_published(self, workflow, steps) -> None:
        plan = workflow.plan(_pending(EN, PUBLISHED), steps)

        assert [s.operation for s in plan] == [
            TransitionOperation.CREATE_NEW_VERSION,
            TransitionOperation.UPSERT,
            TransitionOperation.PUBLISH,
        ]

    def test_archived(self, workflow, steps) -> None:
        plan = workflow.plan(_pending(EN, ARCHIVED), steps)

        assert plan == [
            TransitionStep(TransitionOperation.CHANGE_WORKFLOW_STEP, Reference.by_id(DRAFT)),
            TransitionStep(TransitionOperation.UPSERT),
            TransitionStep(TransitionOperation.CHANGE_WORKFLOW_STEP, Reference.by_id(ARCHIVED)),
        ]

    @pytest.mark.parametrize("step", [DRAFT, REVIEW])
    def test_draft_and_custom(self, workflow, steps, step: str) -> None:
        plan = workflow.plan(_pending(EN, step), steps)

        assert plan == [
            TransitionStep(TransitionOperation.UPSERT),
            TransitionStep(TransitionOperation.CHANGE_WORKFLOW_STEP, Reference.by_id(step)),
        ]

    def test_variant_without_step_returns_to_draft(self, workflow, steps) -> None:
        plan = workflow.plan(_pending(EN, None), steps)

        assert plan[-1] == TransitionStep(TransitionOperation.CHANGE_WORKFLOW_STEP, Reference.by_id(DRAFT))

    def test_archived_without_draft_step(self, workflow) -> None:
        steps = WorkflowSteps(ContentFactory.workflow_steps(include_draft=False))

        with pytest.raises(NotFoundError):
            workflow.plan(_pending(EN, ARCHIVED), steps)

    def test_published_without_draft_step(self, workflow) -> None:
        steps = WorkflowSteps(ContentFactory.workflow_steps(include_draft=False))

        assert len(workflow.plan(_pending(EN, PUBLISHED), steps)) == 3


class TestExecute:
    """Tests for executing transition plans against the repository."""

    @pytest.mark.parametrize("step", [DRAFT, PUBLISHED, ARCHIVED, REVIEW])
    def test_variant_ends_in_original_step(self, repository, workflow, steps, new_item, tracker, step) -> None:
        variant = _pending(EN, step)

        updated = workflow.execute(tracker, workflow.plan_all([variant], steps))

        stored = repository.stored_variants(new_item.id)
        assert len(stored) == 1
        assert stored[0].workflow_step == Reference.by_id(step)
        assert stored[0].elements[0].value == "Hello"
        assert updated[0].workflow_step == Reference.by_id(step)

    def test_published_call_sequence(self, repository, workflow, steps, new_item, tracker) -> None:
        repository.operations.clear()

        workflow.execute(tracker, workflow.plan_all([_pending(EN, PUBLISHED)], steps))

        assert [op[0] for op in repository.operations] == [
            "create_new_version",
            "upsert_variant",
            "publish_variant",
        ]

    def test_archived_call_sequence(self, repository, workflow, steps, new_item, tracker) -> None:
        repository.operations.clear()

        workflow.execute(tracker, workflow.plan_all([_pending(EN, ARCHIVED)], steps))

        assert repository.operations == [
            ("change_workflow_step", new_item.id, EN, DRAFT),
            ("upsert_variant", new_item.id, EN),
            ("change_workflow_step", new_item.id, EN, ARCHIVED),
        ]

    def test_variants_are_processed_in_order(self, repository, workflow, steps, new_item, tracker) -> None:
        repository.operations.clear()

        workflow.execute(tracker, workflow.plan_all([_pending(EN, DRAFT), _pending(ES, REVIEW)], steps))

        languages = [op[2] for op in repository.operations]
        assert languages == [EN, EN, ES, ES]

    def test_failure_reports_completed_languages(self, repository, workflow, steps, new_item, tracker) -> None:
        repository.fail_on("upsert_variant", occurrence=2)
        planned = workflow.plan_all([_pending(EN, DRAFT), _pending(ES, DRAFT)], steps)

        with pytest.raises(RemoteCallError) as exc_info:
            workflow.execute(tracker, planned)

        details = exc_info.value.details
        assert details["failed_language"] == ES
        assert details["transitioned_languages"] == [EN]
        assert details["operation"] == "upsert_variant"
        assert [v.language.value for v in repository.stored_variants(new_item.id)] == [EN]

    def test_no_calls_after_failure(self, repository, workflow, steps, new_item, tracker) -> None:
        repository.fail_on("create_new_version")
        repository.operations.clear()
        planned = workflow.plan_all([_pending(EN, PUBLISHED), _pending(ES, DRAFT)], steps)

        with pytest.raises(RemoteCallError):
            workflow.execute(tracker, planned)

        assert [op[0] for op in repository.operations] == ["create_new_version"]
