"""Unit tests for references and content models."""

import pytest

from change_type.models.reference import Reference, ReferenceKind
from change_type.models.content import (
    ContentItem,
    ContentSnippet,
    ContentType,
    ElementType,
    FieldValue,
    LanguageVariant,
    WorkflowClassification,
    WorkflowStep,
)
from tests.factories import POST_TYPE, ContentFactory


class TestReference:
    """Tests for Reference."""

    def test_wire_format(self) -> None:
        assert Reference.by_id("abc").to_dict() == {"id": "abc"}
        assert Reference.by_codename("article").to_dict() == {"codename": "article"}
        assert Reference.by_external_id("ext-1").to_dict() == {"external_id": "ext-1"}

    def test_from_dict(self) -> None:
        ref = Reference.from_dict({"codename": "article"})

        assert ref.kind == ReferenceKind.CODENAME
        assert ref.value == "article"

    def test_from_dict_requires_exactly_one_identifier(self) -> None:
        with pytest.raises(ValueError):
            Reference.from_dict({"id": "abc", "codename": "article"})
        with pytest.raises(ValueError):
            Reference.from_dict({})

    def test_path_segments(self) -> None:
        assert Reference.by_id("abc").path_segment() == "abc"
        assert Reference.by_codename("article").path_segment() == "codename/article"
        assert Reference.by_external_id("ext-1").path_segment() == "external-id/ext-1"

    def test_references_compare_by_value(self) -> None:
        assert Reference.by_id("abc") == Reference.by_id("abc")
        assert Reference.by_id("abc") != Reference.by_codename("abc")


class TestContentItem:
    """Tests for ContentItem."""

    def test_as_migrated_clears_codename(self) -> None:
        source = ContentFactory.article()

        migrated = source.as_migrated("ext-1", Reference.by_id(POST_TYPE))

        assert migrated.id is None
        assert migrated.codename is None
        assert migrated.external_id == "ext-1"
        assert migrated.name == source.name
        assert migrated.collection == source.collection
        assert migrated.type == Reference.by_id(POST_TYPE)

    def test_upsert_body_omits_missing_codename(self) -> None:
        item = ContentItem(type=Reference.by_id(POST_TYPE), name="My Article", external_id="ext-1")

        assert item.to_upsert_dict() == {"name": "My Article", "type": {"id": POST_TYPE}}

    def test_from_dict(self) -> None:
        item = ContentItem.from_dict({
            "id": "item-1",
            "name": "My Article",
            "codename": "my_article",
            "type": {"id": "type-article"},
            "collection": {"id": "00000000-0000-0000-0000-000000000000"},
            "last_modified": "2024-03-01T10:15:00.000Z",
        })

        assert item.reference == Reference.by_id("item-1")
        assert item.type == Reference.by_id("type-article")
        assert item.last_modified.year == 2024


class TestLanguageVariant:
    """Tests for LanguageVariant."""

    def test_from_dict_reads_nested_workflow_step(self) -> None:
        variant = LanguageVariant.from_dict({
            "item": {"id": "item-1"},
            "language": {"id": "lang-en"},
            "elements": [{"element": {"id": "el-title"}, "value": "Hello"}],
            "workflow": {"step_identifier": {"id": "step-draft"}},
        })

        assert variant.workflow_step == Reference.by_id("step-draft")
        assert variant.find_element("el-title").value == "Hello"
        assert variant.find_element("el-missing") is None

    def test_upsert_body_keeps_extra_element_fields(self) -> None:
        variant = LanguageVariant(
            item=Reference.by_id("item-1"),
            language=Reference.by_id("lang-en"),
            elements=[FieldValue(
                element=Reference.by_id("el-body"),
                value="<p>Hi</p>",
                extra={"components": []},
            )],
        )

        assert variant.to_upsert_dict() == {
            "elements": [{"components": [], "element": {"id": "el-body"}, "value": "<p>Hi</p>"}],
        }

    def test_retarget_copies_value(self) -> None:
        original = FieldValue(element=Reference.by_id("el-tags"), value=[{"id": "term-1"}])

        copied = original.retarget(Reference.by_id("el-topics"))
        copied.value.append({"id": "term-2"})

        assert copied.element == Reference.by_id("el-topics")
        assert original.value == [{"id": "term-1"}]


class TestWorkflowStep:
    """Tests for WorkflowStep classification."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Draft", WorkflowClassification.DRAFT),
            ("Published", WorkflowClassification.PUBLISHED),
            ("Archived", WorkflowClassification.ARCHIVED),
            ("Review", WorkflowClassification.CUSTOM),
            ("draft", WorkflowClassification.CUSTOM),
        ],
    )
    def test_classification_by_name(self, name: str, expected: WorkflowClassification) -> None:
        assert WorkflowStep(id="s", name=name).classification == expected

    def test_from_dict_flattens_transitions(self) -> None:
        step = WorkflowStep.from_dict({
            "id": "step-draft",
            "name": "Draft",
            "codename": "draft",
            "transitions_to": [{"step": {"id": "step-review"}}, {"id": "step-published"}],
        })

        assert step.transitions_to == ["step-review", "step-published"]


class TestContentType:
    """Tests for ContentType."""

    def test_supporting_elements(self) -> None:
        post = ContentFactory.post_type()

        supporting = [e.codename for e in post.elements if e.is_supporting]

        assert supporting == ["seo", "guide"]
        assert post.elements[2].type == ElementType.SNIPPET

    def test_unknown_element_types_are_skipped(self, caplog) -> None:
        content_type = ContentType.from_dict({
            "id": "type-landing",
            "codename": "landing",
            "elements": [
                {"id": "el-title", "codename": "title", "type": "text"},
                {"id": "el-pages", "codename": "pages", "type": "subpages"},
            ],
        })

        assert content_type.element_ids() == ["el-title"]
        assert "unsupported element type subpages" in caplog.text

    def test_unknown_element_types_skipped_in_snippets(self) -> None:
        snippet = ContentSnippet.from_dict({
            "id": "snippet-seo",
            "codename": "seo",
            "elements": [
                {"id": "el-pages", "codename": "seo__pages", "type": "subpages"},
                {"id": "el-meta", "codename": "seo__meta", "type": "text"},
            ],
        })

        assert [e.id for e in snippet.elements] == ["el-meta"]
