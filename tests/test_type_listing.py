"""Unit tests for TypeListingService and compatibility choices."""

import pytest

from change_type.errors import NotFoundError
from change_type.models.reference import Reference
from change_type.models.content import ElementDefinition, ElementType
from change_type.services.compatibility import compatible_elements, mapping_choices
from change_type.services.type_listing import TypeListingService, find_type
from tests.factories import ARTICLE_TYPE, POST_TYPE, ContentFactory


@pytest.fixture
def service(repository) -> TypeListingService:
    return TypeListingService(repository)


class TestFindType:
    """Tests for find_type."""

    def test_by_id_and_codename(self) -> None:
        types = [ContentFactory.article_type(), ContentFactory.post_type()]

        assert find_type(types, Reference.by_id(POST_TYPE)).codename == "post"
        assert find_type(types, Reference.by_codename("article")).id == ARTICLE_TYPE
        assert find_type(types, Reference.by_external_id("post")) is None


class TestExpandType:
    """Tests for snippet expansion."""

    def test_snippet_elements_appended(self, service, tracker) -> None:
        expanded = service.expand_type(tracker, ContentFactory.post_type())

        assert [e.codename for e in expanded.elements] == ["heading", "summary", "seo__meta"]
        assert tracker.calls_by_operation == {"get_snippet": 1}

    def test_type_without_snippets_needs_no_calls(self, service, tracker) -> None:
        expanded = service.expand_type(tracker, ContentFactory.article_type())

        assert expanded.element_ids() == ["el-title", "el-body"]
        assert tracker.api_calls == 0

    def test_original_type_unchanged(self, service, tracker) -> None:
        post = ContentFactory.post_type()

        service.expand_type(tracker, post)

        assert len(post.elements) == 4

    def test_missing_snippet(self, repository, service, tracker) -> None:
        post = ContentFactory.post_type()
        post.elements[2].snippet = Reference.by_id("snippet-gone")

        with pytest.raises(NotFoundError):
            service.expand_type(tracker, post)


class TestListTypes:
    """Tests for listing an item's types."""

    def test_no_supporting_elements_in_listing(self, service, tracker) -> None:
        listing = service.list_types(tracker, Reference.by_codename("my_article"))

        for content_type in [listing.current_type] + listing.other_types:
            assert not any(e.is_supporting for e in content_type.elements)

    def test_to_dict(self, service, tracker) -> None:
        data = service.list_types(tracker, Reference.by_codename("my_article")).to_dict()

        assert data["current_type"]["codename"] == "article"
        assert [t["codename"] for t in data["other_types"]] == ["post"]


class TestCompatibility:
    """Tests for element compatibility choices."""

    def _element(self, element_type: ElementType) -> ElementDefinition:
        return ElementDefinition(id=f"el-{element_type.value}", codename=element_type.value, type=element_type)

    def test_text_target_accepts_simple_values(self) -> None:
        candidates = [self._element(t) for t in ElementType]

        offered = {e.type for e in compatible_elements(self._element(ElementType.TEXT), candidates)}

        assert offered == {
            ElementType.TEXT,
            ElementType.DATE_TIME,
            ElementType.CUSTOM,
            ElementType.NUMBER,
            ElementType.RICH_TEXT,
        }

    def test_url_slug_target(self) -> None:
        candidates = [self._element(ElementType.TEXT), self._element(ElementType.ASSET)]

        offered = compatible_elements(self._element(ElementType.URL_SLUG), candidates)

        assert [e.type for e in offered] == [ElementType.TEXT]

    def test_asset_target_only_accepts_assets(self) -> None:
        candidates = [self._element(ElementType.TEXT), self._element(ElementType.ASSET)]

        offered = compatible_elements(self._element(ElementType.ASSET), candidates)

        assert [e.type for e in offered] == [ElementType.ASSET]

    def test_mapping_choices(self) -> None:
        choices = mapping_choices(ContentFactory.post_type(), ContentFactory.article_type())

        by_target = {target.id: [c.id for c in offered] for target, offered in choices}
        assert by_target["el-heading"] == ["el-title", "el-body"]
        assert by_target["el-summary"] == ["el-body"]
        assert by_target["el-seo"] == []
