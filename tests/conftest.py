"""Shared test fixtures for the change type test suite."""

from typing import Callable

import pytest

from change_type.models.content import LanguageVariant
from change_type.models.migration import MigrationConfig
from change_type.orchestrator import ChangeTypeOrchestrator
from change_type.repository.inmemory import InMemoryRepository
from change_type.tracker import UsageTracker
from tests.factories import EN, ES, ContentFactory


@pytest.fixture
def repository() -> InMemoryRepository:
    """Project with two types, a snippet, a four-step workflow and two languages."""
    repo = InMemoryRepository()
    repo.add_language(EN, "en")
    repo.add_language(ES, "es")
    for step in ContentFactory.workflow_steps():
        repo.add_workflow_step(step)
    repo.add_type(ContentFactory.article_type())
    repo.add_type(ContentFactory.post_type())
    repo.add_snippet(ContentFactory.seo_snippet())
    repo.add_item(ContentFactory.article())
    return repo


@pytest.fixture
def add_article_variant(repository: InMemoryRepository) -> Callable[..., LanguageVariant]:
    """Factory fixture storing a variant of the article item.

    Usage:
        def test_something(add_article_variant):
            add_article_variant(EN, PUBLISHED, title="Hello")
    """

    def _add(*args, **kwargs) -> LanguageVariant:
        return repository.add_variant(ContentFactory.article_variant(*args, **kwargs))

    return _add


@pytest.fixture
def config() -> MigrationConfig:
    """Settings with English as the default language and no rate limiting."""
    return MigrationConfig(project_id="project-1", api_key="secret", default_language="en", rate_limit=0)


@pytest.fixture
def orchestrator(repository: InMemoryRepository, config: MigrationConfig) -> ChangeTypeOrchestrator:
    return ChangeTypeOrchestrator(repository, config)


@pytest.fixture
def tracker() -> UsageTracker:
    return UsageTracker().start()
