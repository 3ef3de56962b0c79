"""Dependency providers for the API routes."""

from functools import lru_cache

from fastapi import Depends

from ..errors import ConfigurationError
from ..models.migration import MigrationConfig
from ..orchestrator import ChangeTypeOrchestrator
from ..repository.base import ContentRepository
from ..repository.management_api import ManagementAPIRepository


@lru_cache
def get_config() -> MigrationConfig:
    """Settings from KONTENT_* environment variables."""
    return MigrationConfig.from_env()


def get_repository(config: MigrationConfig = Depends(get_config)) -> ContentRepository:
    """A Management API repository for the current request."""
    errors = config.validate()
    if errors:
        raise ConfigurationError("; ".join(errors))
    return ManagementAPIRepository(config)


def get_orchestrator(
    repository: ContentRepository = Depends(get_repository),
    config: MigrationConfig = Depends(get_config),
) -> ChangeTypeOrchestrator:
    return ChangeTypeOrchestrator(repository, config)
