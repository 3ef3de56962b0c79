"""Type change endpoint."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool

from ..dependencies import get_orchestrator
from ..models import ChangeTypeResponse
from ...models.reference import Reference
from ...models.migration import MigrationRequest, parse_mapping_json
from ...orchestrator import ChangeTypeOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{item_codename}/change-type", response_model=ChangeTypeResponse)
async def change_type(
    item_codename: str,
    request: Request,
    type_id: str = Query(..., description="Id of the target content type"),
    language: Optional[str] = Query(None, description="Language codename; project default if omitted"),
    orchestrator: ChangeTypeOrchestrator = Depends(get_orchestrator),
):
    """
    Move an item to another content type.

    The body is a JSON object mapping target element ids to source element
    ids. The request is not idempotent: repeating it after a failure can
    create a second item.
    """
    body = await request.body()
    pairs = parse_mapping_json(body or b"{}")

    migration_request = MigrationRequest.from_mapping_pairs(
        item=Reference.by_codename(item_codename),
        target_type=Reference.by_id(type_id),
        pairs=pairs,
        language=Reference.by_codename(language) if language else None,
    )

    result = await run_in_threadpool(orchestrator.change_type, migration_request)
    return ChangeTypeResponse(**result.to_dict())
