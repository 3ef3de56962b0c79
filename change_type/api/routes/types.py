"""Content type listing endpoint."""

from fastapi import APIRouter, Depends

from ..dependencies import get_orchestrator
from ..models import TypesResponse
from ...models.reference import Reference
from ...orchestrator import ChangeTypeOrchestrator

router = APIRouter()


@router.get("/{item_codename}/types", response_model=TypesResponse)
def list_types(
    item_codename: str,
    orchestrator: ChangeTypeOrchestrator = Depends(get_orchestrator),
):
    """
    List the item's current type and every other type.

    Snippet elements are expanded inline; snippet and guidelines elements
    are left out.
    """
    listing = orchestrator.list_types(Reference.by_codename(item_codename))
    return TypesResponse(**listing.to_dict())
