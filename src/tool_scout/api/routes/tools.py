"""Tool record routes."""
from typing import Any, Dict

from fastapi import APIRouter, Depends, status

from ...core.exceptions import ToolNotFoundError
from ...core.logging import logger
from ...core.security import verify_api_key
from ...models.requests import ToolCreateRequest, ToolUpdateRequest
from ...models.tool import LABEL_KINDS, ToolRecord
from ...services.store import ToolStore
from ..dependencies import get_tool_store


router = APIRouter()


def _get_or_404(store: ToolStore, slug: str) -> ToolRecord:
    tool = store.get_by_slug(slug)
    if tool is None:
        raise ToolNotFoundError(slug)
    return tool


@router.post(
    "",
    response_model=ToolRecord,
    status_code=status.HTTP_201_CREATED,
    summary="Create a tool"
)
async def create_tool(
    request: ToolCreateRequest,
    store: ToolStore = Depends(get_tool_store),
    api_key: str = Depends(verify_api_key)
) -> ToolRecord:
    return store.create_tool(
        name=request.name,
        slug=request.slug,
        website_url=request.website_url,
        description=request.description,
        pricing_type=request.pricing_type,
        is_active=request.is_active,
        labels={kind: getattr(request, kind) for kind in LABEL_KINDS},
    )


@router.get("/{slug}", response_model=ToolRecord, summary="Get a tool by slug")
async def get_tool(slug: str, store: ToolStore = Depends(get_tool_store)) -> ToolRecord:
    return _get_or_404(store, slug)


@router.put("/{slug}", response_model=ToolRecord, summary="Update a tool and replace its labels")
async def replace_tool(
    slug: str,
    request: ToolUpdateRequest,
    store: ToolStore = Depends(get_tool_store),
    api_key: str = Depends(verify_api_key)
) -> ToolRecord:
    """
    Update the given fields and replace every label set.

    Label sets missing from the body are emptied.
    """
    tool = _get_or_404(store, slug)
    updated = store.update_tool(tool.id, **request.field_updates())
    labels = request.label_updates()
    for kind in LABEL_KINDS:
        store.replace_labels(tool.id, kind, labels.get(kind, []))
    logger.info(f"Tool {slug} replaced")
    return store.get_tool(updated.id)


@router.patch("/{slug}", response_model=ToolRecord, summary="Partially update a tool")
async def update_tool(
    slug: str,
    request: ToolUpdateRequest,
    store: ToolStore = Depends(get_tool_store),
    api_key: str = Depends(verify_api_key)
) -> ToolRecord:
    """Update only the fields and label sets present in the body."""
    tool = _get_or_404(store, slug)
    store.update_tool(tool.id, **request.field_updates())
    for kind, values in request.label_updates().items():
        store.replace_labels(tool.id, kind, values)
    return store.get_tool(tool.id)


@router.delete("/{slug}", summary="Delete a tool")
async def delete_tool(
    slug: str,
    store: ToolStore = Depends(get_tool_store),
    api_key: str = Depends(verify_api_key)
) -> Dict[str, Any]:
    tool = _get_or_404(store, slug)
    store.delete_tool(tool.id)
    return {"success": True, "id": tool.id, "slug": tool.slug}
