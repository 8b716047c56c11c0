"""
Catalog endpoints.

Listing and detail are public; create, update and delete are admin-only.
"""

import logging

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

import config
from models.user import UserDTO
from services.catalog_query import filters_from_query
from services.part import PartService
from web.dependencies import get_session, require_admin
from web.schemas import PartCreateRequest, PartUpdateRequest
from web.serializers import part_to_dict

logger = logging.getLogger(__name__)

parts_router = APIRouter(prefix="/api/parts", tags=["parts"])


@parts_router.get("")
async def list_parts(
    request: Request,
    limit: int | None = Query(None, ge=1, le=100),
    session: AsyncSession = Depends(get_session),
):
    """
    Query parameters: search, make, category, brand, condition, minPrice,
    maxPrice, inStock, sortBy, page, limit. "all" or empty means no filter.
    """
    filters = filters_from_query(request.query_params, limit=limit or config.CATALOG_PAGE_SIZE)
    result = await PartService.list_parts(filters, session)
    return {
        "parts": [part_to_dict(part) for part in result["parts"]],
        "total": result["total"],
        "pagination": result["pagination"],
        "filters": result["filters"],
    }


@parts_router.get("/{part_id}")
async def get_part(part_id: int, session: AsyncSession = Depends(get_session)):
    part = await PartService.get_part(part_id, session)
    return {"part": part_to_dict(part)}


@parts_router.post("", status_code=status.HTTP_201_CREATED)
async def create_part(
    payload: PartCreateRequest,
    admin: UserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    part = await PartService.create_part(payload.to_values(), session)
    logger.info(f"Admin {admin.id} created part {part.id}")
    return {"part": part_to_dict(part, include_cost=True)}


@parts_router.put("/{part_id}")
async def update_part(
    part_id: int,
    payload: PartUpdateRequest,
    admin: UserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    part = await PartService.update_part(part_id, payload.to_values(), session)
    return {"part": part_to_dict(part, include_cost=True)}


@parts_router.delete("/{part_id}")
async def delete_part(
    part_id: int,
    admin: UserDTO = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    await PartService.delete_part(part_id, session)
    return {"success": True}
