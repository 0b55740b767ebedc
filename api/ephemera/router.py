"""
Ephemera API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from auth import dependencies as auth_dependencies
from auth.gate import Principal
from core import pagination

from . import schemas, service

router = APIRouter(prefix="/ephemera")


@router.get("", response_model=pagination.PaginatedResponse)
async def list_ephemera(request: Request) -> pagination.PaginatedResponse:
    """
    Query params: page, page_size, search, type, year_from, year_to,
    sort (title | year | type), order (asc | desc).
    """
    return await service.list_ephemera(dict(request.query_params))


@router.get("/{item_id}", response_model=schemas.EphemeraResponse)
async def get_item(item_id: int) -> schemas.EphemeraResponse:
    return await service.get_item(item_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=schemas.EphemeraResponse)
async def create_item(
    payload: schemas.EphemeraCreate,
    _: Principal = Depends(auth_dependencies.get_current_principal),
) -> schemas.EphemeraResponse:
    return await service.create_item(payload)


@router.put("/{item_id}", response_model=schemas.EphemeraResponse)
async def update_item(
    item_id: int,
    payload: schemas.EphemeraUpdate,
    _: Principal = Depends(auth_dependencies.get_current_principal),
) -> schemas.EphemeraResponse:
    return await service.update_item(item_id, payload)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_item(
    item_id: int,
    _: Principal = Depends(auth_dependencies.require_admin),
) -> Response:
    await service.delete_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
