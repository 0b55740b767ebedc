"""
Camera API endpoints.

Reads are public. Writes need a valid token; deletes need the admin role.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, Request, Response, status

from auth import dependencies as auth_dependencies
from auth.gate import Principal
from core import pagination

from . import schemas, service

router = APIRouter(prefix="/cameras")


@router.get("", response_model=pagination.PaginatedResponse)
async def list_cameras(request: Request) -> pagination.PaginatedResponse:
    """
    List cameras.

    Query params: page, page_size, search, manufacturer, format, year_from,
    year_to, sort (name | year_introduced | rarity), order (asc | desc).
    """
    return await service.list_cameras(dict(request.query_params))


@router.get("/search", response_model=pagination.PaginatedResponse)
async def search_cameras(
    request: Request,
    q: str = Query(default="", max_length=200),
) -> pagination.PaginatedResponse:
    return await service.search_cameras(q, dict(request.query_params))


@router.get("/{camera_id}", response_model=schemas.CameraResponse)
async def get_camera(camera_id: int) -> schemas.CameraResponse:
    return await service.get_camera(camera_id)


@router.post("", status_code=status.HTTP_201_CREATED, response_model=schemas.CameraResponse)
async def create_camera(
    payload: schemas.CameraCreate,
    _: Principal = Depends(auth_dependencies.get_current_principal),
) -> schemas.CameraResponse:
    return await service.create_camera(payload)


@router.put("/{camera_id}", response_model=schemas.CameraResponse)
async def update_camera(
    camera_id: int,
    payload: schemas.CameraUpdate,
    _: Principal = Depends(auth_dependencies.get_current_principal),
) -> schemas.CameraResponse:
    return await service.update_camera(camera_id, payload)


@router.delete("/{camera_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_camera(
    camera_id: int,
    _: Principal = Depends(auth_dependencies.require_admin),
) -> Response:
    await service.delete_camera(camera_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
