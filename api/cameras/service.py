"""
Camera business logic.
"""

from __future__ import annotations

from collections.abc import Mapping

from fastapi import HTTPException, status

from core import pagination, query

from . import repository, schemas


def _format_money(value: float) -> str:
    return f"£{value:,.0f}"


def estimated_value_range(value_min: float | None, value_max: float | None) -> str | None:
    if value_min is not None and value_max is not None:
        return f"{_format_money(value_min)} - {_format_money(value_max)}"
    if value_min is not None:
        return f"{_format_money(value_min)}+"
    if value_max is not None:
        return f"up to {_format_money(value_max)}"
    return None


def to_camera_response(row: dict) -> schemas.CameraResponse:
    return schemas.CameraResponse(
        id=int(row["id"]),
        name=str(row["name"]),
        manufacturer=str(row["manufacturer"]),
        year_introduced=row.get("year_introduced"),
        year_discontinued=row.get("year_discontinued"),
        format=str(row.get("format") or ""),
        plate_sizes=list(row.get("plate_sizes") or []),
        lens=str(row.get("lens") or ""),
        shutter=str(row.get("shutter") or ""),
        features=list(row.get("features") or []),
        description=str(row.get("description") or ""),
        image_urls=list(row.get("image_urls") or []),
        rarity=str(row.get("rarity") or ""),
        estimated_value_range=estimated_value_range(
            row.get("estimated_value_min"),
            row.get("estimated_value_max"),
        ),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Camera not found.")


async def list_cameras(raw_params: Mapping[str, str]) -> pagination.PaginatedResponse:
    spec = query.build(query.CAMERA_RULES, raw_params)
    window = pagination.window_of(raw_params)
    rows, total = await repository.list_cameras(spec, window)
    return pagination.envelope(window, total, [to_camera_response(row) for row in rows])


async def search_cameras(search_query: str, raw_params: Mapping[str, str]) -> pagination.PaginatedResponse:
    term = (search_query or "").strip()
    if not term:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Search query 'q' is required.")
    params = dict(raw_params)
    params.pop("q", None)
    params[query.SEARCH_PARAM] = term
    return await list_cameras(params)


async def get_camera(camera_id: int) -> schemas.CameraResponse:
    row = await repository.get_camera(camera_id)
    if row is None:
        raise _not_found()
    return to_camera_response(row)


async def create_camera(payload: schemas.CameraCreate) -> schemas.CameraResponse:
    row = await repository.create_camera(payload.model_dump())
    return to_camera_response(row)


async def update_camera(camera_id: int, payload: schemas.CameraUpdate) -> schemas.CameraResponse:
    row = await repository.update_camera(camera_id, payload.model_dump(exclude_unset=True))
    if row is None:
        raise _not_found()
    return to_camera_response(row)


async def delete_camera(camera_id: int) -> None:
    deleted = await repository.soft_delete_camera(camera_id)
    if not deleted:
        raise _not_found()
