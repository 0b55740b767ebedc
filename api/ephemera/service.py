"""
Ephemera business logic.
"""

from __future__ import annotations

from collections.abc import Mapping

from fastapi import HTTPException, status

from core import pagination, query

from . import repository, schemas


def to_ephemera_response(row: dict) -> schemas.EphemeraResponse:
    return schemas.EphemeraResponse(
        id=int(row["id"]),
        type=str(row["type"]),
        title=str(row["title"]),
        year=row.get("year"),
        pages=row.get("pages"),
        description=str(row.get("description") or ""),
        scan_url=str(row.get("scan_url") or ""),
        thumbnail_url=str(row.get("thumbnail_url") or ""),
        related_cameras=[int(x) for x in (row.get("related_cameras") or [])],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Item not found.")


async def list_ephemera(raw_params: Mapping[str, str]) -> pagination.PaginatedResponse:
    spec = query.build(query.EPHEMERA_RULES, raw_params)
    window = pagination.window_of(raw_params)
    rows, total = await repository.list_ephemera(spec, window)
    return pagination.envelope(window, total, [to_ephemera_response(row) for row in rows])


async def get_item(item_id: int) -> schemas.EphemeraResponse:
    row = await repository.get_item(item_id)
    if row is None:
        raise _not_found()
    return to_ephemera_response(row)


async def create_item(payload: schemas.EphemeraCreate) -> schemas.EphemeraResponse:
    return to_ephemera_response(await repository.create_item(payload.model_dump()))


async def update_item(item_id: int, payload: schemas.EphemeraUpdate) -> schemas.EphemeraResponse:
    row = await repository.update_item(item_id, payload.model_dump(exclude_unset=True))
    if row is None:
        raise _not_found()
    return to_ephemera_response(row)


async def delete_item(item_id: int) -> None:
    if not await repository.soft_delete_item(item_id):
        raise _not_found()
