"""
Manufacturer API endpoints (read-only).
"""

from __future__ import annotations

from fastapi import APIRouter

from . import repository, schemas

router = APIRouter(prefix="/manufacturers")


@router.get("", response_model=list[schemas.ManufacturerResponse])
async def list_manufacturers() -> list[schemas.ManufacturerResponse]:
    rows = await repository.list_manufacturers()
    return [
        schemas.ManufacturerResponse(
            id=int(row["id"]),
            name=str(row["name"]),
            founded=row.get("founded"),
            defunct=row.get("defunct"),
            country=str(row.get("country") or ""),
            description=str(row.get("description") or ""),
        )
        for row in rows
    ]
