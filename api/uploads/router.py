"""
Image upload endpoints (authenticated).
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, UploadFile

from auth import dependencies as auth_dependencies
from auth.gate import Principal

from . import service

router = APIRouter(prefix="/upload")


@router.post("")
async def upload_image(
    file: UploadFile = File(...),
    _: Principal = Depends(auth_dependencies.get_current_principal),
) -> dict:
    result = await service.upload_image(file)
    return {"url": result.url, "filename": result.filename, "size": result.size}


@router.post("/multiple")
async def upload_multiple_images(
    files: list[UploadFile] = File(...),
    _: Principal = Depends(auth_dependencies.get_current_principal),
) -> dict:
    results = await service.upload_images(files)
    return {"urls": [r.url for r in results], "count": len(results)}
