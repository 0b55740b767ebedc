"""
Image upload validation + storage.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from fastapi import HTTPException, UploadFile

from core import config

from .storage import LocalStorage, StoredFile

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024  # 5 MiB
MAX_FILES_PER_REQUEST = 10

logger = logging.getLogger(__name__)


class UploadRejected(ValueError):
    def __init__(self, status_code: int, detail: str) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


@dataclass(frozen=True)
class UploadResult:
    url: str
    filename: str
    size: int


def max_upload_bytes() -> int:
    value = config.env_int("MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES)
    return value if value > 0 else DEFAULT_MAX_UPLOAD_BYTES


def _file_ext(filename: str) -> str:
    return Path(filename).suffix.lower()


def validate_filename(filename: str | None) -> str:
    """
    Return the normalized extension if `filename` is an accepted image type.
    """
    if not filename:
        raise UploadRejected(400, "Missing filename.")
    ext = _file_ext(filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise UploadRejected(400, "Invalid file type. Allowed: JPG, PNG, GIF, WebP")
    return ext


async def read_upload_bytes(file: UploadFile, max_bytes: int) -> bytes:
    chunk_size = 1024 * 1024  # 1 MiB
    buf = bytearray()

    while True:
        chunk = await file.read(chunk_size)
        if not chunk:
            break
        buf.extend(chunk)
        if len(buf) > max_bytes:
            raise UploadRejected(413, f"File too large. Max is {max_bytes} bytes.")

    return bytes(buf)


async def _store(file: UploadFile, storage: LocalStorage) -> UploadResult:
    ext = validate_filename(file.filename)
    data = await read_upload_bytes(file, max_bytes=max_upload_bytes())
    if not data:
        raise UploadRejected(400, "File is empty.")
    stored: StoredFile = storage.save(data, ext=ext)
    logger.info("Stored upload %s (%d bytes).", stored.filename, stored.size_bytes)
    return UploadResult(url=stored.url, filename=file.filename or "", size=stored.size_bytes)


async def upload_image(file: UploadFile, *, storage: LocalStorage | None = None) -> UploadResult:
    try:
        return await _store(file, storage or LocalStorage())
    except UploadRejected as exc:
        raise HTTPException(status_code=exc.status_code, detail=exc.detail) from exc


async def upload_images(files: list[UploadFile], *, storage: LocalStorage | None = None) -> list[UploadResult]:
    """
    Store every acceptable file; invalid or oversized files are skipped.
    """
    if not files:
        raise HTTPException(status_code=400, detail="No files provided.")
    if len(files) > MAX_FILES_PER_REQUEST:
        raise HTTPException(status_code=400, detail=f"Maximum {MAX_FILES_PER_REQUEST} files allowed.")

    storage = storage or LocalStorage()
    results: list[UploadResult] = []
    for file in files:
        try:
            results.append(await _store(file, storage))
        except UploadRejected as exc:
            logger.info("Skipped upload %r: %s", file.filename, exc.detail)

    if not results:
        raise HTTPException(status_code=400, detail="No valid files uploaded.")
    return results
