"""
Local file storage for uploaded images.

Stores bytes under `UPLOAD_DIR` and returns a URL path served by the
`/uploads` static mount.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from pathlib import Path

from core import config

DEFAULT_UPLOAD_DIR = "./uploads"
URL_PREFIX = "/uploads"


def upload_dir() -> Path:
    return Path(config.env_str("UPLOAD_DIR", DEFAULT_UPLOAD_DIR))


@dataclass(frozen=True)
class StoredFile:
    filename: str
    url: str
    size_bytes: int


class LocalStorage:
    def __init__(self, root: Path | None = None) -> None:
        self.root = root or upload_dir()

    def ensure_root(self) -> Path:
        self.root.mkdir(parents=True, exist_ok=True)
        return self.root

    def save(self, data: bytes, *, ext: str) -> StoredFile:
        filename = f"{uuid.uuid4()}_{int(time.time())}{ext}"
        path = self.ensure_root() / filename
        path.write_bytes(data)
        return StoredFile(filename=filename, url=f"{URL_PREFIX}/{filename}", size_bytes=len(data))
