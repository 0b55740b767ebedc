"""
Shared fixtures.

No database is used: each feature's `repository` module is monkeypatched
with an in-memory fake that honours the same call signatures.
"""

from __future__ import annotations

import os
import tempfile
from datetime import datetime, timezone
from typing import Any

import pytest

# `main` builds a module-level app on import; keep its upload dir out of the repo.
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="tp-uploads-"))

from fastapi.testclient import TestClient  # noqa: E402

import main  # noqa: E402
from auth import repository as auth_repository  # noqa: E402
from auth import security  # noqa: E402
from cameras import repository as camera_repository  # noqa: E402
from core import config  # noqa: E402
from core.pagination import PageWindow  # noqa: E402
from core.query import QuerySpec  # noqa: E402
from ephemera import repository as ephemera_repository  # noqa: E402

TEST_SECRET = "test-secret-that-is-long-enough-for-hs256"


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# ============================================================================
# IN-MEMORY DATA ACCESS
# ============================================================================


class FakeUsers:
    def __init__(self) -> None:
        self.rows: dict[int, dict] = {}
        self._next_id = 1

    def add(self, *, email: str, password: str, role: str = "user") -> dict:
        now = _utc_now()
        row = {
            "id": self._next_id,
            "email": auth_repository.normalize_email(email),
            "password_hash": security.hash_password(password),
            "role": role,
            "created_at": now,
            "updated_at": now,
        }
        self.rows[row["id"]] = row
        self._next_id += 1
        return row

    async def get_user_by_email(self, email: str) -> dict | None:
        wanted = auth_repository.normalize_email(email)
        for row in self.rows.values():
            if row["email"] == wanted:
                return dict(row)
        return None

    async def get_user_by_id(self, user_id: int) -> dict | None:
        row = self.rows.get(user_id)
        return dict(row) if row is not None else None

    async def create_user(self, *, email: str, password_hash: str, role: str = "user") -> dict:
        if await self.get_user_by_email(email) is not None:
            raise auth_repository.EmailTakenError(email)
        now = _utc_now()
        row = {
            "id": self._next_id,
            "email": auth_repository.normalize_email(email),
            "password_hash": password_hash,
            "role": role,
            "created_at": now,
            "updated_at": now,
        }
        self.rows[row["id"]] = row
        self._next_id += 1
        return {k: v for k, v in row.items() if k != "password_hash"}


def _sort_key(row: dict, field: str) -> tuple:
    # NULLs sort last ascending, like Postgres.
    value = row.get(field)
    return (value is None, value if value is not None else "", row["id"])


class FakeCatalog:
    """
    Applies a QuerySpec in memory the way the SQL does.
    """

    def __init__(self, defaults: dict[str, Any]) -> None:
        self.defaults = defaults
        self.rows: dict[int, dict] = {}
        self._next_id = 1
        self.list_calls: list[tuple[QuerySpec, PageWindow]] = []
        self.writes: list[tuple[str, int | None]] = []

    def add(self, **values: Any) -> dict:
        now = _utc_now()
        row = {**self.defaults, **values, "id": self._next_id, "created_at": now, "updated_at": now}
        row["deleted_at"] = None
        self.rows[row["id"]] = row
        self._next_id += 1
        return row

    def _live(self) -> list[dict]:
        return [row for row in self.rows.values() if row["deleted_at"] is None]

    def _matches(self, row: dict, spec: QuerySpec) -> bool:
        if spec.search:
            term = spec.search.lower()
            if not any(term in str(row.get(f) or "").lower() for f in spec.search_fields):
                return False
        for cond in spec.equals:
            if str(row.get(cond.field)) != cond.value:
                return False
        for cond in spec.ranges:
            value = row.get(cond.field)
            if value is None:
                return False
            if cond.operator == ">=" and not value >= cond.value:
                return False
            if cond.operator == "<=" and not value <= cond.value:
                return False
        return True

    async def list_rows(self, spec: QuerySpec, window: PageWindow) -> tuple[list[dict], int]:
        self.list_calls.append((spec, window))
        matched = [row for row in self._live() if self._matches(row, spec)]
        matched.sort(key=lambda r: _sort_key(r, spec.sort_field))
        if spec.sort_order == "desc":
            matched.reverse()
        page = matched[window.offset : window.offset + window.page_size]
        return [dict(row) for row in page], len(matched)

    async def get(self, item_id: int) -> dict | None:
        row = self.rows.get(item_id)
        if row is None or row["deleted_at"] is not None:
            return None
        return dict(row)

    async def create(self, values: dict[str, Any]) -> dict:
        self.writes.append(("create", None))
        return dict(self.add(**values))

    async def update(self, item_id: int, values: dict[str, Any]) -> dict | None:
        self.writes.append(("update", item_id))
        row = self.rows.get(item_id)
        if row is None or row["deleted_at"] is not None:
            return None
        row.update(values)
        row["updated_at"] = _utc_now()
        return dict(row)

    async def soft_delete(self, item_id: int) -> bool:
        self.writes.append(("delete", item_id))
        row = self.rows.get(item_id)
        if row is None or row["deleted_at"] is not None:
            return False
        row["deleted_at"] = _utc_now()
        return True


CAMERA_DEFAULTS = {
    "year_introduced": None,
    "year_discontinued": None,
    "format": "",
    "plate_sizes": [],
    "lens": "",
    "shutter": "",
    "features": [],
    "description": "",
    "image_urls": [],
    "rarity": "",
    "estimated_value_min": None,
    "estimated_value_max": None,
}

EPHEMERA_DEFAULTS = {
    "year": None,
    "pages": None,
    "description": "",
    "scan_url": "",
    "thumbnail_url": "",
    "related_cameras": [],
}


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def token_settings() -> security.TokenSettings:
    return security.TokenSettings(secret=TEST_SECRET, lifetime_s=24 * 60 * 60)


@pytest.fixture
def tokens(token_settings: security.TokenSettings, clock: FakeClock) -> security.TokenService:
    return security.TokenService(token_settings, clock=clock)


@pytest.fixture
def users(monkeypatch: pytest.MonkeyPatch) -> FakeUsers:
    fake = FakeUsers()
    monkeypatch.setattr(auth_repository, "get_user_by_email", fake.get_user_by_email)
    monkeypatch.setattr(auth_repository, "get_user_by_id", fake.get_user_by_id)
    monkeypatch.setattr(auth_repository, "create_user", fake.create_user)
    return fake


@pytest.fixture
def cameras(monkeypatch: pytest.MonkeyPatch) -> FakeCatalog:
    fake = FakeCatalog(CAMERA_DEFAULTS)
    monkeypatch.setattr(camera_repository, "list_cameras", fake.list_rows)
    monkeypatch.setattr(camera_repository, "get_camera", fake.get)
    monkeypatch.setattr(camera_repository, "create_camera", fake.create)
    monkeypatch.setattr(camera_repository, "update_camera", fake.update)
    monkeypatch.setattr(camera_repository, "soft_delete_camera", fake.soft_delete)
    return fake


@pytest.fixture
def ephemera(monkeypatch: pytest.MonkeyPatch) -> FakeCatalog:
    fake = FakeCatalog(EPHEMERA_DEFAULTS)
    monkeypatch.setattr(ephemera_repository, "list_ephemera", fake.list_rows)
    monkeypatch.setattr(ephemera_repository, "get_item", fake.get)
    monkeypatch.setattr(ephemera_repository, "create_item", fake.create)
    monkeypatch.setattr(ephemera_repository, "update_item", fake.update)
    monkeypatch.setattr(ephemera_repository, "soft_delete_item", fake.soft_delete)
    return fake


@pytest.fixture
def upload_dir(tmp_path, monkeypatch: pytest.MonkeyPatch):
    path = tmp_path / "uploads"
    monkeypatch.setenv("UPLOAD_DIR", str(path))
    return path


@pytest.fixture
def app(token_settings: security.TokenSettings, tokens: security.TokenService, upload_dir):
    settings = config.AppSettings(
        version="test",
        cors_origins=("http://localhost:5173",),
        seed_on_startup=False,
        log_level="DEBUG",
    )
    application = main.create_app(settings=settings, token_settings=token_settings)
    # Share the clock-controlled service with the tests.
    application.state.tokens = tokens
    return application


@pytest.fixture
def client(app) -> TestClient:
    # Not used as a context manager: the lifespan (DB pool) never runs.
    return TestClient(app)


@pytest.fixture
def auth_header(tokens: security.TokenService):
    def make(*, account_id: int = 1, email: str = "user@example.com", role: str = "user") -> dict[str, str]:
        token = tokens.issue(account_id=account_id, email=email, role=role)
        return {"Authorization": f"Bearer {token}"}

    return make
