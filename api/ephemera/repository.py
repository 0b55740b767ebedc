"""
Ephemera persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db, sql
from core.pagination import PageWindow
from core.query import QuerySpec

COLUMNS = """
    id, type, title, year, pages, description, scan_url, thumbnail_url,
    related_cameras, created_at, updated_at
"""

WRITABLE_COLUMNS = (
    "type",
    "title",
    "year",
    "pages",
    "description",
    "scan_url",
    "thumbnail_url",
    "related_cameras",
)


async def list_ephemera(spec: QuerySpec, window: PageWindow) -> tuple[list[dict], int]:
    compiled = sql.compile_spec(spec)
    total = await db.fetch_val(
        f"SELECT count(*) FROM ephemera WHERE {compiled.where}",
        *compiled.args,
    )
    rows = await db.fetch_all(
        f"""
        SELECT {COLUMNS}
        FROM ephemera
        WHERE {compiled.where}
        ORDER BY {compiled.order_by}
        {compiled.limit_offset()}
        """,
        *compiled.page_args(window),
    )
    return rows, int(total or 0)


async def get_item(item_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {COLUMNS}
        FROM ephemera
        WHERE id = $1
          AND deleted_at IS NULL
        """,
        item_id,
    )


async def create_item(values: dict[str, Any]) -> dict:
    names = [name for name in WRITABLE_COLUMNS if name in values]
    placeholders = ", ".join(f"${i}" for i in range(1, len(names) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO ephemera ({", ".join(names)})
        VALUES ({placeholders})
        RETURNING {COLUMNS}
        """,
        *(values[name] for name in names),
    )
    if row is None:
        raise RuntimeError("Failed to create ephemera item.")
    return row


async def update_item(item_id: int, values: dict[str, Any]) -> dict | None:
    if not values:
        return await get_item(item_id)

    assignments, args = sql.update_assignments(values, allowed=WRITABLE_COLUMNS, first_arg=2)
    return await db.fetch_one(
        f"""
        UPDATE ephemera
        SET {assignments},
            updated_at = now()
        WHERE id = $1
          AND deleted_at IS NULL
        RETURNING {COLUMNS}
        """,
        item_id,
        *args,
    )


async def soft_delete_item(item_id: int) -> bool:
    row = await db.fetch_one(
        """
        UPDATE ephemera
        SET deleted_at = now()
        WHERE id = $1
          AND deleted_at IS NULL
        RETURNING id
        """,
        item_id,
    )
    return row is not None
