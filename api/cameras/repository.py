"""
Camera persistence (raw SQL).

Soft-deleted rows (`deleted_at IS NOT NULL`) are invisible to every read.
"""

from __future__ import annotations

from typing import Any

from core import db, sql
from core.pagination import PageWindow
from core.query import QuerySpec

COLUMNS = """
    id, name, manufacturer, year_introduced, year_discontinued, format,
    plate_sizes, lens, shutter, features, description, image_urls, rarity,
    estimated_value_min, estimated_value_max, created_at, updated_at
"""

WRITABLE_COLUMNS = (
    "name",
    "manufacturer",
    "year_introduced",
    "year_discontinued",
    "format",
    "plate_sizes",
    "lens",
    "shutter",
    "features",
    "description",
    "image_urls",
    "rarity",
    "estimated_value_min",
    "estimated_value_max",
)


async def list_cameras(spec: QuerySpec, window: PageWindow) -> tuple[list[dict], int]:
    """
    Return one page of cameras matching `spec` plus the total match count.
    """
    compiled = sql.compile_spec(spec)
    total = await db.fetch_val(
        f"SELECT count(*) FROM cameras WHERE {compiled.where}",
        *compiled.args,
    )
    rows = await db.fetch_all(
        f"""
        SELECT {COLUMNS}
        FROM cameras
        WHERE {compiled.where}
        ORDER BY {compiled.order_by}
        {compiled.limit_offset()}
        """,
        *compiled.page_args(window),
    )
    return rows, int(total or 0)


async def get_camera(camera_id: int) -> dict | None:
    return await db.fetch_one(
        f"""
        SELECT {COLUMNS}
        FROM cameras
        WHERE id = $1
          AND deleted_at IS NULL
        """,
        camera_id,
    )


async def create_camera(values: dict[str, Any]) -> dict:
    names = [name for name in WRITABLE_COLUMNS if name in values]
    placeholders = ", ".join(f"${i}" for i in range(1, len(names) + 1))
    row = await db.fetch_one(
        f"""
        INSERT INTO cameras ({", ".join(names)})
        VALUES ({placeholders})
        RETURNING {COLUMNS}
        """,
        *(values[name] for name in names),
    )
    if row is None:
        raise RuntimeError("Failed to create camera.")
    return row


async def update_camera(camera_id: int, values: dict[str, Any]) -> dict | None:
    if not values:
        return await get_camera(camera_id)

    assignments, args = sql.update_assignments(values, allowed=WRITABLE_COLUMNS, first_arg=2)
    return await db.fetch_one(
        f"""
        UPDATE cameras
        SET {assignments},
            updated_at = now()
        WHERE id = $1
          AND deleted_at IS NULL
        RETURNING {COLUMNS}
        """,
        camera_id,
        *args,
    )


async def soft_delete_camera(camera_id: int) -> bool:
    row = await db.fetch_one(
        """
        UPDATE cameras
        SET deleted_at = now()
        WHERE id = $1
          AND deleted_at IS NULL
        RETURNING id
        """,
        camera_id,
    )
    return row is not None


async def count_cameras() -> int:
    return int(await db.fetch_val("SELECT count(*) FROM cameras") or 0)
