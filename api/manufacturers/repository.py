"""
Manufacturer persistence (raw SQL).
"""

from __future__ import annotations

from core import db


async def list_manufacturers() -> list[dict]:
    return await db.fetch_all(
        """
        SELECT id, name, founded, defunct, country, description
        FROM manufacturers
        ORDER BY name ASC
        """
    )


async def count_manufacturers() -> int:
    return int(await db.fetch_val("SELECT count(*) FROM manufacturers") or 0)


async def create_manufacturer(
    *,
    name: str,
    founded: int | None,
    defunct: int | None,
    country: str,
    description: str,
) -> dict:
    row = await db.fetch_one(
        """
        INSERT INTO manufacturers (name, founded, defunct, country, description)
        VALUES ($1, $2, $3, $4, $5)
        ON CONFLICT (name) DO NOTHING
        RETURNING id, name, founded, defunct, country, description
        """,
        name,
        founded,
        defunct,
        country,
        description,
    )
    if row is None:
        raise RuntimeError(f"Manufacturer '{name}' already exists.")
    return row
