"""
Auth persistence helpers.
"""

from __future__ import annotations

import asyncpg

from core import db


class EmailTakenError(RuntimeError):
    pass


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def create_user(*, email: str, password_hash: str, role: str = "user") -> dict:
    try:
        row = await db.fetch_one(
            """
            INSERT INTO users (email, password_hash, role)
            VALUES ($1, $2, $3)
            RETURNING id, email, role, created_at, updated_at
            """,
            normalize_email(email),
            password_hash,
            role,
        )
    except asyncpg.UniqueViolationError as exc:
        raise EmailTakenError(normalize_email(email)) from exc
    if row is None:
        raise RuntimeError("Failed to create user.")
    return row


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, email, password_hash, role, created_at, updated_at
        FROM users
        WHERE lower(email) = lower($1)
        """,
        normalize_email(email),
    )


async def get_user_by_id(user_id: int) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id, email, password_hash, role, created_at, updated_at
        FROM users
        WHERE id = $1
        """,
        user_id,
    )


async def count_users() -> int:
    return int(await db.fetch_val("SELECT count(*) FROM users") or 0)
