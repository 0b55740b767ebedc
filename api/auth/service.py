"""
Auth business logic.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from fastapi import HTTPException, status

from . import repository, schemas, security
from .gate import Principal

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid email or password."


@lru_cache(maxsize=1)
def _dummy_password_hash() -> str:
    # Checked against when the email is unknown so both login failures cost the same.
    return security.hash_password("not-a-real-password")


def _to_user_response(user_row: dict) -> schemas.UserResponse:
    return schemas.UserResponse(
        id=int(user_row["id"]),
        email=str(user_row["email"]),
        role=security.Role.parse(user_row["role"]).value,
        created_at=user_row["created_at"],
    )


def _auth_response(user_row: dict, *, tokens: security.TokenService) -> schemas.AuthResponse:
    token = tokens.issue(
        account_id=int(user_row["id"]),
        email=str(user_row["email"]),
        role=security.Role.parse(user_row["role"]),
    )
    return schemas.AuthResponse(
        token=token,
        expires_in=tokens.lifetime_s,
        user=_to_user_response(user_row),
    )


def _email_taken() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Email is already registered.",
    )


def _invalid_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=INVALID_CREDENTIALS,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def register(payload: schemas.RegisterRequest, *, tokens: security.TokenService) -> schemas.AuthResponse:
    existing = await repository.get_user_by_email(payload.email)
    if existing is not None:
        raise _email_taken()

    password_hash = security.hash_password(payload.password)
    try:
        user_row = await repository.create_user(
            email=payload.email,
            password_hash=password_hash,
            role=security.Role.USER.value,
        )
    except repository.EmailTakenError as exc:
        # Lost a race with a concurrent registration.
        raise _email_taken() from exc

    logger.info("Registered account %s.", user_row["id"])
    return _auth_response(user_row, tokens=tokens)


async def login(payload: schemas.LoginRequest, *, tokens: security.TokenService) -> schemas.AuthResponse:
    user_row = await repository.get_user_by_email(payload.email)
    if user_row is None:
        security.verify_password(payload.password, _dummy_password_hash())
        raise _invalid_credentials()

    is_valid = security.verify_password(payload.password, str(user_row.get("password_hash") or ""))
    if not is_valid:
        raise _invalid_credentials()

    return _auth_response(user_row, tokens=tokens)


async def profile(principal: Principal) -> schemas.UserResponse:
    user_row = await repository.get_user_by_id(principal.account_id)
    if user_row is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _to_user_response(user_row)
