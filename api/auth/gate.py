"""
Per-request authorization decision.

`authorize()` is pure: it looks at the Authorization header and the
endpoint's requirement and returns Allow or Deny. It never touches the DB.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

from .security import AuthError, Role, TokenClaims, TokenService

logger = logging.getLogger(__name__)


class Requirement(str, enum.Enum):
    NONE = "none"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


class DenyReason(str, enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"


@dataclass(frozen=True)
class Principal:
    account_id: int
    email: str
    role: Role

    @classmethod
    def from_claims(cls, claims: TokenClaims) -> Principal:
        return cls(account_id=claims.account_id, email=claims.email, role=claims.role)


@dataclass(frozen=True)
class Allow:
    principal: Principal | None = None


@dataclass(frozen=True)
class Deny:
    reason: DenyReason


Decision = Allow | Deny


def extract_bearer_token(authorization: str | None) -> str | None:
    """
    Return the token from "Bearer <token>", or None if the header is absent
    or not in that shape.
    """
    raw = (authorization or "").strip()
    if not raw:
        return None

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        return None

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        return None
    return token


def _role_satisfies(role: Role, requirement: Requirement) -> bool:
    if requirement in (Requirement.NONE, Requirement.AUTHENTICATED):
        return True
    if requirement is Requirement.ADMIN:
        return role is Role.ADMIN
    raise ValueError(f"Unknown requirement: {requirement!r}")


def authorize(authorization: str | None, requirement: Requirement, *, tokens: TokenService) -> Decision:
    if requirement is Requirement.NONE:
        return Allow()

    token = extract_bearer_token(authorization)
    if token is None:
        logger.debug("Denied: missing or malformed Authorization header.")
        return Deny(DenyReason.UNAUTHENTICATED)

    try:
        claims = tokens.verify(token)
    except AuthError as exc:
        logger.info("Denied: token rejected (%s).", exc.kind.value)
        return Deny(DenyReason.UNAUTHENTICATED)

    if not _role_satisfies(claims.role, requirement):
        logger.info("Denied: account %s lacks role for %s.", claims.account_id, requirement.value)
        return Deny(DenyReason.FORBIDDEN)

    return Allow(Principal.from_claims(claims))
