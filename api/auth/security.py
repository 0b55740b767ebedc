"""
Auth security helpers: password hashing and access tokens.
"""

from __future__ import annotations

import enum
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

import bcrypt
import jwt

from core import config

logger = logging.getLogger(__name__)

DEV_JWT_SECRET = "dev-change-this-secret"
DEFAULT_ACCESS_TOKEN_EXPIRE_MIN = 24 * 60


class AuthSecurityError(RuntimeError):
    pass


class Role(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"

    @classmethod
    def parse(cls, value: Any) -> Role:
        """
        Strict parse: anything other than a known role name raises ValueError.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"Invalid role: {value!r}")
        return cls(value)


class AuthErrorKind(str, enum.Enum):
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"
    EXPIRED = "expired"


class AuthError(Exception):
    """
    Token verification failure. `kind` is for logs and tests only.
    """

    def __init__(self, kind: AuthErrorKind, message: str = "") -> None:
        super().__init__(message or kind.value)
        self.kind = kind


# --- passwords ---------------------------------------------------------------


def hash_password(plain_password: str) -> str:
    password = (plain_password or "").encode("utf-8")
    if not password:
        raise AuthSecurityError("Password is empty.")
    return bcrypt.hashpw(password, bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, password_hash: str) -> bool:
    password = (plain_password or "").encode("utf-8")
    hashed = (password_hash or "").encode("utf-8")
    if not password or not hashed:
        return False
    try:
        return bcrypt.checkpw(password, hashed)
    except ValueError:
        # Corrupted or non-bcrypt hash.
        return False


# --- access tokens -----------------------------------------------------------


@dataclass(frozen=True)
class TokenSettings:
    secret: str
    algorithm: str = "HS256"
    lifetime_s: int = DEFAULT_ACCESS_TOKEN_EXPIRE_MIN * 60

    def __post_init__(self) -> None:
        if not self.secret:
            raise AuthSecurityError("Token signing secret is empty.")
        if self.lifetime_s <= 0:
            raise AuthSecurityError("Token lifetime must be positive.")

    @classmethod
    def from_env(cls) -> TokenSettings:
        secret = config.env_str("JWT_SECRET", "")
        if not secret:
            if config.is_production():
                raise RuntimeError("JWT_SECRET must be set in production.")
            logger.warning("JWT_SECRET is not set; using the development secret.")
            secret = DEV_JWT_SECRET

        minutes = config.env_int("ACCESS_TOKEN_EXPIRE_MIN", DEFAULT_ACCESS_TOKEN_EXPIRE_MIN)
        if minutes <= 0:
            minutes = DEFAULT_ACCESS_TOKEN_EXPIRE_MIN

        return cls(
            secret=secret,
            algorithm=config.env_str("JWT_ALG", "HS256"),
            lifetime_s=minutes * 60,
        )


@dataclass(frozen=True)
class TokenClaims:
    account_id: int
    email: str
    role: Role
    issued_at: int
    expires_at: int


class TokenService:
    """
    Issues and verifies stateless HMAC-signed access tokens.

    There is no revocation list: a token stays valid until `exp`.
    """

    def __init__(self, settings: TokenSettings, *, clock: Callable[[], float] = time.time) -> None:
        self._settings = settings
        self._clock = clock

    @property
    def lifetime_s(self) -> int:
        return self._settings.lifetime_s

    def _now(self) -> int:
        return int(self._clock())

    def issue(self, *, account_id: int, email: str, role: Role | str) -> str:
        issued_at = self._now()
        payload = {
            "sub": str(account_id),
            "email": email,
            "role": Role.parse(role).value,
            "type": "access",
            "iat": issued_at,
            "exp": issued_at + self._settings.lifetime_s,
        }
        return jwt.encode(payload, self._settings.secret, algorithm=self._settings.algorithm)

    def verify(self, token: str) -> TokenClaims:
        raw = (token or "").strip()
        if not raw:
            raise AuthError(AuthErrorKind.MALFORMED, "Access token is empty.")

        # Expiry is checked below against the injected clock, after the
        # signature has been verified.
        try:
            payload = jwt.decode(
                raw,
                self._settings.secret,
                algorithms=[self._settings.algorithm],
                options={"verify_exp": False, "verify_iat": False, "require": ["sub", "role", "iat", "exp"]},
            )
        except jwt.InvalidSignatureError as exc:
            raise AuthError(AuthErrorKind.BAD_SIGNATURE, "Token signature mismatch.") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthError(AuthErrorKind.MALFORMED, "Token could not be decoded.") from exc

        claims = _claims_from_payload(payload)
        if self._now() > claims.expires_at:
            raise AuthError(AuthErrorKind.EXPIRED, "Token is expired.")
        return claims


def _claims_from_payload(payload: dict[str, Any]) -> TokenClaims:
    if str(payload.get("type") or "") != "access":
        raise AuthError(AuthErrorKind.MALFORMED, "Token is not an access token.")

    subject = str(payload.get("sub") or "").strip()
    if not subject.isdigit():
        raise AuthError(AuthErrorKind.MALFORMED, "Invalid token subject.")

    try:
        role = Role.parse(payload.get("role"))
    except ValueError as exc:
        raise AuthError(AuthErrorKind.MALFORMED, "Invalid token role.") from exc

    issued_at = payload.get("iat")
    expires_at = payload.get("exp")
    if not isinstance(issued_at, int) or not isinstance(expires_at, int):
        raise AuthError(AuthErrorKind.MALFORMED, "Invalid token timestamps.")

    return TokenClaims(
        account_id=int(subject),
        email=str(payload.get("email") or ""),
        role=role,
        issued_at=issued_at,
        expires_at=expires_at,
    )
