"""
Auth dependencies for protected FastAPI routes.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from fastapi import Header, HTTPException, Request, status

from . import gate
from .security import TokenService

# Same body for every token failure; the cause is only logged.
UNAUTHENTICATED_DETAIL = "Not authenticated."
FORBIDDEN_DETAIL = "Admin role required."


def get_token_service(request: Request) -> TokenService:
    tokens = getattr(request.app.state, "tokens", None)
    if tokens is None:
        raise RuntimeError("TokenService is not configured on app.state.")
    return tokens


def _deny(decision: gate.Deny) -> HTTPException:
    if decision.reason is gate.DenyReason.FORBIDDEN:
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=FORBIDDEN_DETAIL)
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=UNAUTHENTICATED_DETAIL,
        headers={"WWW-Authenticate": "Bearer"},
    )


def require(requirement: gate.Requirement) -> Callable[..., Awaitable[gate.Principal | None]]:
    """
    Build a dependency that runs the authorization gate before the handler.
    """

    async def dependency(
        request: Request,
        authorization: str | None = Header(default=None),
    ) -> gate.Principal | None:
        decision = gate.authorize(authorization, requirement, tokens=get_token_service(request))
        if isinstance(decision, gate.Deny):
            raise _deny(decision)
        return decision.principal

    return dependency


get_current_principal = require(gate.Requirement.AUTHENTICATED)
require_admin = require(gate.Requirement.ADMIN)
