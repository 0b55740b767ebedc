"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from . import dependencies, schemas, service
from .gate import Principal
from .security import TokenService

router = APIRouter(prefix="/auth")


@router.post("/register", status_code=status.HTTP_201_CREATED, response_model=schemas.AuthResponse)
async def register(
    payload: schemas.RegisterRequest,
    tokens: TokenService = Depends(dependencies.get_token_service),
) -> schemas.AuthResponse:
    return await service.register(payload, tokens=tokens)


@router.post("/login", response_model=schemas.AuthResponse)
async def login(
    payload: schemas.LoginRequest,
    tokens: TokenService = Depends(dependencies.get_token_service),
) -> schemas.AuthResponse:
    return await service.login(payload, tokens=tokens)


@router.get("/profile", response_model=schemas.UserResponse)
async def profile(
    principal: Principal = Depends(dependencies.get_current_principal),
) -> schemas.UserResponse:
    return await service.profile(principal)
