"""
Pydantic schemas for manufacturer endpoints.
"""

from __future__ import annotations

from pydantic import BaseModel


class ManufacturerResponse(BaseModel):
    id: int
    name: str
    founded: int | None = None
    defunct: int | None = None
    country: str = ""
    description: str = ""
