"""
Ephemera API schemas (catalogues, manuals, advertisements, ...).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


NOT_NULL_FIELDS = ("type", "title", "description", "scan_url", "thumbnail_url", "related_cameras")


class EphemeraCreate(BaseModel):
    type: str = Field(..., min_length=1, max_length=100)
    title: str = Field(..., min_length=1, max_length=300)
    year: int | None = Field(default=None, ge=1800, le=2100)
    pages: int | None = Field(default=None, ge=1)
    description: str = ""
    scan_url: str = Field(default="", max_length=1000)
    thumbnail_url: str = Field(default="", max_length=1000)
    related_cameras: list[int] = Field(default_factory=list)


class EphemeraUpdate(BaseModel):
    type: str | None = Field(default=None, min_length=1, max_length=100)
    title: str | None = Field(default=None, min_length=1, max_length=300)
    year: int | None = Field(default=None, ge=1800, le=2100)
    pages: int | None = Field(default=None, ge=1)
    description: str | None = None
    scan_url: str | None = Field(default=None, max_length=1000)
    thumbnail_url: str | None = Field(default=None, max_length=1000)
    related_cameras: list[int] | None = None

    @model_validator(mode="after")
    def check_required_not_null(self) -> EphemeraUpdate:
        for name in NOT_NULL_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        return self


class EphemeraResponse(BaseModel):
    id: int
    type: str
    title: str
    year: int | None = None
    pages: int | None = None
    description: str
    scan_url: str
    thumbnail_url: str
    related_cameras: list[int]
    created_at: datetime
    updated_at: datetime
