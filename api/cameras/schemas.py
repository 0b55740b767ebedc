"""
Camera API schemas.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


# Columns that may be omitted from an update but never set to null.
NOT_NULL_FIELDS = (
    "name",
    "manufacturer",
    "format",
    "plate_sizes",
    "lens",
    "shutter",
    "features",
    "description",
    "image_urls",
    "rarity",
)


def _check_ordered(values: CameraCreate | CameraUpdate) -> None:
    if (
        values.year_introduced is not None
        and values.year_discontinued is not None
        and values.year_discontinued < values.year_introduced
    ):
        raise ValueError("year_discontinued is before year_introduced")
    if (
        values.estimated_value_min is not None
        and values.estimated_value_max is not None
        and values.estimated_value_max < values.estimated_value_min
    ):
        raise ValueError("estimated_value_max is below estimated_value_min")


class CameraCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    manufacturer: str = Field(..., min_length=1, max_length=200)
    year_introduced: int | None = Field(default=None, ge=1800, le=2100)
    year_discontinued: int | None = Field(default=None, ge=1800, le=2100)
    format: str = Field(default="", max_length=100)
    plate_sizes: list[str] = Field(default_factory=list)
    lens: str = Field(default="", max_length=200)
    shutter: str = Field(default="", max_length=200)
    features: list[str] = Field(default_factory=list)
    description: str = ""
    image_urls: list[str] = Field(default_factory=list)
    rarity: str = Field(default="", max_length=50)
    estimated_value_min: float | None = Field(default=None, ge=0)
    estimated_value_max: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_ranges(self) -> CameraCreate:
        _check_ordered(self)
        return self


class CameraUpdate(BaseModel):
    """
    Partial update: only fields present in the body are written.
    """

    name: str | None = Field(default=None, min_length=1, max_length=200)
    manufacturer: str | None = Field(default=None, min_length=1, max_length=200)
    year_introduced: int | None = Field(default=None, ge=1800, le=2100)
    year_discontinued: int | None = Field(default=None, ge=1800, le=2100)
    format: str | None = Field(default=None, max_length=100)
    plate_sizes: list[str] | None = None
    lens: str | None = Field(default=None, max_length=200)
    shutter: str | None = Field(default=None, max_length=200)
    features: list[str] | None = None
    description: str | None = None
    image_urls: list[str] | None = None
    rarity: str | None = Field(default=None, max_length=50)
    estimated_value_min: float | None = Field(default=None, ge=0)
    estimated_value_max: float | None = Field(default=None, ge=0)

    @model_validator(mode="after")
    def check_fields(self) -> CameraUpdate:
        for name in NOT_NULL_FIELDS:
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null")
        # Pairs are only compared when both ends are in the body.
        _check_ordered(self)
        return self


class CameraResponse(BaseModel):
    id: int
    name: str
    manufacturer: str
    year_introduced: int | None = None
    year_discontinued: int | None = None
    format: str
    plate_sizes: list[str]
    lens: str
    shutter: str
    features: list[str]
    description: str
    image_urls: list[str]
    rarity: str
    estimated_value_range: str | None = None
    created_at: datetime
    updated_at: datetime
