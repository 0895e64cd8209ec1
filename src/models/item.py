"""Catalog item models and the rating projection stored on each item"""
from datetime import datetime, UTC
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator


def utc_now():
    return datetime.now(UTC)


# Item fields owned by the rating aggregator. Catalog writes never touch them.
RATING_FIELDS = ("averageRating", "totalRatingsCount", "ratingSum", "ratingVersion")


def initial_rating_state() -> dict:
    return {
        "averageRating": 0.0,
        "totalRatingsCount": 0,
        "ratingSum": 0,
        "ratingVersion": 0,
    }


class RatingAggregate(BaseModel):
    """Snapshot of an item's rating projection."""

    averageRating: float = 0.0
    totalRatingsCount: int = 0

    @classmethod
    def from_document(cls, doc: dict) -> "RatingAggregate":
        return cls(
            averageRating=doc.get("averageRating", 0.0),
            totalRatingsCount=doc.get("totalRatingsCount", 0),
        )


class ItemBase(BaseModel):
    title: str
    author: str
    cover_url: Optional[str] = None
    synopsis: Optional[str] = None
    categories: List[str] = Field(default_factory=list)
    link: Optional[str] = None
    year: Optional[int] = None

    @field_validator("title", "author")
    @classmethod
    def not_blank(cls, v):
        if not v or not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip()

    @field_validator("year")
    @classmethod
    def year_valid(cls, v):
        if v is not None and (v < 0 or v > 9999):
            raise ValueError("Year must be between 0 and 9999")
        return v


class ItemCreate(ItemBase):
    pass


class ItemUpdate(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    cover_url: Optional[str] = None
    synopsis: Optional[str] = None
    categories: Optional[List[str]] = None
    link: Optional[str] = None
    year: Optional[int] = None

    @field_validator("title", "author")
    @classmethod
    def not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Field cannot be empty")
        return v.strip() if v is not None else v


class ItemDB(ItemBase):
    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    averageRating: float = 0.0
    totalRatingsCount: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v):
        return str(v)


class PageMeta(BaseModel):
    page: int
    limit: int
    totalCount: int
    totalPages: int


class ItemListResponse(BaseModel):
    data: List[ItemDB]
    meta: PageMeta
