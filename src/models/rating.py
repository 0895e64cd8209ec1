"""Rating ledger models"""
from datetime import datetime, UTC
from typing import Any, Optional

from pydantic import BaseModel, Field


def utc_now():
    """Helper function for Pydantic default_factory to get current UTC time"""
    return datetime.now(UTC)


class RatingSubmission(BaseModel):
    # Checked by validate_score so that 1.5, "abc" and booleans all map to InvalidScore
    score: Any = None


class RatingEvent(BaseModel):
    """One rater's score for one item. Created once and never mutated."""

    id: Optional[str] = None
    itemId: str
    raterId: str
    score: int
    createdAt: datetime = Field(default_factory=utc_now)

    @classmethod
    def from_document(cls, doc: dict) -> "RatingEvent":
        return cls(
            id=str(doc["_id"]) if doc.get("_id") is not None else None,
            itemId=str(doc["itemId"]),
            raterId=str(doc["raterId"]),
            score=doc["score"],
            createdAt=doc["createdAt"],
        )


class RatedItemSummary(BaseModel):
    title: Optional[str] = None
    author: Optional[str] = None
    averageRating: float = 0.0
    totalRatingsCount: int = 0


class RatingHistoryEntry(BaseModel):
    itemId: str
    score: int
    createdAt: datetime
    item: Optional[RatedItemSummary] = None
