from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from bookclub.services.book_status import BookStatus
from bookclub.services.vote_options import VoteDecision


class BookBase(BaseModel):
    title: str = Field(..., min_length=1)
    author: str = Field(..., min_length=1)
    summary: Optional[str] = None
    cover_url: Optional[str] = None
    genre: Optional[str] = None
    spice_rating: int = Field(..., ge=1, le=5)


class BookCreate(BookBase):
    pass


class BookUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    author: Optional[str] = Field(None, min_length=1)
    summary: Optional[str] = None
    cover_url: Optional[str] = None
    genre: Optional[str] = None
    spice_rating: Optional[int] = Field(None, ge=1, le=5)

    @field_validator("title", "author", "spice_rating")
    @classmethod
    def not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class BookOut(BookBase):
    id: int
    club_id: int
    suggested_by: UUID
    status: BookStatus
    suggested_at: datetime
    selected_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class BookCreated(BaseModel):
    book_id: int


class PendingBookOut(BookOut):
    suggester_name: str
    user_vote: Optional[VoteDecision] = None
    vote_count: int
    approval_count: int
    veto_count: int
