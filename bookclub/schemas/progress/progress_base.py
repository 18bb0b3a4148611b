from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field


class ProgressIn(BaseModel):
    current_page: int = Field(..., ge=0)
    total_pages: Optional[int] = Field(None, ge=0)


class MemberProgress(BaseModel):
    user_id: UUID
    user_name: str
    current_page: int
    total_pages: Optional[int] = None
    percentage: int


class CurrentBookProgress(BaseModel):
    user_progress: int = 0
    total_pages: int = 0
    all_progress: List[MemberProgress] = []
