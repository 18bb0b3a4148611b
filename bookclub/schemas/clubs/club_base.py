from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, Field


class ClubCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class JoinClubRequest(BaseModel):
    invite_code: str = Field(..., min_length=1)


class ClubOut(BaseModel):
    id: int
    name: str
    admin_id: UUID
    invite_code: str
    created_at: datetime

    class Config:
        from_attributes = True


class ClubSummary(ClubOut):
    admin_name: str
    member_count: int
    is_admin: bool


class ClubMemberOut(BaseModel):
    user_id: UUID
    name: str
    joined_at: datetime
    is_admin: bool


class ClubDetails(ClubOut):
    members: List[ClubMemberOut]
    is_admin: bool
