from pydantic import BaseModel, EmailStr, Field
from uuid import UUID
from datetime import datetime


class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)


class UserCreate(UserBase):
    pass


class UserOut(UserBase):
    id: UUID
    created_at: datetime

    class Config:
        from_attributes = True
