from uuid import UUID
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from bookclub.core.database import get_db
from bookclub.core.security import get_current_user
from bookclub.models.user_db.user_db import User
from bookclub.models.user_db.user_db_crud import create_user, get_user_by_email, get_user_by_id
from bookclub.schemas.users.user_base import UserCreate, UserOut


user_router = APIRouter(prefix="/users", tags=["Users"])


@user_router.post("/", response_model=UserOut)
def register_user(user: UserCreate, db: Session = Depends(get_db)):
    if get_user_by_email(db, user.email):
        raise HTTPException(status_code=400, detail="Email already registered")
    return create_user(db, user)


@user_router.get("/me", response_model=UserOut)
def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@user_router.get("/{user_id}", response_model=UserOut)
def get_user(user_id: UUID, db: Session = Depends(get_db)):
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user
