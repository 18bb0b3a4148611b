from typing import Dict, Iterable
from uuid import UUID
from sqlalchemy.orm import Session
from bookclub.models.user_db.user_db import User
from bookclub.schemas.users.user_base import UserCreate

UNKNOWN_USER_NAME = "Unknown User"


def create_user(db: Session, user: UserCreate):
    db_user = User(
        email=user.email,
        name=user.name,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def get_user_by_email(db: Session, email: str):
    return db.query(User).filter(User.email == email).first()


def get_user_by_id(db: Session, user_id: UUID):
    return db.query(User).filter(User.id == user_id).first()


def get_user_names(db: Session, user_ids: Iterable[UUID]) -> Dict[UUID, str]:
    ids = set(user_ids)
    if not ids:
        return {}
    users = db.query(User).filter(User.id.in_(ids)).all()
    return {user.id: user.name for user in users}


def display_name(names: Dict[UUID, str], user_id: UUID) -> str:
    return names.get(user_id) or UNKNOWN_USER_NAME
