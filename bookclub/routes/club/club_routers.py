from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookclub.core.database import get_db
from bookclub.core.security import get_current_user, get_optional_user
from bookclub.models.book_db.book_crud import select_next, suggest_book
from bookclub.models.book_db.bookshelf_crud import get_bookshelf
from bookclub.models.book_db.vote_crud import get_pending_books
from bookclub.models.club_db.club_crud import create_club, get_club_details, get_user_clubs, join_club
from bookclub.models.user_db.user_db import User
from bookclub.schemas.books.book_base import BookCreate, BookCreated, BookOut, PendingBookOut
from bookclub.schemas.bookshelf.bookshelf_base import BookshelfOut
from bookclub.schemas.clubs.club_base import ClubCreate, ClubDetails, ClubOut, ClubSummary, JoinClubRequest

club_router = APIRouter(prefix="/clubs", tags=["Clubs"])


@club_router.post("/", response_model=ClubOut)
def create_club_route(
    payload: ClubCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return create_club(db, current_user.id, payload.name)


@club_router.post("/join", response_model=ClubOut)
def join_club_route(
    payload: JoinClubRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return join_club(db, current_user.id, payload.invite_code)


@club_router.get("/", response_model=List[ClubSummary])
def list_my_clubs(
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    if not current_user:
        return []
    return get_user_clubs(db, current_user.id)


@club_router.get("/{club_id}", response_model=ClubDetails)
def club_details(
    club_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return get_club_details(db, club_id, current_user.id)


@club_router.post("/{club_id}/books", response_model=BookCreated)
def suggest_book_route(
    club_id: int,
    payload: BookCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    book = suggest_book(db, club_id, current_user.id, payload)
    return {"book_id": book.id}


@club_router.get("/{club_id}/books/pending", response_model=List[PendingBookOut])
def pending_books(
    club_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    if not current_user:
        return []
    return get_pending_books(db, club_id, current_user.id)


@club_router.get("/{club_id}/bookshelf", response_model=Optional[BookshelfOut])
def bookshelf(
    club_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    if not current_user:
        return None
    return get_bookshelf(db, club_id, current_user.id)


@club_router.post("/{club_id}/select-next", response_model=BookOut)
def select_next_route(
    club_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return select_next(db, club_id, current_user.id)
