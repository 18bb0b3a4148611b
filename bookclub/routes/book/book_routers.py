from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from bookclub.core.database import get_db
from bookclub.core.security import get_current_user, get_optional_user
from bookclub.models.book_db.book_crud import update_book
from bookclub.models.book_db.progress_crud import update_progress
from bookclub.models.book_db.rating_crud import get_book_reviews, rate_book
from bookclub.models.book_db.vote_crud import cast_vote
from bookclub.models.user_db.user_db import User
from bookclub.schemas.books.book_base import BookOut, BookUpdate
from bookclub.schemas.progress.progress_base import ProgressIn
from bookclub.schemas.ratings.rating_base import RatingIn, ReviewOut
from bookclub.schemas.votes.vote_base import VoteIn, VoteResult

book_router = APIRouter(prefix="/books", tags=["Books"])


@book_router.put("/{book_id}", response_model=BookOut)
def update_book_route(
    book_id: int,
    payload: BookUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return update_book(db, book_id, current_user.id, payload)


@book_router.post("/{book_id}/votes", response_model=VoteResult)
def vote_on_book(
    book_id: int,
    payload: VoteIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    return cast_vote(db, book_id, current_user.id, payload.vote, payload.veto_reason)


@book_router.put("/{book_id}/progress")
def update_progress_route(
    book_id: int,
    payload: ProgressIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    update_progress(db, book_id, current_user.id, payload.current_page, payload.total_pages)
    return {"success": True}


@book_router.put("/{book_id}/rating")
def rate_book_route(
    book_id: int,
    payload: RatingIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    rate_book(db, book_id, current_user.id, payload.storyline, payload.characters, payload.spice)
    return {"success": True}


@book_router.get("/{book_id}/reviews", response_model=List[ReviewOut])
def book_reviews(
    book_id: int,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user)
):
    if not current_user:
        return []
    return get_book_reviews(db, book_id, current_user.id)
