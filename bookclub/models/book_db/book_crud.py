"""Book lifecycle engine.

A book moves ``pending -> approved | rejected`` through the unanimity gate
(:func:`evaluate_consensus`) and ``approved -> current -> completed`` through
the admin draw (:func:`select_next`). Nothing ever returns to ``pending``.
"""
import logging
import random
from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy.orm import Session

from bookclub.core.errors import NotAuthorized, NotFound, PreconditionFailed
from bookclub.models.book_db.book_db import Book
from bookclub.models.book_db.vote_db import Vote
from bookclub.models.club_db.club_crud import list_members, require_member
from bookclub.models.club_db.club_db import Club
from bookclub.schemas.books.book_base import BookCreate, BookUpdate
from bookclub.services.book_status import BookStatus
from bookclub.services.vote_options import VoteDecision

logger = logging.getLogger(__name__)


def get_book(db: Session, book_id: int) -> Optional[Book]:
    return db.query(Book).filter(Book.id == book_id).first()


def require_book(db: Session, book_id: int, for_update: bool = False) -> Book:
    query = db.query(Book).filter(Book.id == book_id)
    if for_update:
        query = query.with_for_update().populate_existing()
    book = query.first()
    if not book:
        raise NotFound("Book not found")
    return book


def get_books_by_status(db: Session, club_id: int, status: BookStatus):
    return (
        db.query(Book)
        .filter(Book.club_id == club_id, Book.status == status.value)
        .order_by(Book.suggested_at, Book.id)
        .all()
    )


def suggest_book(db: Session, club_id: int, user_id: UUID, data: BookCreate) -> Book:
    require_member(db, club_id, user_id)

    book = Book(
        club_id=club_id,
        suggested_by=user_id,
        status=BookStatus.pending.value,
        suggested_at=datetime.utcnow(),
        **data.model_dump(),
    )
    db.add(book)
    db.commit()
    db.refresh(book)

    logger.info("Book %s suggested in club %s by %s", book.id, club_id, user_id)
    return book


def update_book(db: Session, book_id: int, user_id: UUID, data: BookUpdate) -> Book:
    book = require_book(db, book_id)
    require_member(db, book.club_id, user_id)

    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(book, field, value)

    db.commit()
    db.refresh(book)
    return book


def _transition(db: Session, book: Book, source: BookStatus, target: BookStatus, **stamps) -> bool:
    """Compare-and-set the status; False when another writer moved it first."""
    changed = (
        db.query(Book)
        .filter(Book.id == book.id, Book.status == source.value)
        .update({Book.status: target.value, **stamps}, synchronize_session=False)
    )
    if changed:
        db.refresh(book)
    return bool(changed)


def evaluate_consensus(db: Session, book: Book) -> bool:
    """Run the unanimity gate on a pending book.

    Every member must have voted before the book leaves ``pending``: a single
    veto rejects it, otherwise it is approved. Returns True only for the call
    that performed the transition. The caller owns the transaction.
    """
    if book.status != BookStatus.pending.value:
        return False

    members = list_members(db, book.club_id)
    if not members:
        # no vacuous approval for an empty club
        return False

    votes = db.query(Vote.decision).filter(Vote.book_id == book.id).all()
    if len(votes) < len(members):
        return False

    has_veto = any(vote.decision == VoteDecision.veto.value for vote in votes)
    target = BookStatus.rejected if has_veto else BookStatus.approved

    transitioned = _transition(db, book, BookStatus.pending, target)
    if transitioned:
        logger.info("Book %s %s after %d votes", book.id, target.value, len(votes))
    return transitioned


def select_next(db: Session, club_id: int, user_id: UUID) -> Book:
    """Complete the current book and draw the next one from the TBR.

    Admin only. The whole draw is one transaction.
    """
    try:
        club = db.query(Club).filter(Club.id == club_id).with_for_update().first()
        if not club:
            raise NotFound("Club not found")
        if club.admin_id != user_id:
            logger.warning("User %s tried to select the next book of club %s", user_id, club_id)
            raise NotAuthorized("Only the club admin can select the next book")

        approved = get_books_by_status(db, club_id, BookStatus.approved)
        if not approved:
            raise PreconditionFailed("No approved books available")

        now = datetime.utcnow()
        for book in get_books_by_status(db, club_id, BookStatus.current):
            _transition(db, book, BookStatus.current, BookStatus.completed, completed_at=now)
            logger.info("Book %s completed in club %s", book.id, club_id)

        selected = random.choice(approved)
        if not _transition(db, selected, BookStatus.approved, BookStatus.current, selected_at=now):
            raise PreconditionFailed("Selected book is no longer approved")

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(selected)
    logger.info("Book %s is now current in club %s", selected.id, club_id)
    return selected
