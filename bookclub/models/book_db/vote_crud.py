import logging
from collections import Counter
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from bookclub.core.errors import InvalidRequest
from bookclub.models.book_db.book_crud import evaluate_consensus, get_books_by_status, require_book
from bookclub.models.book_db.vote_db import Vote
from bookclub.models.club_db.club_crud import require_member
from bookclub.models.user_db.user_db_crud import display_name, get_user_names
from bookclub.schemas.votes.vote_base import VoteResult, VoteTally
from bookclub.services.book_status import BookStatus
from bookclub.services.vote_options import VetoReason, VoteDecision

logger = logging.getLogger(__name__)


def _tally(votes: List[Vote]) -> VoteTally:
    counts = Counter(vote.decision for vote in votes)
    return VoteTally(
        approval_count=counts[VoteDecision.approve.value],
        veto_count=counts[VoteDecision.veto.value],
        vote_count=len(votes),
    )


def get_votes(db: Session, book_id: int) -> List[Vote]:
    return db.query(Vote).filter(Vote.book_id == book_id).all()


def get_tally(db: Session, book_id: int) -> VoteTally:
    return _tally(get_votes(db, book_id))


def get_user_vote(db: Session, book_id: int, user_id: UUID) -> Optional[Vote]:
    return db.query(Vote).filter(Vote.book_id == book_id, Vote.user_id == user_id).first()


def cast_vote(
    db: Session,
    book_id: int,
    user_id: UUID,
    decision: VoteDecision,
    reason: Optional[VetoReason] = None,
) -> VoteResult:
    """Record the caller's ballot, replacing any earlier one, then run the unanimity gate."""
    decision = VoteDecision(decision)
    if reason is not None and decision != VoteDecision.veto:
        raise InvalidRequest("A veto reason can only accompany a veto")
    reason_value = VetoReason(reason).value if reason is not None else None

    try:
        # the row lock serializes concurrent voters on the same book
        book = require_book(db, book_id, for_update=True)
        require_member(db, book.club_id, user_id)

        vote = get_user_vote(db, book_id, user_id)
        if vote:
            vote.decision = decision.value
            vote.veto_reason = reason_value
            vote.voted_at = datetime.utcnow()
        else:
            vote = Vote(
                book_id=book_id,
                user_id=user_id,
                club_id=book.club_id,
                decision=decision.value,
                veto_reason=reason_value,
                voted_at=datetime.utcnow(),
            )
            db.add(vote)
        db.flush()

        evaluate_consensus(db, book)
        tally = get_tally(db, book_id)
        db.commit()
    except Exception:
        db.rollback()
        raise

    return VoteResult(status=book.status, tally=tally)


def get_pending_books(db: Session, club_id: int, user_id: UUID) -> List[dict]:
    require_member(db, club_id, user_id)

    books = get_books_by_status(db, club_id, BookStatus.pending)
    names = get_user_names(db, [book.suggested_by for book in books])

    pending = []
    for book in books:
        votes = get_votes(db, book.id)
        own = next((vote for vote in votes if vote.user_id == user_id), None)
        tally = _tally(votes)
        pending.append({
            "id": book.id,
            "club_id": book.club_id,
            "title": book.title,
            "author": book.author,
            "summary": book.summary,
            "cover_url": book.cover_url,
            "genre": book.genre,
            "spice_rating": book.spice_rating,
            "suggested_by": book.suggested_by,
            "status": book.status,
            "suggested_at": book.suggested_at,
            "selected_at": book.selected_at,
            "completed_at": book.completed_at,
            "suggester_name": display_name(names, book.suggested_by),
            "user_vote": own.decision if own else None,
            **tally.model_dump(),
        })
    return pending
