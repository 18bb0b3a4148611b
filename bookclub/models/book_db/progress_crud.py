import math
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookclub.core.errors import Conflict
from bookclub.models.book_db.book_crud import require_book
from bookclub.models.book_db.progress_db import Progress
from bookclub.models.club_db.club_crud import require_member
from bookclub.models.user_db.user_db_crud import display_name, get_user_names
from bookclub.schemas.progress.progress_base import CurrentBookProgress, MemberProgress


def get_progress(db: Session, book_id: int, user_id: UUID):
    return db.query(Progress).filter(Progress.book_id == book_id, Progress.user_id == user_id).first()


def update_progress(
    db: Session,
    book_id: int,
    user_id: UUID,
    current_page: int,
    total_pages: Optional[int] = None,
) -> Progress:
    book = require_book(db, book_id)
    require_member(db, book.club_id, user_id)

    progress = get_progress(db, book_id, user_id)
    if progress:
        progress.current_page = current_page
        # an omitted total keeps the one already recorded
        progress.total_pages = total_pages or progress.total_pages
        progress.updated_at = datetime.utcnow()
    else:
        progress = Progress(
            book_id=book_id,
            user_id=user_id,
            club_id=book.club_id,
            current_page=current_page,
            total_pages=total_pages,
            updated_at=datetime.utcnow(),
        )
        db.add(progress)

    try:
        db.commit()
    except IntegrityError:
        # a concurrent first write for the same member won the insert
        db.rollback()
        raise Conflict("Progress already recorded, try again")
    db.refresh(progress)
    return progress


def progress_percentage(current_page: int, total_pages: Optional[int]) -> int:
    if not total_pages or total_pages <= 0:
        return 0
    # halves round up
    return math.floor(current_page / total_pages * 100 + 0.5)


def get_book_progress(db: Session, book_id: int) -> List[Progress]:
    return db.query(Progress).filter(Progress.book_id == book_id).order_by(Progress.id).all()


def summarize_progress(db: Session, book_id: int, user_id: UUID) -> CurrentBookProgress:
    rows = get_book_progress(db, book_id)
    names = get_user_names(db, [row.user_id for row in rows])
    own = next((row for row in rows if row.user_id == user_id), None)

    return CurrentBookProgress(
        user_progress=own.current_page if own else 0,
        total_pages=(own.total_pages or 0) if own else 0,
        all_progress=[
            MemberProgress(
                user_id=row.user_id,
                user_name=display_name(names, row.user_id),
                current_page=row.current_page,
                total_pages=row.total_pages,
                percentage=progress_percentage(row.current_page, row.total_pages),
            )
            for row in rows
        ],
    )
