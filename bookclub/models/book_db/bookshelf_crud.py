from uuid import UUID

from sqlalchemy.orm import Session

from bookclub.models.book_db.book_crud import get_books_by_status
from bookclub.models.book_db.book_db import Book
from bookclub.models.book_db.progress_crud import summarize_progress
from bookclub.models.book_db.rating_crud import average_ratings
from bookclub.models.club_db.club_crud import require_member
from bookclub.schemas.books.book_base import BookOut
from bookclub.schemas.bookshelf.bookshelf_base import BookshelfOut, CompletedBookOut, CurrentBookOut
from bookclub.services.book_status import BookStatus


def get_bookshelf(db: Session, club_id: int, user_id: UUID) -> BookshelfOut:
    require_member(db, club_id, user_id)

    current_book = None
    current = get_books_by_status(db, club_id, BookStatus.current)
    if current:
        progress = summarize_progress(db, current[0].id, user_id)
        current_book = CurrentBookOut(
            book=BookOut.model_validate(current[0]),
            **progress.model_dump(),
        )

    tbr = get_books_by_status(db, club_id, BookStatus.approved)

    completed = (
        db.query(Book)
        .filter(Book.club_id == club_id, Book.status == BookStatus.completed.value)
        .order_by(Book.completed_at.desc(), Book.id.desc())
        .all()
    )
    completed_books = []
    for book in completed:
        averages, count = average_ratings(db, book.id)
        completed_books.append(CompletedBookOut(
            **BookOut.model_validate(book).model_dump(),
            avg_ratings=averages,
            rating_count=count,
        ))

    return BookshelfOut(
        current_book=current_book,
        tbr_books=[BookOut.model_validate(book) for book in tbr],
        completed_books=completed_books,
    )
