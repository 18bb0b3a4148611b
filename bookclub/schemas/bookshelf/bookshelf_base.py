from typing import List, Optional

from pydantic import BaseModel

from bookclub.schemas.books.book_base import BookOut
from bookclub.schemas.progress.progress_base import CurrentBookProgress
from bookclub.schemas.ratings.rating_base import AverageRatings


class CurrentBookOut(CurrentBookProgress):
    book: BookOut


class CompletedBookOut(BookOut):
    avg_ratings: AverageRatings
    rating_count: int


class BookshelfOut(BaseModel):
    current_book: Optional[CurrentBookOut] = None
    tbr_books: List[BookOut] = []
    completed_books: List[CompletedBookOut] = []
