# Every mapped table, imported together so relationship() targets resolve
# and Base.metadata is complete for create_all and Alembic.
from bookclub.models.user_db.user_db import User
from bookclub.models.club_db.club_db import Club, ClubMember
from bookclub.models.book_db.book_db import Book
from bookclub.models.book_db.vote_db import Vote
from bookclub.models.book_db.progress_db import Progress
from bookclub.models.book_db.rating_db import Rating

__all__ = ["User", "Club", "ClubMember", "Book", "Vote", "Progress", "Rating"]
