from datetime import datetime
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookclub.core.errors import Conflict
from bookclub.models.book_db.book_crud import require_book
from bookclub.models.book_db.rating_db import Rating
from bookclub.models.club_db.club_crud import require_member
from bookclub.models.user_db.user_db_crud import display_name, get_user_names
from bookclub.schemas.ratings.rating_base import AverageRatings, ReviewOut


def get_rating(db: Session, book_id: int, user_id: UUID):
    return db.query(Rating).filter(Rating.book_id == book_id, Rating.user_id == user_id).first()


def rate_book(
    db: Session,
    book_id: int,
    user_id: UUID,
    storyline: int,
    characters: int,
    spice: int,
) -> Rating:
    book = require_book(db, book_id)
    require_member(db, book.club_id, user_id)

    rating = get_rating(db, book_id, user_id)
    if rating:
        rating.storyline = storyline
        rating.characters = characters
        rating.spice = spice
        rating.rated_at = datetime.utcnow()
    else:
        rating = Rating(
            book_id=book_id,
            user_id=user_id,
            club_id=book.club_id,
            storyline=storyline,
            characters=characters,
            spice=spice,
            rated_at=datetime.utcnow(),
        )
        db.add(rating)

    try:
        db.commit()
    except IntegrityError:
        # a concurrent first write for the same member won the insert
        db.rollback()
        raise Conflict("Rating already recorded, try again")
    db.refresh(rating)
    return rating


def average_ratings(db: Session, book_id: int) -> Tuple[AverageRatings, int]:
    """Mean of every dimension for a book, zeros when nobody rated it."""
    count, storyline, characters, spice = (
        db.query(
            func.count(Rating.id),
            func.avg(Rating.storyline),
            func.avg(Rating.characters),
            func.avg(Rating.spice),
        )
        .filter(Rating.book_id == book_id)
        .one()
    )
    if not count:
        return AverageRatings(), 0
    return AverageRatings(
        storyline=float(storyline),
        characters=float(characters),
        spice=float(spice),
    ), count


def get_book_reviews(db: Session, book_id: int, user_id: UUID) -> List[ReviewOut]:
    book = require_book(db, book_id)
    require_member(db, book.club_id, user_id)

    ratings = db.query(Rating).filter(Rating.book_id == book_id).order_by(Rating.rated_at).all()
    names = get_user_names(db, [rating.user_id for rating in ratings])

    return [
        ReviewOut(
            user_id=rating.user_id,
            user_name=display_name(names, rating.user_id),
            storyline=rating.storyline,
            characters=rating.characters,
            spice=rating.spice,
            rated_at=rating.rated_at,
        )
        for rating in ratings
    ]
