from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid
from datetime import datetime
from bookclub.core.database import Base


class Rating(Base):
    __tablename__ = "ratings"

    id = Column(Integer, primary_key=True, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id"), nullable=False, index=True)

    storyline = Column(Integer, nullable=False)   # 1-5 stars
    characters = Column(Integer, nullable=False)  # 1-5 hearts
    spice = Column(Integer, nullable=False)       # 1-5 chilis
    rated_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("book_id", "user_id", name="uq_ratings_book_user"),
    )
