from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, Uuid, text
from sqlalchemy.orm import relationship
from datetime import datetime
from bookclub.core.database import Base
from bookclub.services.book_status import BookStatus


class Book(Base):
    __tablename__ = "books"

    id = Column(Integer, primary_key=True, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id"), nullable=False, index=True)

    title = Column(String, nullable=False)
    author = Column(String, nullable=False)
    summary = Column(Text, nullable=True)
    cover_url = Column(String, nullable=True)
    genre = Column(String, nullable=True)
    spice_rating = Column(Integer, nullable=False)  # 1-5 chilis, set by the suggester

    suggested_by = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    status = Column(String, nullable=False, default=BookStatus.pending.value)

    suggested_at = Column(DateTime, default=datetime.utcnow)
    selected_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)

    # Relacionamentos
    club = relationship("Club", back_populates="books")
    suggester = relationship("User")
    votes = relationship("Vote", back_populates="book")

    __table_args__ = (
        Index("ix_books_club_status", "club_id", "status"),
        Index(
            "uq_books_one_current_per_club",
            "club_id",
            unique=True,
            postgresql_where=text("status = 'current'"),
            sqlite_where=text("status = 'current'"),
        ),
    )
