from sqlalchemy import Column, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid
from datetime import datetime
from bookclub.core.database import Base


class Progress(Base):
    __tablename__ = "progress"

    id = Column(Integer, primary_key=True, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id"), nullable=False, index=True)

    current_page = Column(Integer, nullable=False)
    total_pages = Column(Integer, nullable=True)
    updated_at = Column(DateTime, default=datetime.utcnow)

    __table_args__ = (
        UniqueConstraint("book_id", "user_id", name="uq_progress_book_user"),
    )
