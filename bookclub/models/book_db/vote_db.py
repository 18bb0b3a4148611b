from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship
from datetime import datetime
from bookclub.core.database import Base


class Vote(Base):
    __tablename__ = "votes"

    id = Column(Integer, primary_key=True, index=True)
    book_id = Column(Integer, ForeignKey("books.id"), nullable=False, index=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    club_id = Column(Integer, ForeignKey("clubs.id"), nullable=False, index=True)

    decision = Column(String, nullable=False)  # 'approve' | 'veto'
    veto_reason = Column(String, nullable=True)
    voted_at = Column(DateTime, default=datetime.utcnow)

    book = relationship("Book", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("book_id", "user_id", name="uq_votes_book_user"),
    )
