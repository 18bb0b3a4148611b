import itertools
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET_KEY"] = "test-secret"

import pytest
from fastapi.testclient import TestClient

from bookclub.core.database import Base, SessionLocal, engine, get_db
from bookclub.core.security import create_user_token
from bookclub.models import tables  # noqa: F401
from bookclub.models.book_db.book_crud import suggest_book
from bookclub.models.book_db.vote_crud import cast_vote
from bookclub.models.club_db.club_crud import create_club, join_club
from bookclub.models.user_db.user_db_crud import create_user
from bookclub.schemas.books.book_base import BookCreate
from bookclub.schemas.users.user_base import UserCreate
from bookclub.services.vote_options import VoteDecision
from main import app


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    try:
        yield
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def other_db():
    """A second session, standing in for a concurrent request."""
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    def _get_db():
        session = SessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = itertools.count(1)

    def _make(name=None):
        n = next(counter)
        return create_user(db, UserCreate(name=name or f"Reader {n}", email=f"reader{n}@bookclub.app"))

    return _make


@pytest.fixture
def club(db, make_user):
    """Club with three members: A (admin), B and D."""
    a, b, d = make_user("A"), make_user("B"), make_user("D")
    new_club = create_club(db, a.id, "Spicy Reads")
    join_club(db, b.id, new_club.invite_code)
    join_club(db, d.id, new_club.invite_code)
    return {"club": new_club, "A": a, "B": b, "D": d}


@pytest.fixture
def suggest(db):
    def _suggest(club_id, user, title="Fourth Wing", spice_rating=3):
        return suggest_book(db, club_id, user.id, BookCreate(title=title, author="Someone", spice_rating=spice_rating))

    return _suggest


@pytest.fixture
def approve_by_all(db, club):
    def _approve(book):
        for key in ("A", "B", "D"):
            cast_vote(db, book.id, club[key].id, VoteDecision.approve)
        db.refresh(book)
        return book

    return _approve


@pytest.fixture
def auth():
    def _auth(user):
        return {"Authorization": f"Bearer {create_user_token(user.id)}"}

    return _auth
