import logging
from datetime import datetime

import pytest

from bookclub.core.errors import NotAMember, NotAuthorized, NotFound, PreconditionFailed
from bookclub.models.book_db import book_crud
from bookclub.models.book_db.book_crud import evaluate_consensus, get_books_by_status, select_next, update_book
from bookclub.models.book_db.book_db import Book
from bookclub.models.book_db.vote_crud import cast_vote, get_votes
from bookclub.models.club_db.club_db import Club
from bookclub.schemas.books.book_base import BookUpdate
from bookclub.services.book_status import BookStatus
from bookclub.services.vote_options import VoteDecision


def test_suggested_book_starts_pending(club, suggest):
    book = suggest(club["club"].id, club["B"])

    assert book.status == BookStatus.pending.value
    assert book.suggested_by == club["B"].id
    assert book.suggested_at is not None
    assert book.selected_at is None and book.completed_at is None


def test_non_member_cannot_suggest(club, suggest, make_user):
    outsider = make_user("Outsider")

    with pytest.raises(NotAMember):
        suggest(club["club"].id, outsider)


def test_book_stays_pending_until_every_member_votes(db, club, suggest):
    book = suggest(club["club"].id, club["A"])

    cast_vote(db, book.id, club["A"].id, VoteDecision.approve)
    result = cast_vote(db, book.id, club["B"].id, VoteDecision.approve)

    assert result.status == BookStatus.pending
    assert result.tally.approval_count == 2
    assert result.tally.vote_count == 2


def test_single_veto_rejects_once_everyone_voted(db, club, suggest):
    book = suggest(club["club"].id, club["A"])

    cast_vote(db, book.id, club["A"].id, VoteDecision.approve)
    cast_vote(db, book.id, club["B"].id, VoteDecision.approve)
    result = cast_vote(db, book.id, club["D"].id, VoteDecision.veto, "already_read")

    assert result.status == BookStatus.rejected
    assert result.tally.veto_count == 1
    assert result.tally.vote_count == 3


def test_unanimous_approval(club, suggest, approve_by_all):
    book = approve_by_all(suggest(club["club"].id, club["A"]))

    assert book.status == BookStatus.approved.value


def test_evaluate_consensus_is_idempotent(db, club, suggest, caplog):
    book = suggest(club["club"].id, club["A"])

    with caplog.at_level(logging.INFO, logger="bookclub.models.book_db.book_crud"):
        for key in ("A", "B", "D"):
            cast_vote(db, book.id, club[key].id, VoteDecision.approve)
        db.refresh(book)
        assert evaluate_consensus(db, book) is False
        assert evaluate_consensus(db, book) is False

    db.refresh(book)
    assert book.status == BookStatus.approved.value
    transitions = [r for r in caplog.records if "approved after" in r.getMessage()]
    assert len(transitions) == 1


def test_revote_replaces_ballot_before_consensus(db, club, suggest):
    book = suggest(club["club"].id, club["A"])

    cast_vote(db, book.id, club["B"].id, VoteDecision.veto, "not_for_me")
    first_id = get_votes(db, book.id)[0].id
    cast_vote(db, book.id, club["B"].id, VoteDecision.approve)

    votes = get_votes(db, book.id)
    assert len(votes) == 1
    assert votes[0].id == first_id
    assert votes[0].decision == VoteDecision.approve.value
    assert votes[0].veto_reason is None


def test_revote_after_veto_can_still_reach_approval(db, club, suggest):
    book = suggest(club["club"].id, club["A"])

    cast_vote(db, book.id, club["D"].id, VoteDecision.veto)
    cast_vote(db, book.id, club["D"].id, VoteDecision.approve)
    cast_vote(db, book.id, club["A"].id, VoteDecision.approve)
    result = cast_vote(db, book.id, club["B"].id, VoteDecision.approve)

    assert result.status == BookStatus.approved


def test_rejected_book_never_reopens(db, club, suggest):
    book = suggest(club["club"].id, club["A"])
    cast_vote(db, book.id, club["A"].id, VoteDecision.veto)
    cast_vote(db, book.id, club["B"].id, VoteDecision.approve)
    cast_vote(db, book.id, club["D"].id, VoteDecision.approve)

    result = cast_vote(db, book.id, club["A"].id, VoteDecision.approve)

    assert result.status == BookStatus.rejected


def test_club_without_members_never_approves(db, make_user):
    owner = make_user()
    empty = Club(name="Ghost Club", admin_id=owner.id, invite_code="GHOST1")
    db.add(empty)
    db.commit()
    book = Book(club_id=empty.id, title="Nobody", author="No One", spice_rating=1, suggested_by=owner.id)
    db.add(book)
    db.commit()

    assert evaluate_consensus(db, book) is False
    db.refresh(book)
    assert book.status == BookStatus.pending.value


def test_select_next_requires_admin(db, club, suggest, approve_by_all):
    approve_by_all(suggest(club["club"].id, club["A"]))

    with pytest.raises(NotAuthorized):
        select_next(db, club["club"].id, club["B"].id)


def test_select_next_unknown_club(db, club):
    with pytest.raises(NotFound):
        select_next(db, 9999, club["A"].id)


def test_select_next_requires_an_approved_book(db, club, suggest):
    suggest(club["club"].id, club["A"])

    with pytest.raises(PreconditionFailed):
        select_next(db, club["club"].id, club["A"].id)


def test_select_next_failure_leaves_current_book_untouched(db, club, suggest, approve_by_all):
    first = approve_by_all(suggest(club["club"].id, club["A"], "First"))
    select_next(db, club["club"].id, club["A"].id)

    with pytest.raises(PreconditionFailed):
        select_next(db, club["club"].id, club["A"].id)

    db.refresh(first)
    assert first.status == BookStatus.current.value
    assert first.completed_at is None


def test_select_next_promotes_and_completes(db, club, suggest, approve_by_all):
    club_id = club["club"].id
    y = approve_by_all(suggest(club_id, club["A"], "Y"))

    selected = select_next(db, club_id, club["A"].id)
    assert selected.id == y.id
    assert selected.status == BookStatus.current.value
    assert selected.selected_at is not None

    z = approve_by_all(suggest(club_id, club["B"], "Z"))
    selected = select_next(db, club_id, club["A"].id)

    db.refresh(y)
    assert selected.id == z.id
    assert y.status == BookStatus.completed.value
    assert y.completed_at is not None


def test_at_most_one_current_book(db, club, suggest, approve_by_all):
    club_id = club["club"].id
    for n in range(5):
        approve_by_all(suggest(club_id, club["A"], f"Book {n}"))

    for _ in range(5):
        select_next(db, club_id, club["A"].id)
        assert len(get_books_by_status(db, club_id, BookStatus.current)) == 1

    assert len(get_books_by_status(db, club_id, BookStatus.completed)) == 4
    assert get_books_by_status(db, club_id, BookStatus.approved) == []


def test_select_next_draws_from_the_approved_set(db, club, suggest, approve_by_all, monkeypatch):
    club_id = club["club"].id
    books = [approve_by_all(suggest(club_id, club["A"], title)) for title in ("One", "Two", "Three")]
    seen = []

    def fake_choice(seq):
        seen.extend(book.id for book in seq)
        return seq[-1]

    monkeypatch.setattr(book_crud.random, "choice", fake_choice)
    selected = select_next(db, club_id, club["A"].id)

    assert sorted(seen) == sorted(book.id for book in books)
    assert selected.id == books[-1].id


def test_update_book_edits_metadata_only(db, club, suggest):
    book = suggest(club["club"].id, club["A"])

    updated = update_book(db, book.id, club["B"].id, BookUpdate(title="Iron Flame", genre="Romantasy"))

    assert updated.title == "Iron Flame"
    assert updated.genre == "Romantasy"
    assert updated.author == "Someone"
    assert updated.status == BookStatus.pending.value


def test_update_book_requires_membership(db, club, suggest, make_user):
    book = suggest(club["club"].id, club["A"])

    with pytest.raises(NotAMember):
        update_book(db, book.id, make_user().id, BookUpdate(title="Nope"))


def test_concurrent_consensus_transitions_once(db, other_db, club, suggest, caplog):
    book = suggest(club["club"].id, club["A"])
    assert book.status == BookStatus.pending.value

    with caplog.at_level(logging.INFO, logger="bookclub.models.book_db.book_crud"):
        # the other request records every ballot and performs the approval
        for key in ("A", "B", "D"):
            cast_vote(other_db, book.id, club[key].id, VoteDecision.approve)

        # this session still holds the book as pending
        assert book.status == BookStatus.pending.value
        assert evaluate_consensus(db, book) is False

    db.refresh(book)
    assert book.status == BookStatus.approved.value
    transitions = [r for r in caplog.records if "approved after" in r.getMessage()]
    assert len(transitions) == 1


def test_select_next_loses_race_for_the_drawn_book(db, other_db, club, suggest, approve_by_all, monkeypatch, caplog):
    club_id = club["club"].id
    book = approve_by_all(suggest(club_id, club["A"], "Only One"))
    drawn_at = datetime(2026, 1, 1)

    def concurrent_draw(seq):
        # another request promotes the same book between the read and the write
        other_db.query(Book).filter(Book.id == seq[0].id).update(
            {Book.status: BookStatus.current.value, Book.selected_at: drawn_at},
            synchronize_session=False,
        )
        other_db.commit()
        return seq[0]

    monkeypatch.setattr(book_crud.random, "choice", concurrent_draw)

    with caplog.at_level(logging.INFO, logger="bookclub.models.book_db.book_crud"):
        with pytest.raises(PreconditionFailed):
            select_next(db, club_id, club["A"].id)

    db.refresh(book)
    assert book.status == BookStatus.current.value
    assert book.selected_at == drawn_at
    assert len(get_books_by_status(db, club_id, BookStatus.current)) == 1
    assert not [r for r in caplog.records if "is now current" in r.getMessage()]
