import logging
import secrets
import string
from typing import List, Optional, Set
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bookclub.core.config import settings
from bookclub.core.errors import Conflict, NotAMember, NotFound
from bookclub.models.club_db.club_db import Club, ClubMember
from bookclub.models.user_db.user_db_crud import display_name, get_user_names

logger = logging.getLogger(__name__)

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits


# Membership directory

def is_member(db: Session, club_id: int, user_id: UUID) -> bool:
    membership = (
        db.query(ClubMember.id)
        .filter(ClubMember.club_id == club_id, ClubMember.user_id == user_id)
        .first()
    )
    return membership is not None


def list_members(db: Session, club_id: int) -> Set[UUID]:
    rows = db.query(ClubMember.user_id).filter(ClubMember.club_id == club_id).all()
    return {row.user_id for row in rows}


def require_member(db: Session, club_id: int, user_id: UUID) -> None:
    if not is_member(db, club_id, user_id):
        logger.warning("User %s is not a member of club %s", user_id, club_id)
        raise NotAMember()


def get_club(db: Session, club_id: int) -> Optional[Club]:
    return db.query(Club).filter(Club.id == club_id).first()


def generate_invite_code(length: Optional[int] = None) -> str:
    length = length or settings.INVITE_CODE_LENGTH
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


def _unused_invite_code(db: Session) -> str:
    while True:
        code = generate_invite_code()
        if not db.query(Club.id).filter(Club.invite_code == code).first():
            return code


def create_club(db: Session, user_id: UUID, name: str) -> Club:
    club = Club(name=name, admin_id=user_id, invite_code=_unused_invite_code(db))
    db.add(club)
    db.flush()

    # Creator is the first member
    db.add(ClubMember(club_id=club.id, user_id=user_id))
    db.commit()
    db.refresh(club)

    logger.info("Club %s created by %s", club.id, user_id)
    return club


def join_club(db: Session, user_id: UUID, invite_code: str) -> Club:
    club = db.query(Club).filter(Club.invite_code == invite_code.strip().upper()).first()
    if not club:
        raise NotFound("Invalid invite code")

    if is_member(db, club.id, user_id):
        raise Conflict("You are already a member of this club")

    db.add(ClubMember(club_id=club.id, user_id=user_id))
    try:
        db.commit()
    except IntegrityError:
        # a concurrent join of the same user won the insert
        db.rollback()
        raise Conflict("You are already a member of this club")

    logger.info("User %s joined club %s", user_id, club.id)
    return club


def get_user_clubs(db: Session, user_id: UUID) -> List[dict]:
    clubs = (
        db.query(Club)
        .join(ClubMember, ClubMember.club_id == Club.id)
        .filter(ClubMember.user_id == user_id)
        .order_by(ClubMember.joined_at)
        .all()
    )
    if not clubs:
        return []

    counts = dict(
        db.query(ClubMember.club_id, func.count(ClubMember.id))
        .filter(ClubMember.club_id.in_([club.id for club in clubs]))
        .group_by(ClubMember.club_id)
        .all()
    )
    names = get_user_names(db, [club.admin_id for club in clubs])

    return [
        {
            "id": club.id,
            "name": club.name,
            "admin_id": club.admin_id,
            "admin_name": display_name(names, club.admin_id),
            "invite_code": club.invite_code,
            "created_at": club.created_at,
            "member_count": counts.get(club.id, 0),
            "is_admin": club.admin_id == user_id,
        }
        for club in clubs
    ]


def get_club_details(db: Session, club_id: int, user_id: UUID) -> dict:
    club = get_club(db, club_id)
    if not club:
        raise NotFound("Club not found")
    require_member(db, club_id, user_id)

    names = get_user_names(db, [member.user_id for member in club.members])
    members = [
        {
            "user_id": member.user_id,
            "name": display_name(names, member.user_id),
            "joined_at": member.joined_at,
            "is_admin": club.admin_id == member.user_id,
        }
        for member in club.members
    ]

    return {
        "id": club.id,
        "name": club.name,
        "admin_id": club.admin_id,
        "invite_code": club.invite_code,
        "created_at": club.created_at,
        "members": members,
        "is_admin": club.admin_id == user_id,
    }
