"""Domain-level exceptions for clubs, books and votes.

Raised by the crud layer and rendered by the handler installed in ``main.py``.
"""


class BookClubError(Exception):
    """Base class for book club errors."""

    reason: str = "unknown"
    status_code: int = 400
    message: str = "Book club error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)
        self.message = message or self.message


class Unauthenticated(BookClubError):
    reason = "unauthenticated"
    status_code = 401
    message = "Must be logged in"


class NotAMember(BookClubError):
    reason = "not_a_member"
    status_code = 403
    message = "You are not a member of this club"


class NotAuthorized(BookClubError):
    reason = "not_authorized"
    status_code = 403
    message = "Only the club admin can do this"


class NotFound(BookClubError):
    reason = "not_found"
    status_code = 404
    message = "Not found"


class Conflict(BookClubError):
    reason = "conflict"
    status_code = 409
    message = "Conflict"


class PreconditionFailed(BookClubError):
    reason = "precondition_failed"
    status_code = 409
    message = "Precondition failed"


class InvalidRequest(BookClubError):
    reason = "invalid_request"
    status_code = 422
    message = "Invalid request"
