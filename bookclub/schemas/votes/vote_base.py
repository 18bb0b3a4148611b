from typing import Optional

from pydantic import BaseModel, model_validator

from bookclub.services.book_status import BookStatus
from bookclub.services.vote_options import VetoReason, VoteDecision


class VoteIn(BaseModel):
    vote: VoteDecision
    veto_reason: Optional[VetoReason] = None

    @model_validator(mode="after")
    def reason_only_with_veto(self):
        if self.veto_reason is not None and self.vote != VoteDecision.veto:
            raise ValueError("veto_reason is only allowed with a veto")
        return self


class VoteTally(BaseModel):
    approval_count: int = 0
    veto_count: int = 0
    vote_count: int = 0


class VoteResult(BaseModel):
    success: bool = True
    status: BookStatus
    tally: VoteTally
