from enum import Enum


class VoteDecision(str, Enum):
    approve = "approve"
    veto = "veto"


class VetoReason(str, Enum):
    already_read = "already_read"
    not_for_me = "not_for_me"
    not_interested = "not_interested"
