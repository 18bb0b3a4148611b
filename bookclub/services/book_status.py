from enum import Enum


class BookStatus(str, Enum):
    pending = "pending"        # waiting for votes
    approved = "approved"      # unanimous approval, in the TBR
    rejected = "rejected"      # at least one veto
    current = "current"        # currently reading
    completed = "completed"    # finished reading
