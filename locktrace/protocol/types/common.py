# MIT License
# Copyright (c) 2025 Hashborn

from enum import Enum, IntEnum


class Conviction(IntEnum):
    """Conviction level as encoded in the low 7 bits of a vote byte."""
    NONE = 0
    LOCKED_1X = 1
    LOCKED_2X = 2
    LOCKED_3X = 3
    LOCKED_4X = 4
    LOCKED_5X = 5
    LOCKED_6X = 6

    @classmethod
    def from_vote_byte(cls, vote_byte: int) -> "Conviction":
        level = vote_byte & 0x7F
        if level > cls.LOCKED_6X:
            raise ValueError(f"Unknown conviction value: {level}")
        return cls(level)


class VoteType(str, Enum):
    STANDARD = "STANDARD"
    SPLIT = "SPLIT"
    SPLIT_ABSTAIN = "SPLIT_ABSTAIN"
    ABSTAIN = "ABSTAIN"         # Abstain-only ballot, or the abstain leg of a SplitAbstain


class ReferendumStatus(str, Enum):
    ONGOING = "ONGOING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    CANCELLED = "CANCELLED"
    TIMED_OUT = "TIMED_OUT"
    KILLED = "KILLED"

    @property
    def is_terminal(self) -> bool:
        return self is not ReferendumStatus.ONGOING

    @property
    def is_enacting(self) -> bool:
        """Outcomes after which conviction extends the lock past the decision."""
        return self in (ReferendumStatus.APPROVED, ReferendumStatus.REJECTED)


class LockClass(str, Enum):
    VOTING = "voting"
    VESTING = "vesting"


class OutcomeStatus(str, Enum):
    OK = "ok"
    DEGRADED = "degraded"       # some records skipped (arithmetic overflow)
    INCOMPLETE = "incomplete"   # referendum data missing for at least one vote
    FAILED = "failed"           # chain data could not be fetched


class ProtocolError(Exception):
    pass

class ValidationError(ProtocolError):
    pass

class LockComputationError(ProtocolError):
    pass

class ReferendumMismatchError(LockComputationError):
    """A vote references a referendum that was not supplied."""

    def __init__(self, referendum_id: int, message: str = None):
        self.referendum_id = referendum_id
        super().__init__(message or f"No referendum data for referendum {referendum_id}")

class ArithmeticOverflowError(LockComputationError):
    pass

class DataSourceError(ProtocolError):
    pass
