# MIT License
# Copyright (c) 2025 Hashborn

from pydantic import BaseModel, Field, model_validator
from typing import List, Optional, Tuple
from .common import Conviction, VoteType, ReferendumStatus

_VARIANT_FIELDS = {
    VoteType.STANDARD: ("balance",),
    VoteType.SPLIT: ("aye_balance", "nay_balance"),
    VoteType.SPLIT_ABSTAIN: ("aye_balance", "nay_balance", "abstain_balance"),
    VoteType.ABSTAIN: ("abstain_balance",),
}
_ALL_BALANCE_FIELDS = ("balance", "aye_balance", "nay_balance", "abstain_balance")


class Vote(BaseModel):
    """A ballot cast by an account on a referendum (AccountVote)."""
    referendum_id: int = Field(..., ge=0)
    vote_type: VoteType
    conviction: Conviction = Conviction.NONE
    aye: Optional[bool] = None                      # Standard only
    balance: Optional[int] = Field(default=None, ge=0)
    aye_balance: Optional[int] = Field(default=None, ge=0)
    nay_balance: Optional[int] = Field(default=None, ge=0)
    abstain_balance: Optional[int] = Field(default=None, ge=0)
    lock_class: Optional[int] = None                # Track id the vote was cast in

    @model_validator(mode="after")
    def _check_variant(self) -> "Vote":
        expected = _VARIANT_FIELDS[self.vote_type]
        for name in _ALL_BALANCE_FIELDS:
            value = getattr(self, name)
            if name in expected and value is None:
                raise ValueError(f"{self.vote_type.value} vote requires '{name}'")
            if name not in expected and value is not None:
                raise ValueError(f"{self.vote_type.value} vote must not set '{name}'")
        if self.vote_type == VoteType.STANDARD and self.aye is None:
            raise ValueError("STANDARD vote requires a direction ('aye')")
        return self

    def components(self) -> List[Tuple[str, VoteType, int]]:
        """
        Balance legs of this vote as (label, effective vote type, amount).

        Abstain legs are tagged VoteType.ABSTAIN so they never pick up conviction.
        """
        if self.vote_type == VoteType.STANDARD:
            return [("aye" if self.aye else "nay", VoteType.STANDARD, self.balance)]
        legs = []
        if self.aye_balance is not None:
            legs.append(("aye", self.vote_type, self.aye_balance))
        if self.nay_balance is not None:
            legs.append(("nay", self.vote_type, self.nay_balance))
        if self.abstain_balance is not None:
            legs.append(("abstain", VoteType.ABSTAIN, self.abstain_balance))
        return legs


class Referendum(BaseModel):
    id: int = Field(..., ge=0)
    status: ReferendumStatus
    conclusion_block: Optional[int] = Field(default=None, ge=0)
    submitted_block: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def _check_conclusion(self) -> "Referendum":
        if self.status.is_terminal and self.conclusion_block is None:
            raise ValueError(f"Referendum {self.id} is {self.status.value} but has no conclusion block")
        return self


class PriorLock(BaseModel):
    """Lock left behind by removed votes or ended delegations (PriorLock(block, balance))."""
    unlock_block: int = Field(..., ge=0)
    amount: int = Field(..., ge=0)


class Delegation(BaseModel):
    """Voting::Delegating for one class."""
    target: str
    balance: int = Field(..., ge=0)
    conviction: Conviction = Conviction.NONE
    lock_class: Optional[int] = None
    prior: Optional[PriorLock] = None
