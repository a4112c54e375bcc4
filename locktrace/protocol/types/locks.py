# MIT License
# Copyright (c) 2025 Hashborn

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from .common import Conviction, LockClass


class LockRecord(BaseModel):
    """
    One computed lock.

    unlock_block is None while the lock is indefinite (ongoing referendum
    or active delegation).
    """
    model_config = ConfigDict(frozen=True)

    account: str
    lock_class: LockClass
    amount: int = Field(..., ge=0)
    unlock_block: Optional[int] = None
    source: str                                 # e.g. "referendum:5:aye", "vesting:0"
    referendum_id: Optional[int] = None
    conviction: Optional[Conviction] = None

    @property
    def is_indefinite(self) -> bool:
        return self.unlock_block is None

    def is_active(self, current_block: int) -> bool:
        return self.unlock_block is None or self.unlock_block > current_block


class AggregatedLock(BaseModel):
    """Effective lock of one account for one balance class."""
    model_config = ConfigDict(frozen=True)

    account: str
    lock_class: LockClass
    amount: int = 0
    unlock_block: Optional[int] = None
    active: bool = False
    contributing: List[LockRecord] = Field(default_factory=list)


class BalanceLock(BaseModel):
    """Raw Balances.Locks entry (id like 'pyconvic', 'vesting ', 'staking ')."""
    id: str
    amount: int = Field(..., ge=0)
    reasons: Optional[str] = None
