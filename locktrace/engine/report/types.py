# MIT License
# Copyright (c) 2025 Hashborn

"""
Report Data Structures

Amounts are carried as decimal strings in planck (the chain's native unit)
so 128-bit balances survive JSON consumers; *_display fields hold the
token-denominated value.
"""

from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime


class LockDetail(BaseModel):
    """One contributing LockRecord, as shown in the detailed data table."""
    source: str = Field(..., description="Origin of the lock (referendum:5:aye, vesting:0, ...)")
    lock_class: str = Field(..., description="voting or vesting")
    amount: str = Field(..., description="Locked amount in planck")
    amount_display: str = Field(..., description="Locked amount in tokens")
    unlock_block: Optional[int] = Field(default=None, description="Unlock block (None = indefinite)")
    active: bool = Field(..., description="Still locked at the report's head block")
    estimated_unlock_at: Optional[datetime] = Field(default=None, description="Estimated wall-clock unlock time")
    lock_period: str = Field(..., description="Remaining lock period category")
    conviction: Optional[int] = Field(default=None, description="Conviction level (votes only)")


class EffectiveLock(BaseModel):
    """Aggregated lock for one balance class."""
    lock_class: str
    amount: str = "0"
    amount_display: str = "0"
    unlock_block: Optional[int] = None
    indefinite: bool = False
    active: bool = False
    estimated_unlock_at: Optional[datetime] = None


class LadderRung(BaseModel):
    """One row of the liquidity ladder (largest lock per remaining-period bucket)."""
    lock_category: str
    amount: str = Field(default="none", description="Token amount, or 'none' for an empty bucket")
    css_class: str = "none"


class ChainLockTotal(BaseModel):
    """Raw Balances.Locks entry, for cross-reference with the computed locks."""
    id: str
    amount: str
    amount_display: str


class AccountReport(BaseModel):
    address: str
    status: str = Field(..., description="ok / degraded / incomplete / failed")
    issues: List[str] = Field(default_factory=list)
    voting: EffectiveLock
    vesting: EffectiveLock
    locks: List[LockDetail] = Field(default_factory=list)
    liquidity: List[LadderRung] = Field(default_factory=list)
    chain_locks: List[ChainLockTotal] = Field(default_factory=list)


class LockReport(BaseModel):
    generated_at: datetime
    network: str
    denom: str
    current_block: int
    block_time_sec: int
    accounts: List[AccountReport] = Field(default_factory=list)

    @property
    def complete(self) -> bool:
        return all(a.status == "ok" for a in self.accounts)
