# MIT License
# Copyright (c) 2025 Hashborn

from datetime import datetime
from pydantic import BaseModel, Field
from typing import Dict, List
from .governance import Vote, Referendum, PriorLock, Delegation
from .vesting import VestingSchedule
from .locks import BalanceLock


class ChainHead(BaseModel):
    """Block the report is computed against."""
    number: int = Field(..., ge=0)
    timestamp: datetime


class AccountChainData(BaseModel):
    """Everything the lock engine needs for one account, already decoded."""
    account: str
    current_block: int = Field(..., ge=0)
    votes: List[Vote] = Field(default_factory=list)
    referenda: Dict[int, Referendum] = Field(default_factory=dict)      # referendum id -> info
    priors: Dict[int, PriorLock] = Field(default_factory=dict)          # class id -> prior lock
    delegations: List[Delegation] = Field(default_factory=list)
    vesting: List[VestingSchedule] = Field(default_factory=list)
    balance_locks: List[BalanceLock] = Field(default_factory=list)
    class_locks: Dict[int, int] = Field(default_factory=dict)           # class id -> locked balance
