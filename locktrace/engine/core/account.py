# MIT License
# Copyright (c) 2025 Hashborn

"""
Per-account lock pipeline.

Runs the vote and vesting calculators over one account's chain data,
aggregates the result per class and reports a typed outcome:

- ok:          every vote and schedule produced its records
- degraded:    some records were skipped (arithmetic overflow)
- incomplete:  referendum data missing for at least one vote
- failed:      chain data could not be fetched (set by the runner)
"""

import logging
from pydantic import BaseModel, Field
from typing import Dict, List
from .aggregator import aggregate_account
from .vote_locks import compute_vote_lock, compute_prior_lock, compute_delegation_locks
from .vesting_locks import compute_vesting_lock
from ...protocol.types.chain import AccountChainData
from ...protocol.types.common import (
    LockClass, OutcomeStatus, ReferendumMismatchError, ArithmeticOverflowError
)
from ...protocol.types.locks import LockRecord, AggregatedLock, BalanceLock
from ...protocol.config.params import ChainConfig, CURRENT_NETWORK

logger = logging.getLogger(__name__)


class AccountOutcome(BaseModel):
    account: str
    status: OutcomeStatus = OutcomeStatus.OK
    current_block: int = 0
    records: List[LockRecord] = Field(default_factory=list)
    voting: AggregatedLock
    vesting: AggregatedLock
    issues: List[str] = Field(default_factory=list)
    balance_locks: List[BalanceLock] = Field(default_factory=list)
    class_locks: Dict[int, int] = Field(default_factory=dict)

    @classmethod
    def failed(cls, account: str, reason: str, current_block: int = 0) -> "AccountOutcome":
        return cls(
            account=account,
            status=OutcomeStatus.FAILED,
            current_block=current_block,
            voting=AggregatedLock(account=account, lock_class=LockClass.VOTING),
            vesting=AggregatedLock(account=account, lock_class=LockClass.VESTING),
            issues=[reason],
        )


def _escalate(current: OutcomeStatus, new: OutcomeStatus) -> OutcomeStatus:
    order = [OutcomeStatus.OK, OutcomeStatus.DEGRADED, OutcomeStatus.INCOMPLETE, OutcomeStatus.FAILED]
    return max(current, new, key=order.index)


def collect_lock_records(data: AccountChainData, config: ChainConfig = None):
    """
    Compute every LockRecord for an account.

    Returns:
        (records, status, issues)
    """
    config = config or CURRENT_NETWORK
    account = data.account
    current_block = data.current_block

    records: List[LockRecord] = []
    issues: List[str] = []
    status = OutcomeStatus.OK

    for vote in data.votes:
        referendum = data.referenda.get(vote.referendum_id)
        try:
            if referendum is None:
                raise ReferendumMismatchError(vote.referendum_id)
            records.extend(compute_vote_lock(account, vote, referendum, current_block, config))
        except ReferendumMismatchError as e:
            logger.warning(f"{account}: {e}")
            issues.append(str(e))
            status = _escalate(status, OutcomeStatus.INCOMPLETE)
        except ArithmeticOverflowError as e:
            logger.warning(f"{account}: skipping vote on referendum {vote.referendum_id}: {e}")
            issues.append(str(e))
            status = _escalate(status, OutcomeStatus.DEGRADED)

    for class_id, prior in sorted(data.priors.items()):
        try:
            record = compute_prior_lock(account, prior, f"prior:class:{class_id}")
        except ArithmeticOverflowError as e:
            logger.warning(f"{account}: skipping prior lock of class {class_id}: {e}")
            issues.append(str(e))
            status = _escalate(status, OutcomeStatus.DEGRADED)
            continue
        if record is not None:
            records.append(record)

    for delegation in data.delegations:
        try:
            records.extend(compute_delegation_locks(account, delegation))
        except ArithmeticOverflowError as e:
            logger.warning(f"{account}: skipping delegation to {delegation.target}: {e}")
            issues.append(str(e))
            status = _escalate(status, OutcomeStatus.DEGRADED)

    for index, schedule in enumerate(data.vesting):
        try:
            record = compute_vesting_lock(account, schedule, current_block, index)
        except ArithmeticOverflowError as e:
            logger.warning(f"{account}: skipping vesting schedule {index}: {e}")
            issues.append(str(e))
            status = _escalate(status, OutcomeStatus.DEGRADED)
            continue
        if record is not None:
            records.append(record)

    return records, status, issues


def compute_account_locks(data: AccountChainData, config: ChainConfig = None) -> AccountOutcome:
    """Full pipeline for one account: records -> per-class aggregates -> outcome."""
    records, status, issues = collect_lock_records(data, config)
    aggregates = aggregate_account(data.account, records, data.current_block)

    outcome = AccountOutcome(
        account=data.account,
        status=status,
        current_block=data.current_block,
        records=records,
        voting=aggregates[LockClass.VOTING],
        vesting=aggregates[LockClass.VESTING],
        issues=issues,
        balance_locks=data.balance_locks,
        class_locks=data.class_locks,
    )

    logger.info(
        f"{data.account}: {len(records)} lock record(s), voting {outcome.voting.amount} "
        f"(active={outcome.voting.active}), vesting {outcome.vesting.amount} "
        f"(active={outcome.vesting.active}), status={status.value}"
    )
    return outcome
