# MIT License
# Copyright (c) 2025 Hashborn

"""
Report Model Builder

Turns AccountOutcomes into the LockReport consumed by renderers.

Unlock times are estimates: the distance in blocks from the head is
converted with the network's fixed block time.
"""

import logging
from datetime import datetime, timedelta, timezone
from decimal import Context, Decimal
from typing import Dict, Iterable, List, Optional, Tuple
from .types import LockDetail, EffectiveLock, LadderRung, ChainLockTotal, AccountReport, LockReport
from ..core.account import AccountOutcome
from ...protocol.types.chain import ChainHead
from ...protocol.types.common import LockClass
from ...protocol.types.locks import LockRecord, AggregatedLock
from ...protocol.config.params import ChainConfig, CURRENT_NETWORK, SECONDS_PER_DAY

logger = logging.getLogger(__name__)

_WIDE = Context(prec=80)

# (label, css class, max days inclusive); ordered shortest first
LOCK_PERIODS: List[Tuple[str, str, Optional[int]]] = [
    ("Locked 0 Days", "locked-0-days", 0),
    ("Locked 1-7 Days", "locked-1-7-days", 7),
    ("Locked 8-14 Days", "locked-8-14-days", 14),
    ("Locked 15-28 Days", "locked-15-28-days", 28),
    ("Locked 29-60 Days", "locked-29-60-days", 60),
    ("Locked 60+ Days", "locked-60-plus-days", None),
]


def categorize_lock_period(unlock_at: Optional[datetime], now: datetime) -> str:
    """Bucket a lock by whole days remaining; indefinite locks land in the last bucket."""
    if unlock_at is None:
        return LOCK_PERIODS[-1][0]

    days = int((unlock_at - now).total_seconds() // SECONDS_PER_DAY)
    for label, _, max_days in LOCK_PERIODS:
        if max_days is None or days <= max_days:
            return label
    return LOCK_PERIODS[-1][0]


class ReportBuilder:
    """
    Assembles the serializable lock report.

    Args:
        config: Chain parameters (decimals, denom, block time)
        block_time_sec: Override for the block time used in estimates
    """

    def __init__(self, config: ChainConfig = None, block_time_sec: int = None):
        self.config = config or CURRENT_NETWORK
        self.block_time_sec = block_time_sec or self.config.block_time_sec

    def format_amount(self, planck: int) -> str:
        decimals = self.config.token_decimals
        # u128 balances need more than the default 28 digits of precision
        return f"{Decimal(planck).scaleb(-decimals, _WIDE):.{decimals}f}"

    def estimate_unlock_time(self, unlock_block: Optional[int], head: ChainHead) -> Optional[datetime]:
        """Estimated wall-clock time of unlock_block; None for indefinite locks."""
        if unlock_block is None:
            return None
        blocks = unlock_block - head.number
        return head.timestamp + timedelta(seconds=blocks * self.block_time_sec)

    def lock_detail(self, record: LockRecord, head: ChainHead) -> LockDetail:
        unlock_at = self.estimate_unlock_time(record.unlock_block, head)
        return LockDetail(
            source=record.source,
            lock_class=record.lock_class.value,
            amount=str(record.amount),
            amount_display=self.format_amount(record.amount),
            unlock_block=record.unlock_block,
            active=record.is_active(head.number),
            estimated_unlock_at=unlock_at,
            lock_period=categorize_lock_period(unlock_at, head.timestamp),
            conviction=int(record.conviction) if record.conviction is not None else None,
        )

    def effective_lock(self, lock: AggregatedLock, head: ChainHead) -> EffectiveLock:
        return EffectiveLock(
            lock_class=lock.lock_class.value,
            amount=str(lock.amount),
            amount_display=self.format_amount(lock.amount),
            unlock_block=lock.unlock_block,
            indefinite=lock.amount > 0 and lock.unlock_block is None,
            active=lock.active,
            estimated_unlock_at=self.estimate_unlock_time(lock.unlock_block, head),
        )

    def liquidity_ladder(self, records: Iterable[LockRecord], head: ChainHead) -> List[LadderRung]:
        """
        Largest voting lock per remaining-period bucket (ties go to the later
        unlock), longest bucket first.
        """
        best: Dict[str, Tuple[int, float]] = {}
        for record in records:
            if record.lock_class != LockClass.VOTING:
                continue
            unlock_at = self.estimate_unlock_time(record.unlock_block, head)
            category = categorize_lock_period(unlock_at, head.timestamp)
            end_key = float("inf") if unlock_at is None else unlock_at.timestamp()

            current = best.get(category)
            if current is None or (record.amount, end_key) > current:
                best[category] = (record.amount, end_key)

        rungs = []
        for label, css_class, _ in reversed(LOCK_PERIODS):
            if label in best:
                rungs.append(LadderRung(
                    lock_category=label,
                    amount=self.format_amount(best[label][0]),
                    css_class=css_class,
                ))
            else:
                rungs.append(LadderRung(lock_category=label))
        return rungs

    def build_account(self, outcome: AccountOutcome, head: ChainHead) -> AccountReport:
        return AccountReport(
            address=outcome.account,
            status=outcome.status.value,
            issues=list(outcome.issues),
            voting=self.effective_lock(outcome.voting, head),
            vesting=self.effective_lock(outcome.vesting, head),
            locks=[self.lock_detail(r, head) for r in outcome.records],
            liquidity=self.liquidity_ladder(outcome.records, head),
            chain_locks=[
                ChainLockTotal(id=lock.id, amount=str(lock.amount), amount_display=self.format_amount(lock.amount))
                for lock in outcome.balance_locks
            ],
        )

    def build(self, outcomes: Iterable[AccountOutcome], head: ChainHead,
              generated_at: datetime = None) -> LockReport:
        """Report over all outcomes, accounts sorted by address."""
        accounts = [self.build_account(o, head) for o in sorted(outcomes, key=lambda o: o.account)]
        report = LockReport(
            generated_at=generated_at or datetime.now(timezone.utc),
            network=self.config.network_id,
            denom=self.config.denom,
            current_block=head.number,
            block_time_sec=self.block_time_sec,
            accounts=accounts,
        )
        logger.info(f"Built report for {len(accounts)} account(s) at #{head.number}")
        return report
