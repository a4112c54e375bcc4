# MIT License
# Copyright (c) 2025 Hashborn

"""
Lock Aggregator

Reduces an account's LockRecords to one effective lock per balance class.

- Voting: the chain enforces the single most restrictive lock, not a sum.
  Amount = max amount; unlock = max unlock among the records holding that
  amount (an indefinite record beats any finite block).
- Vesting: pallet_vesting holds one lock covering every schedule, so the
  remaining amounts add up; unlock = the latest schedule end.

active = indefinite or unlock_block > current_block
"""

from typing import Dict, Iterable, List, Optional
from ...protocol.types.common import LockClass, ProtocolError
from ...protocol.types.locks import LockRecord, AggregatedLock

_INDEFINITE = float("inf")


def _unlock_key(unlock_block: Optional[int]) -> float:
    return _INDEFINITE if unlock_block is None else unlock_block


def _latest_unlock(records: Iterable[LockRecord]) -> Optional[int]:
    return max((r.unlock_block for r in records), key=_unlock_key)


def is_active(unlock_block: Optional[int], current_block: int) -> bool:
    return unlock_block is None or unlock_block > current_block


def aggregate(account: str, records: Iterable[LockRecord], current_block: int,
              lock_class: LockClass = None) -> AggregatedLock:
    """
    Fold records of one class into the account's effective lock.

    Args:
        account: Account the records belong to
        records: LockRecords of a single class
        current_block: Current chain head
        lock_class: Class of the records; inferred from them when omitted
            (defaults to VOTING for an empty set)

    Returns:
        AggregatedLock (zero amount and inactive for an empty set)
    """
    records = list(records)

    classes = {r.lock_class for r in records}
    if len(classes) > 1:
        raise ProtocolError(f"Cannot aggregate mixed lock classes: {sorted(c.value for c in classes)}")
    if lock_class is None:
        lock_class = classes.pop() if classes else LockClass.VOTING
    elif classes and classes != {lock_class}:
        raise ProtocolError(f"Records are not of class {lock_class.value}")

    if not records:
        return AggregatedLock(account=account, lock_class=lock_class)

    if lock_class == LockClass.VESTING:
        amount = sum(r.amount for r in records)
        contributing = records
    else:
        amount = max(r.amount for r in records)
        contributing = [r for r in records if r.amount == amount]

    unlock_block = _latest_unlock(contributing)

    return AggregatedLock(
        account=account,
        lock_class=lock_class,
        amount=amount,
        unlock_block=unlock_block,
        active=amount > 0 and is_active(unlock_block, current_block),
        contributing=contributing,
    )


def aggregate_account(account: str, records: Iterable[LockRecord],
                      current_block: int) -> Dict[LockClass, AggregatedLock]:
    """Partition records by class and aggregate each; always returns both classes."""
    by_class: Dict[LockClass, List[LockRecord]] = {c: [] for c in LockClass}
    for record in records:
        by_class[record.lock_class].append(record)

    return {
        lock_class: aggregate(account, class_records, current_block, lock_class)
        for lock_class, class_records in by_class.items()
    }
