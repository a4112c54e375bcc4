# MIT License
# Copyright (c) 2025 Hashborn

"""
Vesting Lock Calculator

Linear vesting as implemented by pallet_vesting:

    elapsed   = max(0, current_block - starting_block)
    unlocked  = min(elapsed * per_block, locked)
    remaining = locked - unlocked

The remaining balance stays locked until starting_block + ceil(locked / per_block).
"""

import logging
from typing import Optional
from ...protocol.types.common import LockClass, ArithmeticOverflowError
from ...protocol.types.vesting import VestingSchedule
from ...protocol.types.locks import LockRecord
from ...protocol.config.params import MAX_BALANCE, MAX_BLOCK_NUMBER

logger = logging.getLogger(__name__)


def vested_amount(schedule: VestingSchedule, current_block: int) -> int:
    """Amount already released at current_block, capped at the schedule's total."""
    elapsed = max(0, current_block - schedule.starting_block)
    unlocked = elapsed * schedule.per_block
    if unlocked > MAX_BALANCE:
        # Saturates on chain; anything this large is fully vested anyway
        return schedule.locked
    return min(unlocked, schedule.locked)


def remaining_locked(schedule: VestingSchedule, current_block: int) -> int:
    return max(0, schedule.locked - vested_amount(schedule, current_block))


def vesting_end_block(schedule: VestingSchedule) -> int:
    """First block at which the whole schedule is released (ceiling division)."""
    duration = -(-schedule.locked // schedule.per_block)
    end_block = schedule.starting_block + duration
    if end_block > MAX_BLOCK_NUMBER:
        raise ArithmeticOverflowError(
            f"Vesting end block {end_block} overflows u32 (start {schedule.starting_block}, "
            f"locked {schedule.locked}, per_block {schedule.per_block})"
        )
    return end_block


def compute_vesting_lock(account: str, schedule: VestingSchedule, current_block: int,
                         index: int = 0) -> Optional[LockRecord]:
    """
    Compute the lock still held by a vesting schedule.

    Args:
        account: Account owning the schedule
        schedule: Vesting schedule
        current_block: Current chain head
        index: Position of the schedule in the account's vesting list

    Returns:
        LockRecord for the remaining balance, or None when fully vested

    Raises:
        ArithmeticOverflowError: If balances or the end block exceed the chain's widths
    """
    if schedule.locked > MAX_BALANCE:
        raise ArithmeticOverflowError(f"Vesting amount {schedule.locked} overflows u128")

    remaining = remaining_locked(schedule, current_block)
    if remaining == 0:
        logger.debug(f"{account}: vesting schedule {index} fully vested")
        return None

    return LockRecord(
        account=account,
        lock_class=LockClass.VESTING,
        amount=remaining,
        unlock_block=vesting_end_block(schedule),
        source=f"vesting:{index}",
    )
