# MIT License
# Copyright (c) 2025 Hashborn

"""
Vote Lock Calculator

Turns cast votes into LockRecords:

    unlock_block = referendum.conclusion_block + conviction duration

- Ongoing referendum  -> unlock_block None (locked until it concludes)
- Cancelled / TimedOut / Killed -> no conviction extension
- Split / SplitAbstain -> one record per non-zero leg, abstain legs unextended
"""

import logging
from typing import List, Optional
from .conviction import resolve
from ...protocol.types.common import (
    Conviction, LockClass, VoteType, ReferendumMismatchError, ArithmeticOverflowError
)
from ...protocol.types.governance import Vote, Referendum, PriorLock, Delegation
from ...protocol.types.locks import LockRecord
from ...protocol.config.params import ChainConfig, CURRENT_NETWORK, MAX_BALANCE, MAX_BLOCK_NUMBER

logger = logging.getLogger(__name__)


def _checked_block(block: int, context: str) -> int:
    if block > MAX_BLOCK_NUMBER:
        raise ArithmeticOverflowError(f"Unlock block {block} overflows u32 ({context})")
    return block


def _checked_balance(amount: int, context: str) -> int:
    if amount > MAX_BALANCE:
        raise ArithmeticOverflowError(f"Balance {amount} overflows u128 ({context})")
    return amount


def unlock_block_for(vote_type: VoteType, conviction: Conviction, referendum: Referendum,
                     config: ChainConfig = None) -> Optional[int]:
    """Unlock block for one vote leg, or None while the referendum is ongoing."""
    if not referendum.status.is_terminal:
        return None

    if referendum.status.is_enacting:
        extension = resolve(conviction, vote_type, config).duration
    else:
        # Votes on non-enacted referenda are released at the decision point
        extension = 0

    return _checked_block(referendum.conclusion_block + extension, f"referendum {referendum.id}")


def compute_vote_lock(account: str, vote: Vote, referendum: Referendum, current_block: int,
                      config: ChainConfig = None) -> List[LockRecord]:
    """
    Compute the lock records for a single vote.

    Args:
        account: Voting account
        vote: The cast vote
        referendum: Referendum the vote was cast on
        current_block: Current chain head (only used for logging; the
            active/expired split happens in the aggregator)
        config: Chain parameters (defaults to CURRENT_NETWORK)

    Returns:
        One LockRecord per non-zero balance leg

    Raises:
        ReferendumMismatchError: If the referendum is not the one voted on
        ArithmeticOverflowError: If a balance exceeds u128 or the unlock block u32
    """
    config = config or CURRENT_NETWORK

    if vote.referendum_id != referendum.id:
        raise ReferendumMismatchError(
            vote.referendum_id,
            f"Vote on referendum {vote.referendum_id} paired with referendum {referendum.id}"
        )

    records = []
    for label, leg_type, amount in vote.components():
        if amount == 0:
            continue

        _checked_balance(amount, f"referendum {referendum.id}")
        unlock_block = unlock_block_for(leg_type, vote.conviction, referendum, config)
        records.append(LockRecord(
            account=account,
            lock_class=LockClass.VOTING,
            amount=amount,
            unlock_block=unlock_block,
            source=f"referendum:{referendum.id}:{label}",
            referendum_id=referendum.id,
            conviction=Conviction.NONE if leg_type == VoteType.ABSTAIN else vote.conviction,
        ))

    logger.debug(
        f"{account}: referendum {referendum.id} ({referendum.status.value}) -> "
        f"{len(records)} record(s) at head {current_block}"
    )
    return records


def compute_prior_lock(account: str, prior: PriorLock, source: str) -> Optional[LockRecord]:
    """Lock carried over from removed votes; nothing when the prior balance is zero."""
    if prior.amount == 0:
        return None

    return LockRecord(
        account=account,
        lock_class=LockClass.VOTING,
        amount=_checked_balance(prior.amount, source),
        unlock_block=_checked_block(prior.unlock_block, source),
        source=source,
    )


def compute_delegation_locks(account: str, delegation: Delegation) -> List[LockRecord]:
    """
    Delegated balance stays locked for as long as the delegation exists,
    plus whatever prior lock the class still carries.
    """
    class_label = delegation.lock_class if delegation.lock_class is not None else "?"
    records = []

    if delegation.balance > 0:
        records.append(LockRecord(
            account=account,
            lock_class=LockClass.VOTING,
            amount=_checked_balance(delegation.balance, f"delegation to {delegation.target}"),
            unlock_block=None,
            source=f"delegation:class:{class_label}:{delegation.target}",
            conviction=delegation.conviction,
        ))

    if delegation.prior is not None:
        prior = compute_prior_lock(account, delegation.prior, f"prior:class:{class_label}")
        if prior is not None:
            records.append(prior)

    return records
