# MIT License
# Copyright (c) 2025 Hashborn

"""
Conviction Resolver

Maps a conviction level and vote type to the number of vote locking periods
a balance stays locked after the referendum concludes.

    None      -> 0 periods
    Locked1x  -> 1
    Locked2x  -> 2
    ...
    Locked6x  -> 32

Abstain legs never extend the lock.
"""

from dataclasses import dataclass
from ...protocol.types.common import Conviction, VoteType
from ...protocol.config.params import ChainConfig, CURRENT_NETWORK


@dataclass(frozen=True)
class ConvictionMultiplier:
    lock_periods: int       # Number of vote locking periods
    period_blocks: int      # Length of one period in blocks

    @property
    def duration(self) -> int:
        """Extra lock in blocks past the conclusion block."""
        return self.lock_periods * self.period_blocks


def lock_periods(conviction: Conviction) -> int:
    """Doubling per level above None; None locks for zero extra periods."""
    if conviction == Conviction.NONE:
        return 0
    if not Conviction.LOCKED_1X <= conviction <= Conviction.LOCKED_6X:
        raise ValueError(f"Unknown conviction value: {conviction}")
    return 1 << (int(conviction) - 1)


def resolve(conviction: Conviction, vote_type: VoteType, config: ChainConfig = None) -> ConvictionMultiplier:
    config = config or CURRENT_NETWORK
    period = config.vote_locking_period_blocks

    if vote_type == VoteType.ABSTAIN:
        return ConvictionMultiplier(lock_periods=0, period_blocks=period)

    return ConvictionMultiplier(lock_periods=lock_periods(Conviction(conviction)), period_blocks=period)
