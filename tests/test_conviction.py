# MIT License
# Copyright (c) 2025 Hashborn

"""
Conviction Resolver tests

- Durations grow geometrically (doubling per level)
- None conviction and abstain legs add no lock
- Unknown levels are rejected
"""

import pytest
from locktrace.engine.core.conviction import resolve, lock_periods, ConvictionMultiplier
from locktrace.protocol.types.common import Conviction, VoteType
from locktrace.protocol.config.params import NETWORKS

LOCKED_LEVELS = [
    Conviction.LOCKED_1X, Conviction.LOCKED_2X, Conviction.LOCKED_3X,
    Conviction.LOCKED_4X, Conviction.LOCKED_5X, Conviction.LOCKED_6X,
]


def test_lock_periods_table():
    assert [lock_periods(c) for c in Conviction] == [0, 1, 2, 4, 8, 16, 32]


def test_durations_monotonic_and_doubling(test_config):
    durations = [resolve(c, VoteType.STANDARD, test_config).duration for c in LOCKED_LEVELS]

    assert durations == [100, 200, 400, 800, 1600, 3200]
    for lower, higher in zip(durations, durations[1:]):
        assert higher > lower
        assert higher == 2 * lower


def test_none_conviction_adds_no_lock(test_config):
    multiplier = resolve(Conviction.NONE, VoteType.STANDARD, test_config)
    assert multiplier == ConvictionMultiplier(lock_periods=0, period_blocks=100)
    assert multiplier.duration == 0


@pytest.mark.parametrize("conviction", list(Conviction))
def test_abstain_never_extends(test_config, conviction):
    assert resolve(conviction, VoteType.ABSTAIN, test_config).duration == 0


@pytest.mark.parametrize("vote_type", [VoteType.SPLIT, VoteType.SPLIT_ABSTAIN])
def test_split_legs_follow_standard_schedule(test_config, vote_type):
    for conviction in LOCKED_LEVELS:
        assert resolve(conviction, vote_type, test_config).duration == \
            resolve(conviction, VoteType.STANDARD, test_config).duration


def test_network_periods():
    """Polkadot locks for 28 days per period, Kusama for 7 (6s blocks)."""
    assert resolve(Conviction.LOCKED_1X, VoteType.STANDARD, NETWORKS["polkadot"]).duration == 403_200
    assert resolve(Conviction.LOCKED_1X, VoteType.STANDARD, NETWORKS["kusama"]).duration == 100_800
    assert resolve(Conviction.LOCKED_6X, VoteType.STANDARD).duration == 32 * 403_200


def test_unknown_conviction_rejected(test_config):
    with pytest.raises(ValueError):
        resolve(7, VoteType.STANDARD, test_config)
    with pytest.raises(ValueError):
        lock_periods(9)


def test_conviction_from_vote_byte():
    assert Conviction.from_vote_byte(0x82) == Conviction.LOCKED_2X
    assert Conviction.from_vote_byte(0x00) == Conviction.NONE
    assert Conviction.from_vote_byte(0x06) == Conviction.LOCKED_6X

    with pytest.raises(ValueError):
        Conviction.from_vote_byte(0x87)
