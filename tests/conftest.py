# MIT License
# Copyright (c) 2025 Hashborn

import pytest
from datetime import datetime, timezone
from locktrace.protocol.config.params import ChainConfig
from locktrace.protocol.types.chain import ChainHead

ALICE = "15oF4uVJwmo4TdGW7VfQxNLavjCXviqxT9S1MgbjMNHr6Sp5"
BOB = "14E5nqKAp3oAJcmzgZhUD2RcptBeUBScxKHgJKU4HPNcKVf3"


@pytest.fixture
def test_config():
    """Network with a 100-block vote locking period."""
    return ChainConfig(
        network_id="testnet",
        denom="UNIT",
        token_decimals=10,
        block_time_sec=6,
        vote_locking_period_blocks=100,
    )


@pytest.fixture
def head():
    return ChainHead(number=1000, timestamp=datetime(2024, 1, 1, tzinfo=timezone.utc))


@pytest.fixture
def snapshot_data():
    """Snapshot in sidecar storage layout: ALICE votes and vests, BOB delegates."""
    return {
        "head": {"number": 1100, "timestamp": "2024-01-01T00:00:00+00:00"},
        "referenda": {
            "5": {"approved": ["1000", {"who": "x", "amount": "0"}, None]},
            "6": {"ongoing": {"track": 0, "submitted": "900"}},
            "7": {"cancelled": ["1050", None, None]},
        },
        "accounts": {
            ALICE: {
                "classLocks": [["0", "1000"], ["2", "300"]],
                "votingFor": {
                    "0": {"casting": {
                        "votes": [
                            ["5", {"standard": {"vote": "0x82", "balance": "1000"}}],
                            ["6", {"split": {"aye": "400", "nay": "0"}}],
                        ],
                        "delegations": {"votes": "0", "capital": "0"},
                        "prior": ["0", "0"],
                    }},
                    "2": {"casting": {
                        "votes": [
                            ["7", {"standard": {"vote": "0x86", "balance": "300"}}],
                        ],
                        "prior": ["5000", "250"],
                    }},
                },
                "vesting": [{"locked": "500", "perBlock": "1", "startingBlock": "1000"}],
                "locks": [
                    {"id": "0x7079636f6e766963", "amount": "1000", "reasons": "All"},
                    {"id": "0x76657374696e6720", "amount": "400", "reasons": "Misc"},
                ],
            },
            BOB: {
                "classLocks": [["1", "800"]],
                "votingFor": {
                    "1": {"delegating": {
                        "balance": "800",
                        "target": ALICE,
                        "conviction": "Locked3x",
                        "delegations": {"votes": "0", "capital": "0"},
                        "prior": ["0", "0"],
                    }},
                },
            },
        },
    }
