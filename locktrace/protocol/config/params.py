# MIT License
# Copyright (c) 2025 Hashborn

import os
from typing import Dict

# Native integer widths of the relay chain runtimes
BALANCE_BITS = 128
BLOCK_NUMBER_BITS = 32
MAX_BALANCE = (1 << BALANCE_BITS) - 1
MAX_BLOCK_NUMBER = (1 << BLOCK_NUMBER_BITS) - 1

SECONDS_PER_DAY = 24 * 60 * 60

class ChainConfig:
    def __init__(self,
                 network_id: str,
                 denom: str,
                 token_decimals: int,
                 block_time_sec: int = 6,
                 # Conviction voting params
                 vote_locking_period_blocks: int = 403_200):  # 28 days @ 6s
        self.network_id = network_id
        self.denom = denom
        self.token_decimals = token_decimals
        self.block_time_sec = block_time_sec
        self.vote_locking_period_blocks = vote_locking_period_blocks

    def __repr__(self) -> str:
        return f"ChainConfig(network_id={self.network_id!r})"

NETWORKS: Dict[str, ChainConfig] = {
    "polkadot": ChainConfig(
        network_id="polkadot",
        denom="DOT",
        token_decimals=10,
        vote_locking_period_blocks=28 * SECONDS_PER_DAY // 6,   # 403200
    ),
    "kusama": ChainConfig(
        network_id="kusama",
        denom="KSM",
        token_decimals=12,
        vote_locking_period_blocks=7 * SECONDS_PER_DAY // 6,    # 100800
    ),
    "westend": ChainConfig(
        network_id="westend",
        denom="WND",
        token_decimals=12,
        vote_locking_period_blocks=7 * SECONDS_PER_DAY // 6,
    ),
}

DEFAULT_NETWORK = "polkadot"

def get_network(network_id: str = None) -> ChainConfig:
    """Resolve a network by id, falling back to $LOCKTRACE_NETWORK, then polkadot."""
    name = network_id or os.environ.get("LOCKTRACE_NETWORK", DEFAULT_NETWORK)
    try:
        return NETWORKS[name]
    except KeyError:
        raise ValueError(f"Unknown network '{name}'. Known: {', '.join(sorted(NETWORKS))}")

CURRENT_NETWORK = NETWORKS[DEFAULT_NETWORK]
