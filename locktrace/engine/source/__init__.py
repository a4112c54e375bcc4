# MIT License
# Copyright (c) 2025 Hashborn

"""
Chain Data Sources

Read-only access to the conviction voting, referenda, vesting and balances
pallets, returning decoded AccountChainData for the lock engine.
"""

from .base import ChainDataSource
from .sidecar import SidecarSource
from .snapshot import SnapshotSource

__all__ = ["ChainDataSource", "SidecarSource", "SnapshotSource"]
