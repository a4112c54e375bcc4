# MIT License
# Copyright (c) 2025 Hashborn

"""
Offline source reading a JSON snapshot of the relevant storage values.

    {
      "head": {"number": 21000000, "timestamp": "2024-06-01T00:00:00+00:00"},
      "referenda": {"5": {"approved": [1000, null, null]}},
      "accounts": {
        "<address>": {
          "classLocks": [[0, "1000"]],
          "votingFor": {"0": {"casting": {"votes": [...], "prior": [0, 0]}}},
          "vesting": [{"locked": "500", "perBlock": "10", "startingBlock": "0"}],
          "locks": [{"id": "0x7079636f6e766963", "amount": "1000"}]
        }
      }
    }

Values use the same layout as the sidecar storage responses.
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict
from .base import ChainDataSource, assemble_account_data
from ...protocol.types.chain import AccountChainData, ChainHead
from ...protocol.types.common import DataSourceError

logger = logging.getLogger(__name__)


class SnapshotSource(ChainDataSource):

    def __init__(self, data: Dict[str, Any]):
        self.data = data
        self.accounts: Dict[str, Any] = data.get("accounts", {})
        self.referenda: Dict[str, Any] = {str(k): v for k, v in data.get("referenda", {}).items()}

    @classmethod
    def from_file(cls, path: str) -> "SnapshotSource":
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise DataSourceError(f"Failed to load snapshot {path}: {e}") from e
        logger.info(f"Loaded snapshot {path} ({len(data.get('accounts', {}))} accounts)")
        return cls(data)

    def head(self) -> ChainHead:
        raw = self.data.get("head")
        if not raw or "number" not in raw:
            raise DataSourceError("Snapshot has no head block")
        timestamp = raw.get("timestamp") or datetime.now(timezone.utc).isoformat()
        try:
            return ChainHead(number=raw["number"], timestamp=timestamp)
        except ValueError as e:
            raise DataSourceError(f"Malformed snapshot head: {raw!r}") from e

    def fetch_account(self, account: str, head: ChainHead) -> AccountChainData:
        entry = self.accounts.get(account)
        if entry is None:
            # Unknown accounts simply hold no locks
            entry = {}

        voting = {str(k): v for k, v in entry.get("votingFor", {}).items()}

        return assemble_account_data(
            account=account,
            head=head,
            class_locks=entry.get("classLocks"),
            voting_for=lambda class_id: voting.get(str(class_id)),
            referendum_info=lambda ref_id: self.referenda.get(str(ref_id)),
            vesting=entry.get("vesting"),
            balance_locks=entry.get("locks"),
        )
