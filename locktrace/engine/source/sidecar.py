# MIT License
# Copyright (c) 2025 Hashborn

"""
Substrate API Sidecar client.

Reads pallet storage through the sidecar REST API:

    GET /blocks/head/header
    GET /pallets/{pallet}/storage/{item}?keys[]=...&at=...
"""

import logging
import os
import requests
from datetime import datetime, timezone
from typing import Any, List, Optional
from .base import ChainDataSource, assemble_account_data
from .decode import to_int
from ...protocol.types.chain import AccountChainData, ChainHead
from ...protocol.types.common import DataSourceError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_NODE = "http://localhost:8080"


def get_node_url(node: Optional[str] = None) -> str:
    return node or os.environ.get("LOCKTRACE_NODE", DEFAULT_NODE)


class SidecarSource(ChainDataSource):
    """ChainDataSource backed by a Substrate API Sidecar instance."""

    def __init__(self, node_url: str = None, timeout: float = 10.0, session: requests.Session = None):
        self.node_url = get_node_url(node_url).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def _get(self, path: str, params: dict = None) -> Any:
        url = f"{self.node_url}{path}"
        try:
            resp = self.session.get(url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise DataSourceError(f"Connection error for {url}: {e}") from e

        if resp.status_code != 200:
            raise DataSourceError(f"Sidecar returned {resp.status_code} for {url}: {resp.text}")

        try:
            return resp.json()
        except ValueError as e:
            raise DataSourceError(f"Invalid JSON from {url}: {e}") from e

    def storage(self, pallet: str, item: str, keys: List[Any], at: Optional[int] = None) -> Any:
        """Fetch one storage value; None when the entry does not exist."""
        params = {"keys[]": [str(k) for k in keys]}
        if at is not None:
            params["at"] = str(at)
        data = self._get(f"/pallets/{pallet}/storage/{item}", params=params)
        if not isinstance(data, dict):
            raise DataSourceError(f"Unexpected storage response for {pallet}.{item}: {data!r}")
        return data.get("value")

    def head(self) -> ChainHead:
        header = self._get("/blocks/head/header")
        try:
            number = to_int(header["number"])
        except (KeyError, TypeError, ValidationError) as e:
            raise DataSourceError(f"Malformed head header: {header!r}") from e

        # Block timestamps are not part of the header; anchor on the local clock
        head = ChainHead(number=number, timestamp=datetime.now(timezone.utc))
        logger.info(f"Chain head: #{head.number}")
        return head

    def fetch_account(self, account: str, head: ChainHead) -> AccountChainData:
        at = head.number
        logger.debug(f"Fetching lock data for {account} at #{at}")

        return assemble_account_data(
            account=account,
            head=head,
            class_locks=self.storage("convictionVoting", "ClassLocksFor", [account], at),
            voting_for=lambda class_id: self.storage("convictionVoting", "VotingFor", [account, class_id], at),
            referendum_info=lambda ref_id: self.storage("referenda", "ReferendumInfoFor", [ref_id], at),
            vesting=self.storage("vesting", "Vesting", [account], at),
            balance_locks=self.storage("balances", "Locks", [account], at),
        )
