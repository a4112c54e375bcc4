# MIT License
# Copyright (c) 2025 Hashborn

"""
Report Runner

Fan-out / fan-in over accounts: the head is read once, then every account
is fetched and computed in its own task. Results are keyed by account, so
completion order does not matter.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, Iterable, List
from .builder import ReportBuilder
from .types import LockReport
from ..core.account import AccountOutcome, compute_account_locks
from ..observability.metrics import record_outcome, record_run
from ..source.base import ChainDataSource
from ...protocol.types.chain import ChainHead
from ...protocol.types.common import DataSourceError
from ...protocol.config.params import ChainConfig, CURRENT_NETWORK

logger = logging.getLogger(__name__)


class ReportRunner:
    """
    Computes lock outcomes for many accounts against one chain head.

    Args:
        source: Chain data source
        config: Chain parameters
        max_workers: Number of concurrent account tasks
    """

    def __init__(self, source: ChainDataSource, config: ChainConfig = None, max_workers: int = 4):
        self.source = source
        self.config = config or CURRENT_NETWORK
        self.max_workers = max(1, max_workers)
        self.builder = ReportBuilder(self.config)

    def run_account(self, account: str, head: ChainHead) -> AccountOutcome:
        """Fetch and compute one account; any failure becomes a failed outcome for that account only."""
        try:
            data = self.source.fetch_account(account, head)
        except DataSourceError as e:
            logger.error(f"{account}: failed to fetch chain data: {e}")
            return AccountOutcome.failed(account, str(e), head.number)
        except Exception as e:
            logger.exception(f"{account}: unexpected error reading chain data: {e}")
            return AccountOutcome.failed(account, f"Unexpected error reading chain data: {e}", head.number)

        try:
            return compute_account_locks(data, self.config)
        except Exception as e:
            logger.exception(f"{account}: lock computation failed: {e}")
            return AccountOutcome.failed(account, f"Lock computation failed: {e}", head.number)

    def compute(self, accounts: Iterable[str], head: ChainHead) -> Dict[str, AccountOutcome]:
        accounts = list(dict.fromkeys(a.strip() for a in accounts if a and a.strip()))
        outcomes: Dict[str, AccountOutcome] = {}

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="locktrace") as executor:
            futures = {executor.submit(self.run_account, account, head): account for account in accounts}
            for future in as_completed(futures):
                outcome = future.result()
                outcomes[futures[future]] = outcome
                record_outcome(outcome)

        return outcomes

    def run(self, accounts: List[str]) -> LockReport:
        """Full run: head -> per-account outcomes -> report."""
        started = time.time()
        head = self.source.head()

        logger.info(f"Processing {len(accounts)} account(s) at #{head.number} with {self.max_workers} worker(s)")
        outcomes = self.compute(accounts, head)
        report = self.builder.build(outcomes.values(), head)

        record_run(head.number, time.time() - started)
        failed = [a.address for a in report.accounts if a.status != "ok"]
        if failed:
            logger.warning(f"{len(failed)} account(s) not fully computed: {', '.join(failed)}")
        return report
