# MIT License
# Copyright (c) 2025 Hashborn

"""
Report Model Builder and runner tests
"""

import pytest
from datetime import datetime, timedelta, timezone
from locktrace.engine.core.account import AccountOutcome
from locktrace.engine.report.builder import ReportBuilder, categorize_lock_period, LOCK_PERIODS
from locktrace.engine.report.runner import ReportRunner
from locktrace.engine.source.snapshot import SnapshotSource
from locktrace.protocol.types.common import DataSourceError, LockClass, OutcomeStatus
from locktrace.protocol.types.locks import LockRecord

from conftest import ALICE, BOB

NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def voting_record(amount, unlock_block, source="referendum:1:aye"):
    return LockRecord(account=ALICE, lock_class=LockClass.VOTING, amount=amount,
                      unlock_block=unlock_block, source=source)


# ═══════════════════════════════════════════════════════════════════
# BUILDER
# ═══════════════════════════════════════════════════════════════════

def test_estimate_unlock_time(test_config, head):
    builder = ReportBuilder(test_config)

    assert builder.estimate_unlock_time(1100, head) == head.timestamp + timedelta(seconds=600)
    assert builder.estimate_unlock_time(900, head) == head.timestamp - timedelta(seconds=600)
    assert builder.estimate_unlock_time(None, head) is None

    slow = ReportBuilder(test_config, block_time_sec=12)
    assert slow.estimate_unlock_time(1100, head) == head.timestamp + timedelta(seconds=1200)


@pytest.mark.parametrize("delta,label", [
    (timedelta(hours=23), "Locked 0 Days"),
    (timedelta(days=-3), "Locked 0 Days"),
    (timedelta(days=1), "Locked 1-7 Days"),
    (timedelta(days=7, hours=23), "Locked 1-7 Days"),
    (timedelta(days=8), "Locked 8-14 Days"),
    (timedelta(days=28), "Locked 15-28 Days"),
    (timedelta(days=60), "Locked 29-60 Days"),
    (timedelta(days=61), "Locked 60+ Days"),
])
def test_categorize_lock_period(delta, label):
    assert categorize_lock_period(NOW + delta, NOW) == label


def test_indefinite_lock_is_longest_period():
    assert categorize_lock_period(None, NOW) == "Locked 60+ Days"


def test_format_amount(test_config):
    builder = ReportBuilder(test_config)

    assert builder.format_amount(0) == "0.0000000000"
    assert builder.format_amount(10_000_000_000) == "1.0000000000"
    assert builder.format_amount(1000) == "0.0000001000"
    # Full u128 range keeps every digit
    assert builder.format_amount(2**128 - 1) == "34028236692093846346337460743.1768211455"


def test_liquidity_ladder(test_config, head):
    builder = ReportBuilder(test_config)
    day = 86400 // test_config.block_time_sec

    records = [
        voting_record(100, head.number + 2 * day),
        voting_record(300, head.number + 3 * day),      # larger in the same bucket
        voting_record(50, None, "delegation:class:0:x"),
        voting_record(70, head.number + 90 * day),
        LockRecord(account=ALICE, lock_class=LockClass.VESTING, amount=10**9,
                   unlock_block=head.number + 10 * day, source="vesting:0"),
    ]
    rungs = builder.liquidity_ladder(records, head)

    assert [r.lock_category for r in rungs] == [label for label, _, _ in reversed(LOCK_PERIODS)]
    by_label = {r.lock_category: r for r in rungs}

    # Indefinite 50 and 70 at 90 days share the 60+ bucket
    assert by_label["Locked 60+ Days"].amount == builder.format_amount(70)
    assert by_label["Locked 60+ Days"].css_class == "locked-60-plus-days"
    assert by_label["Locked 1-7 Days"].amount == builder.format_amount(300)
    # Vesting does not enter the ladder
    assert by_label["Locked 8-14 Days"].amount == "none"
    assert by_label["Locked 8-14 Days"].css_class == "none"


def test_build_report_from_snapshot(test_config, snapshot_data):
    source = SnapshotSource(snapshot_data)
    head = source.head()
    runner = ReportRunner(source, test_config, max_workers=2)
    outcomes = runner.compute([ALICE, BOB], head)

    generated_at = datetime(2024, 1, 2, tzinfo=timezone.utc)
    report = ReportBuilder(test_config).build(outcomes.values(), head, generated_at=generated_at)

    assert report.generated_at == generated_at
    assert report.network == "testnet"
    assert report.denom == "UNIT"
    assert report.current_block == 1100
    assert report.complete

    # Sorted by address
    assert [a.address for a in report.accounts] == sorted([ALICE, BOB])
    alice = next(a for a in report.accounts if a.address == ALICE)

    assert alice.voting.amount == "1000"
    assert alice.voting.unlock_block == 1200
    assert alice.voting.active
    assert not alice.voting.indefinite
    assert alice.voting.estimated_unlock_at == head.timestamp + timedelta(seconds=600)

    assert alice.vesting.amount == "400"
    assert alice.vesting.unlock_block == 1500

    details = {d.source: d for d in alice.locks}
    assert details["referendum:7:aye"].active is False
    assert details["referendum:6:aye"].unlock_block is None
    assert details["referendum:6:aye"].lock_period == "Locked 60+ Days"
    assert details["referendum:5:aye"].conviction == 2
    assert details["prior:class:2"].amount == "250"

    assert [c.id for c in alice.chain_locks] == ["pyconvic", "vesting "]
    assert alice.liquidity[0].amount == ReportBuilder(test_config).format_amount(400)

    bob = next(a for a in report.accounts if a.address == BOB)
    assert bob.voting.amount == "800"
    assert bob.voting.indefinite
    assert bob.voting.estimated_unlock_at is None
    assert bob.vesting.amount == "0"
    assert bob.vesting.active is False


# ═══════════════════════════════════════════════════════════════════
# RUNNER
# ═══════════════════════════════════════════════════════════════════

class FlakySource(SnapshotSource):
    """Snapshot source that fails for selected accounts."""

    def __init__(self, data, failing):
        super().__init__(data)
        self.failing = set(failing)

    def fetch_account(self, account, head):
        if account in self.failing:
            raise DataSourceError(f"timeout fetching {account}")
        return super().fetch_account(account, head)


def test_runner_marks_failed_accounts(test_config, snapshot_data):
    runner = ReportRunner(FlakySource(snapshot_data, failing=[BOB]), test_config, max_workers=4)
    report = runner.run([ALICE, BOB])

    assert not report.complete
    statuses = {a.address: a.status for a in report.accounts}
    assert statuses == {ALICE: "ok", BOB: "failed"}

    bob = next(a for a in report.accounts if a.address == BOB)
    assert "timeout" in bob.issues[0]
    assert bob.voting.amount == "0"


def test_runner_deduplicates_accounts(test_config, snapshot_data):
    runner = ReportRunner(SnapshotSource(snapshot_data), test_config)
    head = runner.source.head()
    outcomes = runner.compute([ALICE, f" {ALICE} ", "", BOB], head)

    assert sorted(outcomes) == sorted([ALICE, BOB])
    assert all(isinstance(o, AccountOutcome) for o in outcomes.values())


def test_runner_incomplete_account(test_config, snapshot_data):
    del snapshot_data["referenda"]["5"]
    report = ReportRunner(SnapshotSource(snapshot_data), test_config).run([ALICE])

    alice = report.accounts[0]
    assert alice.status == OutcomeStatus.INCOMPLETE.value
    assert any("5" in issue for issue in alice.issues)
    # The ongoing split vote still holds the voting class
    assert alice.voting.amount == "400"
    assert alice.voting.indefinite


def test_runner_head_failure_propagates(test_config):
    with pytest.raises(DataSourceError):
        ReportRunner(SnapshotSource({"accounts": {}}), test_config).run([ALICE])


def test_malformed_account_does_not_abort_run(test_config, snapshot_data):
    # Casting payload shaped as a list instead of an object
    snapshot_data["accounts"][BOB]["votingFor"]["1"] = {"casting": [["5", "x"]]}
    report = ReportRunner(SnapshotSource(snapshot_data), test_config).run([ALICE, BOB])

    statuses = {a.address: a.status for a in report.accounts}
    assert statuses == {ALICE: "ok", BOB: "failed"}

    alice = next(a for a in report.accounts if a.address == ALICE)
    assert alice.voting.amount == "1000"


class BrokenSource(SnapshotSource):
    """Source raising a non-DataSourceError for one account."""

    def fetch_account(self, account, head):
        if account == BOB:
            raise RuntimeError("decoder bug")
        return super().fetch_account(account, head)


def test_unexpected_source_error_fails_one_account(test_config, snapshot_data):
    report = ReportRunner(BrokenSource(snapshot_data), test_config).run([ALICE, BOB])

    bob = next(a for a in report.accounts if a.address == BOB)
    assert bob.status == "failed"
    assert "decoder bug" in bob.issues[0]
    assert next(a for a in report.accounts if a.address == ALICE).status == "ok"
