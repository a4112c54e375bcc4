# MIT License
# Copyright (c) 2025 Hashborn

"""
Prometheus Metrics Exporter

Metrics:
- Accounts processed per outcome status
- Lock records computed per class
- Report run duration
- Chain head the last report was computed at
"""

from prometheus_client import Counter, Gauge, Histogram, CollectorRegistry

# Create registry for metrics
metrics_registry = CollectorRegistry()

# ═══════════════════════════════════════════════════════════════════
# REPORT METRICS
# ═══════════════════════════════════════════════════════════════════

accounts_processed_total = Counter(
    'locktrace_accounts_processed_total',
    'Accounts processed, by outcome status',
    ['status'],
    registry=metrics_registry
)

lock_records_total = Counter(
    'locktrace_lock_records_total',
    'Lock records computed, by lock class',
    ['lock_class'],
    registry=metrics_registry
)

active_locks_total = Counter(
    'locktrace_active_locks_total',
    'Aggregated locks still active at the report head, by lock class',
    ['lock_class'],
    registry=metrics_registry
)

report_duration_seconds = Histogram(
    'locktrace_report_duration_seconds',
    'Wall time of a report run',
    buckets=[0.1, 0.5, 1, 5, 10, 30, 60, 120],
    registry=metrics_registry
)

chain_head_block = Gauge(
    'locktrace_chain_head_block',
    'Head block of the last report run',
    registry=metrics_registry
)


# ═══════════════════════════════════════════════════════════════════
# HELPER FUNCTIONS
# ═══════════════════════════════════════════════════════════════════

def record_outcome(outcome):
    """
    Update counters for one account outcome.

    Args:
        outcome: AccountOutcome
    """
    accounts_processed_total.labels(status=outcome.status.value).inc()

    for record in outcome.records:
        lock_records_total.labels(lock_class=record.lock_class.value).inc()

    for lock in (outcome.voting, outcome.vesting):
        if lock.active:
            active_locks_total.labels(lock_class=lock.lock_class.value).inc()


def record_run(head_number: int, duration: float):
    """
    Update run-level metrics.

    Args:
        head_number: Head block the report was computed at
        duration: Run wall time in seconds
    """
    chain_head_block.set(head_number)
    report_duration_seconds.observe(duration)
