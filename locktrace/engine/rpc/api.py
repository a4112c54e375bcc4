# MIT License
# Copyright (c) 2025 Hashborn

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import Response
from typing import Optional
import logging
from ..report.runner import ReportRunner
from ..source.base import ChainDataSource
from ...protocol.config.params import ChainConfig, CURRENT_NETWORK
from ...protocol.types.common import DataSourceError

logger = logging.getLogger(__name__)

app = FastAPI(title="locktrace report service")

# Injected by the CLI before the server starts
source: Optional[ChainDataSource] = None
config: ChainConfig = CURRENT_NETWORK
max_workers: int = 4

MAX_ADDRESSES = 100


def _runner() -> ReportRunner:
    if not source:
        raise HTTPException(status_code=503, detail="Chain data source not configured")
    return ReportRunner(source, config, max_workers=max_workers)


@app.get("/")
async def root():
    return {"message": "locktrace report service", "network": config.network_id}


@app.get("/status")
def get_status():
    runner = _runner()
    try:
        head = runner.source.head()
    except DataSourceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return {
        "network": config.network_id,
        "head": head.number,
        "head_time": head.timestamp.isoformat(),
        "vote_locking_period_blocks": config.vote_locking_period_blocks,
        "block_time_sec": config.block_time_sec,
    }


@app.get("/locks/{address}")
def get_locks(address: str):
    """Lock report for a single account."""
    address = address.strip()
    if not address:
        raise HTTPException(status_code=400, detail="No address given")

    runner = _runner()
    try:
        report = runner.run([address])
    except DataSourceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return report.accounts[0].model_dump(mode="json")


@app.get("/report")
def get_report(addresses: str = Query(..., description="Comma-separated account addresses")):
    """Lock report for several accounts."""
    accounts = [a.strip() for a in addresses.split(",") if a.strip()]
    if not accounts:
        raise HTTPException(status_code=400, detail="No addresses given")
    if len(accounts) > MAX_ADDRESSES:
        raise HTTPException(status_code=400, detail=f"At most {MAX_ADDRESSES} addresses per request")

    runner = _runner()
    try:
        report = runner.run(accounts)
    except DataSourceError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return report.model_dump(mode="json")


@app.get("/metrics")
async def get_metrics():
    """Prometheus metrics endpoint."""
    from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
    from ..observability.metrics import metrics_registry

    return Response(content=generate_latest(metrics_registry), media_type=CONTENT_TYPE_LATEST)
