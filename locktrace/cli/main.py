# MIT License
# Copyright (c) 2025 Hashborn

import argparse
import sys
import logging
from typing import List
from ..engine.report.runner import ReportRunner
from ..engine.report.types import LockReport
from ..engine.source.base import ChainDataSource
from ..engine.source.sidecar import SidecarSource, get_node_url
from ..engine.source.snapshot import SnapshotSource
from ..protocol.config.params import NETWORKS, get_network
from ..protocol.types.common import DataSourceError

logger = logging.getLogger(__name__)


def read_addresses_from_file(path: str) -> List[str]:
    with open(path, "r") as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]


def collect_addresses(args) -> List[str]:
    addresses = list(args.addresses or [])
    if args.file:
        try:
            addresses.extend(read_addresses_from_file(args.file))
        except OSError as e:
            print(f"Error: cannot read {args.file}: {e}")
            sys.exit(1)
    return addresses


def build_source(args) -> ChainDataSource:
    if args.snapshot:
        return SnapshotSource.from_file(args.snapshot)
    return SidecarSource(get_node_url(args.node), timeout=args.timeout)


def print_report(report: LockReport):
    print(f"Network: {report.network}  Head: #{report.current_block}  Generated: {report.generated_at:%Y-%m-%d %H:%M:%S}")
    for acc in report.accounts:
        print()
        print(f"Address: {acc.address}  [{acc.status}]")
        for issue in acc.issues:
            print(f"  ! {issue}")

        for lock in (acc.voting, acc.vesting):
            state = "active" if lock.active else "expired"
            if lock.indefinite:
                until = "until referendum/delegation ends"
            elif lock.unlock_block is not None:
                until = f"#{lock.unlock_block} (~{lock.estimated_unlock_at:%Y-%m-%d %H:%M})"
            else:
                until = "-"
            print(f"  {lock.lock_class:<8} {lock.amount_display:>24} {report.denom}  {state:<8} {until}")

        if acc.locks:
            print(f"  {'Source':<36} {'Amount':>24} {'Unlock':>12}  {'Period'}")
            print("  " + "-" * 90)
            for d in acc.locks:
                unlock = f"#{d.unlock_block}" if d.unlock_block is not None else "indefinite"
                print(f"  {d.source:<36} {d.amount_display:>24} {unlock:>12}  {d.lock_period}")

        for lock in acc.chain_locks:
            print(f"  Lock ID: {lock.id}, Amount: {lock.amount_display} {report.denom}")


# --- Commands ---
def cmd_report(args):
    addresses = collect_addresses(args)
    if not addresses:
        print("Error: no addresses given (positional or --file)")
        sys.exit(1)

    config = args.config
    try:
        source = build_source(args)
        report = ReportRunner(source, config, max_workers=args.workers).run(addresses)
    except DataSourceError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.output:
        with open(args.output, "w") as f:
            f.write(report.model_dump_json(indent=2))
        print(f"Report written to {args.output}")
    elif args.json:
        print(report.model_dump_json(indent=2))
    else:
        print_report(report)

    if args.strict and not report.complete:
        sys.exit(2)


def cmd_serve(args):
    from uvicorn import Config, Server
    from ..engine.rpc import api

    api.config = args.config
    api.source = build_source(args)
    api.max_workers = args.workers

    logger.info(f"Serving {api.config.network_id} lock reports on {args.host}:{args.port}")
    Server(Config(api.app, host=args.host, port=args.port, log_level="info")).run()


def cmd_params(args):
    config = args.config
    print(f"{'Network':<24} {config.network_id}")
    print(f"{'Token':<24} {config.denom} ({config.token_decimals} decimals)")
    print(f"{'Block time':<24} {config.block_time_sec}s")
    print(f"{'Vote locking period':<24} {config.vote_locking_period_blocks} blocks")


def add_source_args(p):
    p.add_argument("--node", help="Sidecar URL (default: $LOCKTRACE_NODE or http://localhost:8080)")
    p.add_argument("--snapshot", help="Read chain data from a JSON snapshot instead of a node")
    p.add_argument("--timeout", type=float, default=10.0, help="HTTP timeout in seconds")
    p.add_argument("--workers", type=int, default=4, help="Concurrent account tasks")


def main(argv=None):
    parser = argparse.ArgumentParser(prog="locktrace", description="Conviction voting and vesting lock report")
    parser.add_argument("--network", choices=sorted(NETWORKS), help="Network (default: $LOCKTRACE_NETWORK or polkadot)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Sub-commands")

    p_report = subparsers.add_parser("report", help="Compute locks for accounts")
    p_report.add_argument("addresses", nargs="*", help="Account addresses")
    p_report.add_argument("--file", help="File with one address per line")
    p_report.add_argument("--output", help="Write the JSON report to this file")
    p_report.add_argument("--json", action="store_true", help="Print the JSON report")
    p_report.add_argument("--strict", action="store_true", help="Exit 2 if any account is not fully computed")
    add_source_args(p_report)

    p_serve = subparsers.add_parser("serve", help="Run the read-only report service")
    p_serve.add_argument("--host", default="127.0.0.1", help="Bind host")
    p_serve.add_argument("--port", type=int, default=8000, help="Bind port")
    add_source_args(p_serve)

    subparsers.add_parser("params", help="Show network lock parameters")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s: %(message)s',
        datefmt='%H:%M:%S'
    )

    try:
        args.config = get_network(args.network)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if args.command == "report":
        cmd_report(args)
    elif args.command == "serve":
        cmd_serve(args)
    elif args.command == "params":
        cmd_params(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
