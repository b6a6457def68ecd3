"""
Command line entrypoint.

  agent-diff check <address> [--json] [--baseline-dir DIR] [--rpc-url URL]

Fetches the address's recent transactions, builds the current snapshot,
creates the baseline on first run, and prints the diff against it.
Exit code 0 on success, 1 on any failure with one message per category.

Env: EVM_RPC_URL (or BASE_RPC_URL), BASELINE_DIR, RPC_TIMEOUT_SEC, RPC_MAX_RETRIES,
LOG_LEVEL, LOG_FORMAT.
"""

from __future__ import annotations

import argparse
import dataclasses
import json
import sys
from pathlib import Path
from typing import Sequence

from agent_diff.agent_logging import bind_address
from agent_diff.analyzer import TransactionAnalyzer
from agent_diff.chain import EvmRpcClient, is_valid_address
from agent_diff.config import Settings, get_settings
from agent_diff.config.env import mask_rpc_url
from agent_diff.core.exceptions import (
    BaselineStorageError,
    DataUnavailableError,
    InsufficientDataError,
    InvalidAddressError,
)
from agent_diff.diff import Diff, DiffEngine
from agent_diff.report import DiffFormatter
from agent_diff.snapshot import SnapshotGenerator
from agent_diff.storage import BaselineStore

EXIT_OK = 0
EXIT_FAILURE = 1

MSG_INVALID_ADDRESS = "Invalid address."
MSG_DATA_UNAVAILABLE = "Data unavailable. Try again later."
MSG_INSUFFICIENT_DATA = "Insufficient data for baseline"
MSG_UNEXPECTED = "Unable to generate diff"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agent-diff",
        description="Report behavioral changes of an EVM address against its stored baseline.",
    )
    sub = parser.add_subparsers(dest="command", required=True)
    check = sub.add_parser("check", help="Generate an on-chain behavior diff for an address")
    check.add_argument("address", help="0x-prefixed EVM address")
    check.add_argument("--json", action="store_true", dest="as_json", help="Print the diff as JSON")
    check.add_argument("--baseline-dir", type=Path, default=None, help="Override BASELINE_DIR")
    check.add_argument("--rpc-url", default=None, help="Override EVM_RPC_URL")
    return parser


def generate_diff(
    address: str,
    client: EvmRpcClient,
    store: BaselineStore,
) -> Diff:
    """Run fetch -> analyze -> snapshot -> get-or-create baseline -> diff for one address."""
    log = bind_address(address.lower())
    raw_transactions = client.fetch_transactions(address)
    analyzed = TransactionAnalyzer(client.is_contract).analyze(raw_transactions)
    current_snapshot = SnapshotGenerator().generate_snapshot(address, analyzed)

    baseline = store.get_baseline(address)
    if baseline is None:
        log.info("baseline_missing_creating")
        baseline = store.save_baseline(address, current_snapshot)

    diff = DiffEngine().generate_diff(baseline, current_snapshot)
    log.info("check_completed", status=diff.status.value, baseline_age=diff.baseline_age)
    return diff


def run_check(address: str, settings: Settings, as_json: bool = False) -> int:
    if not is_valid_address(address):
        print(MSG_INVALID_ADDRESS, file=sys.stderr)
        return EXIT_FAILURE

    client = EvmRpcClient(
        settings.rpc_url,
        timeout=settings.rpc_timeout_sec,
        max_retries=settings.rpc_max_retries,
        retry_delay=settings.rpc_retry_delay_sec,
    )
    store = BaselineStore(settings.baseline_dir)
    log = bind_address(address.lower())
    log.debug("check_started", rpc=mask_rpc_url(settings.rpc_url), baseline_dir=str(settings.baseline_dir))

    try:
        diff = generate_diff(address, client, store)
    except InvalidAddressError:
        print(MSG_INVALID_ADDRESS, file=sys.stderr)
        return EXIT_FAILURE
    except DataUnavailableError:
        print(MSG_DATA_UNAVAILABLE, file=sys.stderr)
        return EXIT_FAILURE
    except InsufficientDataError:
        print(MSG_INSUFFICIENT_DATA, file=sys.stderr)
        return EXIT_FAILURE
    except BaselineStorageError as e:
        print(f"Baseline storage error: {e}", file=sys.stderr)
        return EXIT_FAILURE
    except Exception as e:
        log.error("check_failed", error=str(e), exc_info=True)
        print(MSG_UNEXPECTED, file=sys.stderr)
        return EXIT_FAILURE

    if as_json:
        print(json.dumps(diff.to_dict(), indent=2))
    else:
        print(DiffFormatter().format(diff))
    return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = get_settings()
    overrides = {}
    if args.rpc_url:
        overrides["rpc_url"] = args.rpc_url
    if args.baseline_dir is not None:
        overrides["baseline_dir"] = args.baseline_dir
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    if args.command == "check":
        return run_check(args.address, settings, as_json=args.as_json)
    return EXIT_FAILURE


if __name__ == "__main__":
    sys.exit(main())
