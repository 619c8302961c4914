from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING, Any

from dotenv import load_dotenv

from whereis.app import (
    build_runtime,
    create_api_key,
    get_status,
    push_tracking_data,
    run_scheduler,
    sync_tracking_once,
    where_is,
)
from whereis.config import ConfigurationError, configure_logging, log_level_for_env
from whereis.config.env import env_or_default
from whereis.domain.errors import TrackingError

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Track shipments across carriers")
    subparsers = parser.add_subparsers(dest="command", required=True)

    schedule = subparsers.add_parser("schedule", help="Pull shipments in progress periodically")
    schedule.add_argument(
        "--once",
        action="store_true",
        help="Run a single sync pass and exit",
    )
    schedule.add_argument(
        "--interval",
        type=float,
        help="Minutes between passes (defaults to APP_PULL_INTERVAL)",
    )

    whereis = subparsers.add_parser("whereis", help="Show every event of a shipment")
    whereis.add_argument("tracking_id", help="Tracking id, e.g. sfex-SF3122082959115")
    whereis.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Carrier-specific parameter such as phonenum=1234",
    )
    whereis.add_argument("--refresh", action="store_true", help="Re-fetch and replace")
    whereis.add_argument("--full-data", action="store_true", help="Include raw carrier data")

    status = subparsers.add_parser("status", help="Show the latest status of a shipment")
    status.add_argument("tracking_id", help="Tracking id, e.g. fdx-779879860040")
    status.add_argument(
        "--param",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Carrier-specific parameter such as phonenum=1234",
    )

    push = subparsers.add_parser("push", help="Ingest a push payload from a JSON file")
    push.add_argument("operator", help="Operator code receiving the push, e.g. eg1")
    push.add_argument("file", type=Path, help="Path to the JSON payload")

    api_key = subparsers.add_parser("api-key", help="API key management commands")
    api_key_sub = api_key.add_subparsers(dest="api_key_command", required=True)
    api_key_create = api_key_sub.add_parser("create", help="Register an API key")
    api_key_create.add_argument("key", help="API key value")
    api_key_create.add_argument("user_id", help="User owning the key")

    return parser.parse_args(list(argv))


def _parse_params(values: Sequence[str]) -> dict[str, str]:
    params: dict[str, str] = {}
    for value in values:
        key, sep, param = value.partition("=")
        if not sep or not key.strip():
            raise ValueError(f"Invalid parameter {value!r}, expected KEY=VALUE")
        params[key.strip()] = param.strip()
    return params


def _emit(payload: Any) -> None:
    sys.stdout.write(json.dumps(payload, ensure_ascii=False, indent=2) + "\n")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    configure_logging(level=log_level_for_env(env_or_default("APP_ENV", "dev")))
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
        params = _parse_params(getattr(parsed_args, "param", []))
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        runtime = build_runtime()
        if parsed_args.command == "schedule":
            if parsed_args.once:
                summary = sync_tracking_once(runtime)
                _emit(
                    {
                        "batches": summary.batches,
                        "entities": summary.entities,
                        "updated": summary.updated,
                        "failed": summary.failed,
                    }
                )
            else:
                run_scheduler(runtime, interval_minutes=parsed_args.interval)
        elif parsed_args.command == "whereis":
            query = dict(params)
            if parsed_args.refresh:
                query["refresh"] = "true"
            if parsed_args.full_data:
                query["fulldata"] = "true"
            _emit(where_is(runtime, parsed_args.tracking_id, query))
        elif parsed_args.command == "status":
            _emit(get_status(runtime, parsed_args.tracking_id, params))
        elif parsed_args.command == "push":
            payload = json.loads(parsed_args.file.read_text(encoding="utf-8"))
            result = push_tracking_data(runtime, parsed_args.operator, payload)
            _emit(result.to_dict())
        elif parsed_args.command == "api-key" and parsed_args.api_key_command == "create":
            inserted = create_api_key(runtime, parsed_args.key, parsed_args.user_id)
            _emit({"inserted": inserted})
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except TrackingError as exc:
        _emit({"error": {"code": exc.code, "message": str(exc)}})
        if exc.http_status < 500:
            sys.exit(2)
        log.error("%s %s", exc.code, exc)
        sys.exit(1)
    except ConfigurationError:
        log.exception("Configuration error")
        sys.exit(1)
    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
