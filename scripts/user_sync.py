"""Operator CLI for the user sync listener.

This module serves as a CLI wrapper around usersync.core.listener:

    user-sync show-config
    user-sync handle-event --file event.json
    cat event.json | user-sync handle-event --file -
"""
from __future__ import annotations
import argparse
import json
import logging
import os
import sys
from pathlib import Path

SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from usersync.config import load_settings
from usersync.core.events import EventFormatError
from usersync.core.listener import create_listener


def _read_event(source: str):
    """Read one JSON event document from a file path or '-' for stdin."""
    if source == "-":
        return json.load(sys.stdin)
    with open(source, encoding="utf-8") as handle:
        return json.load(handle)


def main() -> None:
    """Command-line entry point."""
    parser = argparse.ArgumentParser(description="Keycloak user sync helper")
    parser.add_argument("--log-level", default=os.environ.get("LOG_LEVEL", "INFO"))

    sub = parser.add_subparsers(dest="cmd")

    sub.add_parser("show-config", help="Print the effective configuration (secrets masked)")

    he = sub.add_parser("handle-event", help="Run one Keycloak event document through the listener")
    he.add_argument("--file", required=True, help="Path to the event JSON, or '-' for stdin")

    args = parser.parse_args()

    if not args.cmd:
        parser.print_help()
        return

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )

    try:
        cfg = load_settings()
    except RuntimeError as exc:
        parser.error(str(exc))

    if args.cmd == "show-config":
        print(json.dumps(cfg.redacted(), indent=2, sort_keys=True))
        return

    if args.cmd == "handle-event":
        try:
            raw = _read_event(args.file)
        except (OSError, json.JSONDecodeError) as exc:
            parser.error(f"Could not read event from {args.file}: {exc}")

        listener = create_listener(cfg)
        try:
            result = listener.on_raw_event(raw)
        except EventFormatError as exc:
            print(f"[user-sync] Invalid event: {exc}", file=sys.stderr)
            sys.exit(2)
        print(result.value)


if __name__ == "__main__":
    main()
