# src/offline_tasks/cli/main.py

"""
CLI entrypoint.

Inspect and edit the persisted queue:
- status: registered channels and their pending counts
- show KEY: pending payloads of one channel as JSON
- add KEY JSON [--overwrite]: enqueue a payload (a JSON list enqueues several)
- drop KEY: remove a whole channel
- check: run the connectivity probe (exit code 0 = online)

The CLI runs without an asyncio loop: no command schedules offline retries.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from collections.abc import Sequence

from ..cli.bootstrap import create_queue
from ..config import get_settings
from ..errors import OfflineTasksError
from ..logging_setup import setup_logging
from ..tasks.offline_queue import OfflineTasks

logger = logging.getLogger(__name__)


def cmd_status(queue: OfflineTasks, args: argparse.Namespace) -> int:
    loaded = queue.load() or {}
    if not loaded:
        print("No pending tasks.")
        return 0
    for key, payloads in loaded.items():
        print(f"{key}: {len(payloads)} pending")
    return 0


def cmd_show(queue: OfflineTasks, args: argparse.Namespace) -> int:
    payloads = queue.load(args.key)
    if payloads is None:
        print(f"Unknown key: {args.key}", file=sys.stderr)
        return 1
    print(json.dumps(payloads, ensure_ascii=False, indent=2))
    return 0


def cmd_add(queue: OfflineTasks, args: argparse.Namespace) -> int:
    try:
        data = json.loads(args.payload)
    except json.JSONDecodeError as e:
        print(f"Invalid JSON payload: {e}", file=sys.stderr)
        return 2
    queue.save(args.key, data, overwrite=args.overwrite)
    print(f"Saved to {args.key}.")
    return 0


def cmd_drop(queue: OfflineTasks, args: argparse.Namespace) -> int:
    if not queue.remove(args.key):
        print(f"Unknown key: {args.key}", file=sys.stderr)
        return 1
    print(f"Dropped {args.key}.")
    return 0


def cmd_check(queue: OfflineTasks, args: argparse.Namespace) -> int:
    queue.check_connection()
    online = queue.connection_state
    print("online" if online else "offline")
    return 0 if online else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="offline-tasks",
        description="Offline task queue tools",
        epilog=(
            "Commands run without an event loop, so an offline check is never retried "
            "and queued tasks wait for the next run from the application."
        ),
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("status", help="List channels with pending tasks")
    p.set_defaults(func=cmd_status)

    p = sub.add_parser("show", help="Print pending payloads of a channel")
    p.add_argument("key")
    p.set_defaults(func=cmd_show)

    p = sub.add_parser("add", help="Enqueue a JSON payload under a channel")
    p.add_argument("key")
    p.add_argument("payload", help="JSON value; a JSON list enqueues each element")
    p.add_argument("--overwrite", action="store_true", help="Replace the channel's pending tasks")
    p.set_defaults(func=cmd_add)

    p = sub.add_parser("drop", help="Remove a channel and all its tasks")
    p.add_argument("key")
    p.set_defaults(func=cmd_drop)

    p = sub.add_parser("check", help="Check connectivity")
    p.set_defaults(func=cmd_check)

    return parser


def main(argv: Sequence[str] | None = None, *, queue: OfflineTasks | None = None) -> int:
    args = build_parser().parse_args(argv)

    if queue is None:
        settings = get_settings()
        level_name = str(settings.log_level).upper()
        console_level = getattr(logging, level_name, logging.INFO)
        setup_logging(log_dir=settings.data_dir, console_level=max(console_level, logging.WARNING))
        queue = create_queue(settings=settings)

    try:
        return args.func(queue, args)
    except OfflineTasksError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
