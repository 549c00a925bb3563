"""Command-line tool for inspecting and maintaining a ping store directory.

Subcommands:

* **list**: print every ping as one JSON line, ordered by ID.
* **count**: print the number of stored pings.
* **store**: add a ping (``--replace`` to overwrite an existing ID).
* **prune**: evict the oldest pings beyond ``--max`` (default 40).
* **ack**: remove pings confirmed as uploaded.

Start with::

    ping-store /path/to/pings list
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Optional, Sequence

from .errors import PingStoreError
from .stores.config import MAX_PING_COUNT, MalformedPingPolicy, StoreConfig
from .stores.json_file import JSONFilePingStore


def _cmd_list(store: JSONFilePingStore, args: argparse.Namespace) -> int:
    for ping in sorted(store.get_all_pings(), key=lambda p: p.unique_id):
        print(json.dumps({"id": ping.unique_id, **ping.to_dict()}))
    for skipped in store.skipped:
        print(str(skipped), file=sys.stderr)
    return 0


def _cmd_count(store: JSONFilePingStore, args: argparse.Namespace) -> int:
    print(store.count())
    return 0


def _cmd_store(store: JSONFilePingStore, args: argparse.Namespace) -> int:
    try:
        payload = json.loads(args.payload)
    except json.JSONDecodeError as exc:
        print(f"error: invalid payload JSON: {exc}", file=sys.stderr)
        return 1
    store.store(args.id, args.url_path, payload, replace=args.replace)
    return 0


def _cmd_prune(store: JSONFilePingStore, args: argparse.Namespace) -> int:
    result = store.prune(args.max)
    print(json.dumps(result.to_dict()))
    return 0 if result.ok else 1


def _cmd_ack(store: JSONFilePingStore, args: argparse.Namespace) -> int:
    result = store.on_upload_attempt_complete(args.ids)
    print(json.dumps(result.to_dict()))
    return 0 if result.ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ping-store", description="Inspect and maintain a telemetry ping store"
    )
    parser.add_argument("root_dir", help="Directory holding the ping files")
    parser.add_argument(
        "--malformed",
        choices=[p.value for p in MalformedPingPolicy],
        default=MalformedPingPolicy.WARN.value,
        help="What to do with unparseable ping files (default: warn)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Print all pings").set_defaults(func=_cmd_list)
    sub.add_parser("count", help="Print the number of pings").set_defaults(func=_cmd_count)

    p_store = sub.add_parser("store", help="Add a ping")
    p_store.add_argument("id", type=int)
    p_store.add_argument("url_path")
    p_store.add_argument("payload", help="Payload as a JSON object")
    p_store.add_argument("--replace", action="store_true")
    p_store.set_defaults(func=_cmd_store)

    p_prune = sub.add_parser("prune", help="Evict the oldest pings beyond capacity")
    p_prune.add_argument("--max", type=int, default=MAX_PING_COUNT)
    p_prune.set_defaults(func=_cmd_prune)

    p_ack = sub.add_parser("ack", help="Remove pings confirmed as uploaded")
    p_ack.add_argument("ids", type=int, nargs="+")
    p_ack.set_defaults(func=_cmd_ack)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        store = JSONFilePingStore(
            args.root_dir, config=StoreConfig(malformed_policy=args.malformed)
        )
        return args.func(store, args)
    except (PingStoreError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
