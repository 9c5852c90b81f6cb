"""
Command-line access to the persistent record cache.

Inspect or modify the stored resources directly, without a running DNS server.

Usage:
    python -m shaman_cache --connect boltdb:///var/db/shaman.db list
    python -m shaman_cache get example.com
    python -m shaman_cache add example.com --address 127.0.0.1 --ttl 300
    python -m shaman_cache delete example.com
    python -m shaman_cache reset resources.json

The connection URI defaults to SHAMAN_L2_CONNECT.
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from .cache import RecordCache
from .errors import RecordNotFoundError, StorageError
from .resource import Record, Resource


def _print_json(data) -> None:
    print(json.dumps(data, indent=2))


def cmd_list(cache: RecordCache, args: argparse.Namespace) -> int:
    _print_json([r.model_dump(mode="json", by_alias=True) for r in cache.list_records()])
    return 0


def cmd_get(cache: RecordCache, args: argparse.Namespace) -> int:
    try:
        resource = cache.get_record(args.domain)
    except RecordNotFoundError as e:
        print(e, file=sys.stderr)
        return 1
    if resource is None:
        print("Storage is disabled", file=sys.stderr)
        return 1
    _print_json(resource.model_dump(mode="json", by_alias=True))
    return 0


def cmd_add(cache: RecordCache, args: argparse.Namespace) -> int:
    record = Record(ttl=args.ttl, class_=args.record_class, type=args.type, address=args.address)
    cache.add_record(Resource(domain=args.domain, records=[record]))
    return 0


def cmd_delete(cache: RecordCache, args: argparse.Namespace) -> int:
    cache.delete_record(args.domain)
    return 0


def cmd_reset(cache: RecordCache, args: argparse.Namespace) -> int:
    try:
        resources = TypeAdapter(list[Resource]).validate_json(Path(args.file).read_bytes())
    except (OSError, ValidationError) as e:
        print(f"Failed to load {args.file}: {e}", file=sys.stderr)
        return 2
    cache.reset_records(resources)
    print(f"✓ Stored {len(resources)} resources")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="shaman-cache", description="Manage persistent DNS resources")
    parser.add_argument("--connect", default=None, help="Connection URI (e.g., boltdb:///var/db/shaman.db); default: $SHAMAN_L2_CONNECT")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List every stored resource").set_defaults(func=cmd_list)

    get = sub.add_parser("get", help="Show one resource")
    get.add_argument("domain")
    get.set_defaults(func=cmd_get)

    add = sub.add_parser("add", help="Add or replace a resource with a single record")
    add.add_argument("domain")
    add.add_argument("--address", required=True, help="Record value")
    add.add_argument("--type", default="A", help="Record type (default: A)")
    add.add_argument("--ttl", type=int, default=60, help="Time to live in seconds (default: 60)")
    add.add_argument("--class", dest="record_class", default="IN", help="DNS class (default: IN)")
    add.set_defaults(func=cmd_add)

    delete = sub.add_parser("delete", help="Remove a resource")
    delete.add_argument("domain")
    delete.set_defaults(func=cmd_delete)

    reset = sub.add_parser("reset", help="Replace every resource from a JSON file")
    reset.add_argument("file", help="JSON array of resources")
    reset.set_defaults(func=cmd_reset)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    with RecordCache() as cache:
        try:
            cache.initialize(args.connect)
            if not cache.exists:
                print("Warning: storage is disabled; changes will not be persisted", file=sys.stderr)
            return args.func(cache, args)
        except StorageError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1


if __name__ == "__main__":
    sys.exit(main())
