#!/usr/bin/env python3
"""
hostprobe - command line entry point.

Runs individual host probes, or the full self service report, and prints the
result as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from .collectors.base import CollectorError
from .collectors.filesystem import filesystem_status
from .collectors.logs import read_file, search_strategy
from .collectors.roles import classify_role
from .collectors.self_service import SelfServiceCollector
from .collectors.status_api import StatusApiClient
from .config import Config
from .facts import SystemFacts

LOG = logging.getLogger("hostprobe")


def _emit(data: Any) -> None:
    print(json.dumps(data, indent=2, default=str))


def run_report(config: Config, args) -> int:
    with SelfServiceCollector(config) as collector:
        _emit(collector.collect())
    return 0


def run_role(config: Config, args) -> int:
    facts = SystemFacts(config.facts, root=config.root)
    _emit({"role": classify_role(facts, config.root).value})
    return 0


def run_service(config: Config, args) -> int:
    collector = SelfServiceCollector(config)
    _emit({name: collector.service_state(name).to_dict() for name in args.names})
    return 0


def run_status(config: Config, args) -> int:
    client = StatusApiClient.from_config(config)
    try:
        result = client.check(args.port, args.endpoint)
    finally:
        client.close()
    _emit(result.to_dict())
    return 0 if result.ok else 1


def run_free(config: Config, args) -> int:
    entries = [filesystem_status(path) for path in args.paths]
    _emit({fs.path: fs.to_dict() for fs in entries})
    return 0 if all(fs.error is None for fs in entries) else 1


def run_search(config: Config, args) -> int:
    strategy = search_strategy(args.path, args.phrase, args.lines, args.time_from, args.time_to)
    found = None
    if strategy is not None:
        found = not read_file(args.path, args.phrase, args.lines, args.time_from, args.time_to)
    _emit({
        "path": args.path,
        "phrase": args.phrase,
        "strategy": strategy.value if strategy else None,
        "found": found,
    })
    return 0


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(
        description="PE host introspection probes",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    parser.add_argument("--config", type=str, help="Path to config YAML file")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)

    report = subparsers.add_parser("report", help="Full self service report")
    report.set_defaults(func=run_report)

    role = subparsers.add_parser("role", help="Classify this node's PE role")
    role.set_defaults(func=run_role)

    service = subparsers.add_parser("service", help="Service run/enable state")
    service.add_argument("names", nargs="+", help="Service names")
    service.set_defaults(func=run_service)

    status = subparsers.add_parser("status", help="Query the status API")
    status.add_argument("port", type=int, help="Status API port")
    status.add_argument("endpoint", help="Status API endpoint, e.g. pe-master")
    status.set_defaults(func=run_status)

    free = subparsers.add_parser("free", help="Filesystem free space percentage")
    free.add_argument("paths", nargs="+", help="Paths on the filesystems to check")
    free.set_defaults(func=run_free)

    search = subparsers.add_parser("search", help="Search a log file for a phrase")
    search.add_argument("path", help="Log file, or glob when using a time window")
    search.add_argument("phrase", help="Phrase to search for")
    search.add_argument("--lines", type=int, default=None, help="Only search the last N lines")
    search.add_argument("--from", dest="time_from", type=int, default=None, help="Window start (epoch seconds)")
    search.add_argument("--to", dest="time_to", type=int, default=None, help="Window end (epoch seconds)")
    search.set_defaults(func=run_search)

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the hostprobe command."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = Config.load(args.config)
    LOG.debug("[config] Loaded: %s", config.to_dict())
    try:
        return args.func(config, args)
    except CollectorError as e:
        print(str(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
