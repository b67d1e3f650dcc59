"""Route random keys through a Router and print the per-host load.

Usage:
    python -m ring_router.simulate [--replicas N] [--requests R] [--seed S] \
        [--host NAME=WEIGHT ...] [--remove NAME ...] [--event-log PATH] [-v]

Values default to environment variables ROUTER_REPLICAS, ROUTER_REQUESTS
and ROUTER_SEED when set. Without ``--host`` six servers are seeded, one of
them with double weight.
"""

import argparse
import logging
import os
import random
import string
import sys
from collections import Counter
from typing import Iterable, List

from pydantic import ValidationError

from .clustering.router import Router
from .config import (
    DEFAULT_KEY_LENGTH,
    DEFAULT_REPLICA_COUNT,
    DEFAULT_REQUEST_COUNT,
    HostSpec,
    SimulationConfig,
)
from .utils.event_logger import EventLogger

logger = logging.getLogger(__name__)


def _host_arg(text: str) -> HostSpec:
    try:
        return HostSpec.parse(text)
    except ValidationError as exc:
        raise argparse.ArgumentTypeError(f"invalid host {text!r}: {exc.errors()[0]['msg']}")


def _optional_int(value):
    return int(value) if value not in (None, "") else None


def build_parser() -> argparse.ArgumentParser:
    env = os.environ
    parser = argparse.ArgumentParser(description="Simulate weighted consistent-hash routing")
    parser.add_argument(
        "--replicas",
        type=int,
        default=env.get("ROUTER_REPLICAS", str(DEFAULT_REPLICA_COUNT)),
        help="replica count for a host of weight 1.0",
    )
    parser.add_argument(
        "--requests",
        type=int,
        default=env.get("ROUTER_REQUESTS", str(DEFAULT_REQUEST_COUNT)),
    )
    parser.add_argument("--key-length", dest="key_length", type=int, default=DEFAULT_KEY_LENGTH)
    parser.add_argument("--seed", type=_optional_int, default=env.get("ROUTER_SEED"))
    parser.add_argument(
        "--host",
        dest="hosts",
        action="append",
        type=_host_arg,
        metavar="NAME=WEIGHT",
    )
    parser.add_argument("--remove", action="append", default=[], metavar="NAME")
    parser.add_argument("--event-log", dest="event_log")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser


def parse_args(argv: List[str] | None = None) -> SimulationConfig:
    parser = build_parser()
    args = parser.parse_args(argv)
    values = {k: v for k, v in vars(args).items() if v is not None}
    try:
        return SimulationConfig(**values)
    except ValidationError as exc:
        parser.error(str(exc))


def make_random_key(rng: random.Random, length: int = DEFAULT_KEY_LENGTH) -> str:
    return "".join(rng.choice(string.ascii_uppercase) for _ in range(length))


def build_router(config: SimulationConfig, event_logger: EventLogger | None = None) -> Router:
    """Seed a router with the configured hosts, then apply removals."""
    router = Router(config.replicas, event_logger=event_logger)
    for spec in config.hosts:
        if not router.add_host(spec.name, spec.weight):
            logger.warning("Host %s was not added", spec.name)
    for name in config.remove:
        if not router.remove_host(name):
            logger.warning("Host %s was not registered, nothing removed", name)
    return router


def run_simulation(router: Router, keys: Iterable[str]) -> Counter:
    """Route every key and count the hits per host (``None`` if unrouted)."""
    hist = Counter()
    for key in keys:
        hist[router.route(key)] += 1
    return hist


def format_histogram(hist: Counter, total: int) -> list[str]:
    lines = ["Histogram:"]
    for host in sorted(hist, key=lambda h: (h is None, h or "")):
        load = hist[host] / total * 100.0 if total else 0.0
        label = host if host is not None else "<unrouted>"
        lines.append(f"server: {label}, load: {load:.2f}")
    return lines


def main(argv: List[str] | None = None) -> int:
    config = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if config.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    rng = random.Random(config.seed)
    event_logger = EventLogger(config.event_log) if config.event_log else None
    try:
        router = build_router(config, event_logger)
        router.debug()
        keys = (make_random_key(rng, config.key_length) for _ in range(config.requests))
        hist = run_simulation(router, keys)
    finally:
        if event_logger:
            event_logger.close()
    print("\n".join(format_histogram(hist, config.requests)))
    return 0


if __name__ == "__main__":
    sys.exit(main())
