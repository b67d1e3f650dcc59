"""Replica placement: turn a host name and weight into ring positions."""

import logging
import math
from typing import Callable, Collection

from ..utils.hashing import hash64, RING_SIZE

logger = logging.getLogger(__name__)

# Base replica count used for a host of weight 1.0.
MIN_REPLICA_COUNT = 1
MAX_REPLICA_COUNT = 256

# Weight 0.0 still yields one replica. 16x covers the usual 1x..16x
# container sizes.
MIN_WEIGHT = 0.0
MAX_WEIGHT = 16.0

# Attempts allowed per replica, scaled by how crowded the ring is.
ATTEMPT_FACTOR = 64


class PlacementError(RuntimeError):
    """Raised when the ring cannot fit the requested replicas."""


def compute_replica_count(base_replica_count: int, weight: float) -> int:
    """Return ``max(1, floor(base_replica_count * weight))``."""
    return max(MIN_REPLICA_COUNT, math.floor(base_replica_count * weight))


def replica_name(host: str, replica: int) -> str:
    return f"{host}_{replica}"


def attempt_limit(count: int, occupied: int, ring_size: int = RING_SIZE) -> int:
    """Upper bound on hash attempts for placing ``count`` replicas."""
    free = ring_size - occupied
    if free <= 0:
        return 0
    return count * -(-ring_size // free) * ATTEMPT_FACTOR


def place_replicas(
    host: str,
    count: int,
    occupied: Collection[int],
    *,
    hash_func: Callable[[str], int] = hash64,
    ring_size: int = RING_SIZE,
) -> list[int]:
    """Generate exactly ``count`` distinct positions for ``host``.

    Replica identifiers are ``host_1``, ``host_2``, ... hashed with
    ``hash_func``. A position already in ``occupied`` or already taken by
    an earlier replica of this call is skipped and the counter advances.
    ``occupied`` is never modified.
    """
    if count > ring_size - len(occupied):
        raise PlacementError(
            f"ring has room for {ring_size - len(occupied)} positions, "
            f"{count} requested for {host!r}"
        )
    limit = attempt_limit(count, len(occupied), ring_size)
    positions: list[int] = []
    taken: set[int] = set()
    replica = 0
    while len(positions) < count:
        replica += 1
        if replica > limit:
            raise PlacementError(
                f"placed {len(positions)} of {count} replicas for {host!r} "
                f"after {limit} attempts"
            )
        name = replica_name(host, replica)
        position = hash_func(name)
        if position in occupied or position in taken:
            logger.debug("Position collision for %s at %d, retrying", name, position)
            continue
        taken.add(position)
        positions.append(position)
        logger.debug("Replica %s placed at %d", name, position)
    return positions
