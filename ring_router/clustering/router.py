import logging
import threading
from typing import Callable

from ..utils.event_logger import EventLogger
from ..utils.hashing import hash64
from .hash_ring import HashRing
from .placement import (
    MIN_REPLICA_COUNT,
    MAX_REPLICA_COUNT,
    compute_replica_count,
    place_replicas,
)
from .registry import HostInfo, HostRegistry, validate_weight

logger = logging.getLogger(__name__)


class Router:
    """Weighted consistent-hashing router.

    Hosts get ``max(1, floor(base_replica_count * weight))`` virtual nodes
    on a 64-bit ring. :meth:`route` sends a key to the host owning the first
    position at or after the key's hash, wrapping around past the largest
    position.

    ``add_host`` and ``remove_host`` are serialised by a lock. ``route``
    does not lock; it reads one immutable ring snapshot, so it never sees
    part of a host's positions.
    """

    def __init__(
        self,
        base_replica_count: int,
        *,
        hash_func: Callable[[str], int] = hash64,
        event_logger: EventLogger | None = None,
    ) -> None:
        if (
            isinstance(base_replica_count, bool)
            or not isinstance(base_replica_count, int)
            or not MIN_REPLICA_COUNT <= base_replica_count <= MAX_REPLICA_COUNT
        ):
            raise ValueError(
                f"base replica count must be {MIN_REPLICA_COUNT} <= N <= "
                f"{MAX_REPLICA_COUNT}, got {base_replica_count!r}"
            )
        self._base_replica_count = base_replica_count
        self.event_logger = event_logger
        self._lock = threading.Lock()
        self._hosts = HostRegistry()
        self._ring = HashRing(hash_func=hash_func)

    @property
    def base_replica_count(self) -> int:
        return self._base_replica_count

    def __len__(self) -> int:
        return len(self._hosts)

    def __contains__(self, name: str) -> bool:
        return name in self._hosts

    @property
    def position_count(self) -> int:
        return len(self._ring)

    def _record(self, msg: str) -> None:
        if self.event_logger:
            self.event_logger.log(msg)
        else:
            logger.info(msg)

    def replica_count_for(self, weight: float) -> int:
        return compute_replica_count(self._base_replica_count, weight)

    # membership ---------------------------------------------------------
    def add_host(self, name: str, weight: float) -> bool:
        """Register ``name`` with ``weight``.

        Returns ``False`` without changing anything if the name is already
        registered or the weight is outside ``[0.0, 16.0]``. Raises
        :class:`PlacementError` if the ring is too full to place the
        replicas, also leaving the router unchanged.
        """
        if not validate_weight(weight):
            logger.debug("Rejected host %r: invalid weight %r", name, weight)
            return False
        with self._lock:
            if name in self._hosts:
                logger.debug("Rejected host %r: already registered", name)
                return False
            count = self.replica_count_for(weight)
            positions = place_replicas(
                name,
                count,
                self._ring.snapshot,
                hash_func=self._ring.hash_func,
                ring_size=self._ring.ring_size,
            )
            self._ring.add(name, positions)
            self._hosts.add(HostInfo(name, float(weight), tuple(positions)))
        self._record(f"Host {name} added with weight {weight} and {count} replicas.")
        return True

    def remove_host(self, name: str) -> bool:
        """Unregister ``name``. Returns ``False`` if it is not registered."""
        with self._lock:
            if name not in self._hosts:
                logger.debug("Cannot remove %r: not registered", name)
                return False
            info = self._hosts.get(name)
            self._ring.remove(info.positions)
            self._hosts.pop(name)
        self._record(f"Host {name} removed, {info.replica_count} replicas released.")
        return True

    # routing ------------------------------------------------------------
    def route(self, key: str) -> str | None:
        """Return the host responsible for ``key``, ``None`` if there are none."""
        return self._ring.lookup(key)

    # introspection ------------------------------------------------------
    def hosts(self) -> list[str]:
        with self._lock:
            return list(self._hosts)

    def host(self, name: str) -> HostInfo | None:
        with self._lock:
            return self._hosts.get(name)

    def ownership(self) -> dict[str, float]:
        """Fraction of the ring space owned by each registered host."""
        return self._ring.ownership()

    def debug(self) -> list[str]:
        """Log the routing table at DEBUG level and return its lines."""
        with self._lock:
            lines = [
                f"hosts={len(self._hosts)} positions={len(self._ring)} "
                f"base_replica_count={self._base_replica_count} "
                f"total_weight={self._hosts.total_weight()}"
            ]
            coverage = self._ring.ownership()
            for name in self._hosts:
                info = self._hosts.get(name)
                lines.append(
                    f"host={name} weight={info.weight} replicas={info.replica_count} "
                    f"ownership={coverage.get(name, 0.0):.4f}"
                )
        for line in lines:
            logger.debug(line)
        return lines
