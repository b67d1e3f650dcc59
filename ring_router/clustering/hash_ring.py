from bisect import bisect_left
from dataclasses import dataclass
from typing import Callable, Iterable

from ..utils.hashing import hash64, RING_SIZE


@dataclass(frozen=True)
class RingSnapshot:
    """Immutable view of the ring: sorted positions and their owners.

    ``owners[i]`` is the name of the host owning ``positions[i]``.
    """

    positions: tuple[int, ...] = ()
    owners: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.positions)

    def __iter__(self):
        return iter(self.positions)

    def __contains__(self, position) -> bool:
        idx = bisect_left(self.positions, position)
        return idx < len(self.positions) and self.positions[idx] == position

    def items(self) -> list[tuple[int, str]]:
        return list(zip(self.positions, self.owners))

    def successor(self, position: int) -> str | None:
        """Owner of the first position ``>= position``, wrapping to the start."""
        if not self.positions:
            return None
        idx = bisect_left(self.positions, position)
        if idx == len(self.positions):
            idx = 0
        return self.owners[idx]


class HashRing:
    """Ordered index from ring position to host name.

    Every change builds a new :class:`RingSnapshot` and publishes it with a
    single assignment, so a concurrent :meth:`lookup` sees the ring either
    before or after the change. Callers must serialise writers.
    """

    def __init__(
        self,
        *,
        hash_func: Callable[[str], int] = hash64,
        ring_size: int = RING_SIZE,
    ) -> None:
        self.hash_func = hash_func
        self.ring_size = ring_size
        self._snapshot = RingSnapshot()

    @property
    def snapshot(self) -> RingSnapshot:
        return self._snapshot

    def __len__(self) -> int:
        return len(self._snapshot)

    def add(self, host: str, positions: Iterable[int]) -> None:
        """Insert ``positions`` owned by ``host``."""
        current = self._snapshot
        new_items = [(p, host) for p in positions]
        if len({p for p, _ in new_items}) != len(new_items):
            raise ValueError(f"duplicate positions for host {host!r}")
        for position, _ in new_items:
            if position in current:
                raise ValueError(f"position {position} is already owned")
        merged = sorted(current.items() + new_items)
        self._publish(merged)

    def remove(self, positions: Iterable[int]) -> None:
        """Drop ``positions`` from the ring."""
        doomed = set(positions)
        kept = [item for item in self._snapshot.items() if item[0] not in doomed]
        self._publish(kept)

    def _publish(self, items: list[tuple[int, str]]) -> None:
        self._snapshot = RingSnapshot(
            tuple(p for p, _ in items),
            tuple(owner for _, owner in items),
        )

    def lookup(self, key: str) -> str | None:
        """Return the host owning ``key`` or ``None`` for an empty ring."""
        snapshot = self._snapshot
        return snapshot.successor(self.hash_func(key))

    def ownership(self) -> dict[str, float]:
        """Fraction of the ring space owned by each host.

        A position owns the arc from its predecessor (exclusive) up to
        itself, the first position wrapping around from the last one.
        """
        snapshot = self._snapshot
        coverage: dict[str, float] = {}
        if not snapshot.positions:
            return coverage
        positions = snapshot.positions
        for i, (position, owner) in enumerate(snapshot.items()):
            if i == 0:
                arc = position + self.ring_size - positions[-1]
            else:
                arc = position - positions[i - 1]
            coverage[owner] = coverage.get(owner, 0) + arc
        return {owner: arc / self.ring_size for owner, arc in coverage.items()}
