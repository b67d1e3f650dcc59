import math
from dataclasses import dataclass

from .placement import MIN_WEIGHT, MAX_WEIGHT


@dataclass(frozen=True)
class HostInfo:
    """A registered backend and the ring positions it owns."""

    name: str
    weight: float
    positions: tuple[int, ...] = ()

    @property
    def replica_count(self) -> int:
        return len(self.positions)


def validate_weight(weight) -> bool:
    """Return ``True`` if ``weight`` is a real number in ``[0.0, 16.0]``."""
    if isinstance(weight, bool) or not isinstance(weight, (int, float)):
        return False
    if math.isnan(weight):
        return False
    return MIN_WEIGHT <= weight <= MAX_WEIGHT


class HostRegistry:
    """Name-keyed store owning every :class:`HostInfo` record."""

    def __init__(self) -> None:
        self._hosts: dict[str, HostInfo] = {}

    def __contains__(self, name: str) -> bool:
        return name in self._hosts

    def __len__(self) -> int:
        return len(self._hosts)

    def __iter__(self):
        return iter(sorted(self._hosts))

    def get(self, name: str) -> HostInfo | None:
        return self._hosts.get(name)

    def add(self, info: HostInfo) -> None:
        """Register ``info``. Raises ``KeyError`` if the name is taken."""
        if info.name in self._hosts:
            raise KeyError(info.name)
        self._hosts[info.name] = info

    def pop(self, name: str) -> HostInfo:
        """Remove and return the record for ``name``."""
        return self._hosts.pop(name)

    def total_weight(self) -> float:
        return sum(info.weight for info in self._hosts.values())
