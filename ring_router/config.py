"""Configuration models for the load simulation driver."""

from pydantic import BaseModel, Field, field_validator

from .clustering.placement import (
    MIN_REPLICA_COUNT,
    MAX_REPLICA_COUNT,
    MIN_WEIGHT,
    MAX_WEIGHT,
)

DEFAULT_REPLICA_COUNT = 128
DEFAULT_REQUEST_COUNT = 100_000
DEFAULT_KEY_LENGTH = 8


class HostSpec(BaseModel):
    name: str = Field(min_length=1)
    weight: float = Field(default=1.0, ge=MIN_WEIGHT, le=MAX_WEIGHT)

    @classmethod
    def parse(cls, text: str) -> "HostSpec":
        """Build a spec from ``name=weight`` or a bare ``name`` (weight 1.0)."""
        name, sep, weight = text.partition("=")
        if not sep:
            return cls(name=name.strip())
        return cls(name=name.strip(), weight=weight.strip())


DEFAULT_HOSTS = [
    HostSpec(name="srv-01", weight=4.0),
    HostSpec(name="srv-02", weight=2.0),
    HostSpec(name="srv-03", weight=2.0),
    HostSpec(name="srv-04", weight=2.0),
    HostSpec(name="srv-05", weight=2.0),
    HostSpec(name="srv-06", weight=2.0),
]


class SimulationConfig(BaseModel):
    """Settings for one simulated routing run."""

    replicas: int = Field(
        default=DEFAULT_REPLICA_COUNT, ge=MIN_REPLICA_COUNT, le=MAX_REPLICA_COUNT
    )
    requests: int = Field(default=DEFAULT_REQUEST_COUNT, gt=0)
    key_length: int = Field(default=DEFAULT_KEY_LENGTH, gt=0)
    seed: int | None = None
    hosts: list[HostSpec] = Field(default_factory=lambda: list(DEFAULT_HOSTS))
    remove: list[str] = Field(default_factory=list)
    event_log: str | None = None
    verbose: bool = False

    @field_validator("hosts")
    @classmethod
    def _unique_hosts(cls, hosts: list[HostSpec]) -> list[HostSpec]:
        seen = set()
        for spec in hosts:
            if spec.name in seen:
                raise ValueError(f"host {spec.name!r} listed twice")
            seen.add(spec.name)
        return hosts
