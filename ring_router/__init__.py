"""Weighted consistent-hashing router."""

from .clustering.router import Router
from .clustering.placement import PlacementError
from .clustering.registry import HostInfo

__all__ = ["Router", "PlacementError", "HostInfo"]
