"""Hash ring, replica placement and routing."""

# Re-export commonly used names lazily so importing one submodule does not
# pull in the others.
from importlib import import_module

def __getattr__(name):
    module_map = {
        "Router": "router",
        "HashRing": "hash_ring",
        "RingSnapshot": "hash_ring",
        "HostInfo": "registry",
        "HostRegistry": "registry",
        "validate_weight": "registry",
        "PlacementError": "placement",
        "compute_replica_count": "placement",
        "place_replicas": "placement",
    }
    if name in module_map:
        mod = import_module(f"{__name__}.{module_map[name]}")
        return getattr(mod, name)
    raise AttributeError(name)
