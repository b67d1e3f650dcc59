"""Ring hash shared by replica placement and key routing.

Positions are the low 64 bits of MurmurHash3 (x64, 128-bit variant) over
the UTF-8 encoding of the input, seed ``0``. The output is identical across
processes, platforms and Python versions, unlike the built-in ``hash``.
"""

import mmh3

RING_BITS = 64
RING_SIZE = 1 << RING_BITS
HASH_SEED = 0


def hash64(value: str) -> int:
    """Return the unsigned 64-bit ring position for ``value``."""
    return mmh3.hash64(value.encode("utf-8"), seed=HASH_SEED, x64arch=True, signed=False)[0]
