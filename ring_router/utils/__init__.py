from .hashing import hash64, RING_BITS, RING_SIZE
from .event_logger import EventLogger
