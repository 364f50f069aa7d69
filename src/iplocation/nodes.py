"""Fixed-stride access to the node table and the data segment behind it."""

import struct
import threading

from .exceptions import TruncatedRead

NODE_SIZE = 8
CHILD_SIZE = 4


class NodeStore:
    """Positional reads relative to the start of the node table.

    Each node is two big-endian uint32 child references, one per bit value.
    Seek and read are serialised so one store can be shared between threads.
    """

    def __init__(self, stream, node_offset):
        self.stream = stream
        self.node_offset = node_offset
        self._lock = threading.Lock()

    def read(self, offset, length):
        """Read exactly ``length`` bytes at ``offset`` past the node table base."""
        if length <= 0:
            return b""

        with self._lock:
            self.stream.seek(self.node_offset + offset)
            value = self.stream.read(length)

        if len(value) != length:
            raise TruncatedRead(
                f"The database file read bad data: wanted {length} bytes at "
                f"offset {offset}, got {len(value)}"
            )
        return value

    def read_child(self, node, bit):
        """Return the child reference of ``node`` selected by ``bit``."""
        (child,) = struct.unpack(
            ">I", self.read(node * NODE_SIZE + bit * CHILD_SIZE, CHILD_SIZE)
        )
        return child
