"""Bitwise descent through the binary trie."""

import ipaddress
import logging
import threading

from .exceptions import NodeTraversalFailure

logger = logging.getLogger(__name__)

# IPv4 data lives under ::ffff:0:0/96: 80 zero bits followed by 16 one bits.
V4_PREFIX_BITS = 96
V4_PREFIX_ZERO_BITS = 80
V6_CACHE_BITS = 16

_UNSET = object()


def address_bits(ip):
    """Convert an address to its binary string, most significant bit first."""
    if isinstance(ip, ipaddress.IPv4Address):
        return format(int(ip), "032b")
    if isinstance(ip, ipaddress.IPv6Address):
        return format(int(ip), "0128b")
    raise TypeError(f"Unsupported IP type: {type(ip)}")


class AddressTraverser:
    """Finds the terminal reference for an address in the node table.

    Two caches are kept per instance: the node at the root of the IPv4
    subtree, and for IPv6 the node reached after the first 16 bits, keyed by
    those bits. Both are only ever filled from this instance's own store.
    """

    def __init__(self, store, node_count):
        self.store = store
        self.node_count = node_count
        self._cache_lock = threading.Lock()
        self._v4_root = _UNSET
        self._v6_cache = {}

    @property
    def v6_cache_size(self):
        return len(self._v6_cache)

    def _descend_v4_prefix(self):
        node = 0
        for i in range(V4_PREFIX_BITS):
            if node >= self.node_count:
                break
            node = self.store.read_child(node, 1 if i >= V4_PREFIX_ZERO_BITS else 0)

        if node >= self.node_count:
            # No IPv4 subtree below the mapped prefix
            return None
        return node

    def v4_root(self):
        """Return the IPv4 subtree root, or None if the trie has none."""
        if self._v4_root is _UNSET:
            with self._cache_lock:
                if self._v4_root is _UNSET:
                    self._v4_root = self._descend_v4_prefix()
                    logger.debug("Cached IPv4 subtree root: %s", self._v4_root)
        return self._v4_root

    def _remember_v6_prefix(self, key, node):
        with self._cache_lock:
            if key not in self._v6_cache:
                self._v6_cache[key] = node

    def find_node(self, ip):
        """Walk the trie for ``ip``.

        Args:
            ip: An ``IPv4Address`` or ``IPv6Address``

        Returns:
            The data pointer for the address, or None when the trie holds no
            record for it.
        """
        bits = address_bits(ip)
        start = 0
        key = None

        if ip.version == 4:
            node = self.v4_root()
            if node is None:
                return None
        else:
            key = bits[:V6_CACHE_BITS]
            node = self._v6_cache.get(key)
            if node is None:
                node = 0
            else:
                start = V6_CACHE_BITS

        for i in range(start, len(bits)):
            if node >= self.node_count:
                break
            node = self.store.read_child(node, int(bits[i]))
            if key is not None and i == V6_CACHE_BITS - 1:
                self._remember_v6_prefix(key, node)

        if node == self.node_count:
            return None
        if node > self.node_count:
            return node

        raise NodeTraversalFailure(
            f"find node failed: {ip} ended on internal node {node}"
        )
