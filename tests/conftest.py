"""Fixtures that write small IP database files for the tests."""

import ipaddress
import json
import struct

import pytest

V4_MAPPED_PREFIX = "0" * 80 + "1" * 16


def pack_record(text):
    raw = text.encode("utf-8") if isinstance(text, str) else text
    return struct.pack(">H", len(raw)) + raw


def build_raw_database(nodes, data, meta, total_size=None):
    """Assemble database bytes from a node list and a data segment."""
    table = b"".join(struct.pack(">II", left, right) for left, right in nodes)
    meta = dict(meta)
    meta.setdefault("node_count", len(nodes))
    meta.setdefault(
        "total_size", len(table) + len(data) if total_size is None else total_size
    )
    text = json.dumps(meta, ensure_ascii=False).encode("utf-8")
    return struct.pack(">I", len(text)) + text + table + data


def network_bits(network):
    network = ipaddress.ip_network(network)
    if network.version == 4:
        bits = format(int(network.network_address), "032b")
        return V4_MAPPED_PREFIX + bits[: network.prefixlen]
    return format(int(network.network_address), "0128b")[: network.prefixlen]


class DatabaseBuilder:
    """Builds a trie from networks the same way a database compiler would."""

    def __init__(self, fields, languages, ip_version=3, build=None):
        self.fields = fields
        self.languages = languages
        self.ip_version = ip_version
        self.build = build
        self.root = [None, None]

    def insert(self, network, values):
        bits = network_bits(network)
        node = self.root
        for bit in bits[:-1]:
            child = node[int(bit)]
            if child is None:
                child = [None, None]
                node[int(bit)] = child
            node = child
        node[int(bits[-1])] = "\t".join(values)
        return self

    def to_bytes(self):
        order = []
        queue = [self.root]
        while queue:
            node = queue.pop(0)
            order.append(node)
            queue.extend(c for c in node if isinstance(c, list))
        ids = {id(node): i for i, node in enumerate(order)}
        node_count = len(order)

        # Offset 0 of the data segment would collide with the empty marker
        data = bytearray(pack_record(""))
        record_offsets = {}

        def ref(child):
            if child is None:
                return node_count
            if isinstance(child, list):
                return ids[id(child)]
            if child not in record_offsets:
                record_offsets[child] = len(data)
                data.extend(pack_record(child))
            return node_count + record_offsets[child]

        nodes = [(ref(node[0]), ref(node[1])) for node in order]
        meta = {
            "fields": self.fields,
            "languages": self.languages,
            "ip_version": self.ip_version,
        }
        if self.build is not None:
            meta["build"] = self.build
        return build_raw_database(nodes, bytes(data), meta)

    def write(self, path):
        path.write_bytes(self.to_bytes())
        return path


@pytest.fixture
def city_db(tmp_path):
    """Dual-stack database with Chinese and English values."""
    builder = DatabaseBuilder(
        ["country_name", "city_name"], {"CN": 0, "EN": 2}, build=1700000000
    )
    builder.insert("1.2.3.0/24", ["中国", "北京", "China", "Beijing"])
    builder.insert("8.8.8.0/24", ["美国", "山景城", "United States", "Mountain View"])
    builder.insert("2001:db8::/32", ["日本", "东京", "Japan", "Tokyo"])
    builder.insert("2001:db9::/32", ["德国", "柏林", "Germany", "Berlin"])
    return builder.write(tmp_path / "city.ipdb")


@pytest.fixture
def make_db(tmp_path):
    """Write arbitrary database bytes and return the path."""
    counter = iter(range(1000))

    def write(content):
        path = tmp_path / f"db{next(counter)}.ipdb"
        path.write_bytes(content)
        return path

    return write
