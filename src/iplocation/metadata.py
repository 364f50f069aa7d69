"""Parsing of the database header."""

import json
import logging
import struct
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType

from .config import IPV4, IPV6
from .exceptions import MetadataInvalid, SizeMismatch

logger = logging.getLogger(__name__)

HEADER_LENGTH_SIZE = 4


@dataclass(frozen=True)
class Metadata:
    """Typed view of the JSON metadata block at the start of the file."""

    fields: tuple
    languages: MappingProxyType = field(hash=False)
    node_count: int
    total_size: int
    ip_version: int
    node_offset: int  # absolute position of the node table
    build: int | None = None

    def __post_init__(self):
        # Read-only views, so callers cannot change lookup validation
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "languages", MappingProxyType(dict(self.languages)))

    def support_v4(self):
        return self.ip_version & IPV4 == IPV4

    def support_v6(self):
        return self.ip_version & IPV6 == IPV6

    @property
    def build_time(self):
        if self.build is None:
            return None
        return datetime.fromtimestamp(self.build, tz=timezone.utc)


def _require_int(meta, key):
    value = meta.get(key)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MetadataInvalid(f"IP database metadata error: bad '{key}': {value!r}")
    return value


def parse_metadata(text, node_offset):
    """Build a Metadata object from the raw metadata bytes.

    Args:
        text: The metadata block as read from the file
        node_offset: Absolute offset of the node table

    Returns:
        Metadata: The validated metadata
    """
    try:
        meta = json.loads(text.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise MetadataInvalid(f"IP database metadata error: {e}") from e

    if not isinstance(meta, dict) or "fields" not in meta or "languages" not in meta:
        raise MetadataInvalid("IP database metadata error: missing fields or languages")

    fields = meta["fields"]
    languages = meta["languages"]
    if not isinstance(fields, list) or not all(isinstance(f, str) for f in fields):
        raise MetadataInvalid("IP database metadata error: 'fields' must be a list of strings")
    if not isinstance(languages, dict):
        raise MetadataInvalid("IP database metadata error: 'languages' must be an object")
    for code in languages:
        _require_int(languages, code)

    build = meta.get("build")
    if build is not None:
        build = _require_int(meta, "build")

    return Metadata(
        fields=tuple(fields),
        languages=dict(languages),
        node_count=_require_int(meta, "node_count"),
        total_size=_require_int(meta, "total_size"),
        ip_version=_require_int(meta, "ip_version"),
        node_offset=node_offset,
        build=build,
    )


def load_metadata(stream, file_size):
    """Read and validate the header of a database stream.

    The stream must be positioned at the start of the file. The total size
    described by the header has to match the file size exactly.
    """
    raw_length = stream.read(HEADER_LENGTH_SIZE)
    if len(raw_length) != HEADER_LENGTH_SIZE:
        raise MetadataInvalid("IP database metadata error: file too short for header")
    (meta_length,) = struct.unpack(">I", raw_length)

    text = stream.read(meta_length)
    if len(text) != meta_length:
        raise MetadataInvalid("IP database metadata error: truncated metadata block")

    metadata = parse_metadata(text, HEADER_LENGTH_SIZE + meta_length)

    expected = HEADER_LENGTH_SIZE + meta_length + metadata.total_size
    if expected != file_size:
        raise SizeMismatch(expected, file_size)

    logger.debug(
        "Loaded metadata: %d nodes, languages=%s, fields=%s",
        metadata.node_count,
        sorted(metadata.languages),
        list(metadata.fields),
    )
    return metadata
