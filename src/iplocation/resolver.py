"""Decoding of the length-prefixed records in the data segment."""

import struct

from .exceptions import RecordDecodeError, RecordTooShort
from .nodes import NODE_SIZE

RECORD_LENGTH_SIZE = 2
FIELD_SEPARATOR = "\t"


def split_record(raw):
    """Split raw record bytes into the list of field values."""
    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise RecordDecodeError(f"Record is not valid UTF-8: {e}") from e
    return text.split(FIELD_SEPARATOR)


def slice_fields(values, offset, count):
    """Return ``count`` values starting at ``offset``.

    Raises RecordTooShort instead of silently returning a partial slice.
    """
    end = offset + count
    if offset < 0 or end > len(values):
        raise RecordTooShort(
            f"Record has {len(values)} values, need [{offset}:{end}]"
        )
    return values[offset:end]


class RecordResolver:
    """Turns data pointers from the trie into decoded field lists."""

    def __init__(self, store, node_count, file_size):
        self.store = store
        self.node_count = node_count
        self.file_size = file_size

    def data_offset(self, pointer):
        """Offset of a record relative to the start of the node table."""
        return pointer - self.node_count + self.node_count * NODE_SIZE

    def read_record(self, pointer):
        """Return the raw bytes of the record, or None if it lies past the file."""
        offset = self.data_offset(pointer)
        if self.store.node_offset + offset >= self.file_size:
            return None

        (size,) = struct.unpack(">H", self.store.read(offset, RECORD_LENGTH_SIZE))
        return self.store.read(offset + RECORD_LENGTH_SIZE, size)

    def resolve(self, pointer):
        """Return every value stored in the record for ``pointer``, or None."""
        raw = self.read_record(pointer)
        if raw is None:
            return None
        return split_record(raw)
