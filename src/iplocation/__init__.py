"""
Offline IP-to-location lookup against IP database files.

An IP database file holds a binary trie over IPv4 and IPv6 addresses and a
data segment of tab-separated records, one value per field and language.
This library opens such a file read-only and resolves addresses to their
location fields.
"""

__version__ = "1.0.0"

from .exceptions import (
    DatabaseError,
    DataIntegrityError,
    FileUnreadable,
    InvalidAddress,
    IPLocationError,
    MetadataInvalid,
    NodeTraversalFailure,
    RecordDecodeError,
    RecordTooShort,
    SizeMismatch,
    TruncatedRead,
    UnsupportedAddressFamily,
    UnsupportedLanguage,
    UseAfterClose,
)
from .lookup import (
    close_all,
    get_city_for_ip,
    get_country_for_ip,
    get_reader,
    lookup,
)
from .metadata import Metadata
from .reader import Reader

__all__ = [
    "Reader",
    "Metadata",
    "lookup",
    "get_reader",
    "get_city_for_ip",
    "get_country_for_ip",
    "close_all",
    "IPLocationError",
    "DatabaseError",
    "FileUnreadable",
    "SizeMismatch",
    "MetadataInvalid",
    "UnsupportedLanguage",
    "InvalidAddress",
    "UnsupportedAddressFamily",
    "DataIntegrityError",
    "TruncatedRead",
    "NodeTraversalFailure",
    "RecordDecodeError",
    "RecordTooShort",
    "UseAfterClose",
]
