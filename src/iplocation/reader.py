"""Lookup facade over an opened IP database file."""

import ipaddress
import logging
import os

from .config import DEFAULT_LANGUAGE
from .exceptions import (
    DatabaseError,
    DataIntegrityError,
    FileUnreadable,
    InvalidAddress,
    UnsupportedAddressFamily,
    UnsupportedLanguage,
    UseAfterClose,
)
from .metadata import load_metadata
from .nodes import NodeStore
from .resolver import RecordResolver, slice_fields
from .traversal import AddressTraverser

logger = logging.getLogger(__name__)


def parse_address(ip):
    """Parse ``ip`` into an ``IPv4Address`` or ``IPv6Address``.

    Raises InvalidAddress for anything that is not a plain textual address
    or address object. Scoped IPv6 addresses (``fe80::1%eth0``) are rejected.
    """
    if isinstance(ip, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        address = ip
    elif isinstance(ip, str):
        try:
            address = ipaddress.ip_address(ip.strip())
        except ValueError as exc:
            raise InvalidAddress(ip) from exc
    else:
        raise InvalidAddress(ip)

    if getattr(address, "scope_id", None):
        raise InvalidAddress(ip)
    return address


class Reader:
    """Read-only lookups against an IP database file.

    The file is opened and validated on construction and stays open until
    close() is called. Lookups may be issued from several threads.
    """

    def __init__(self, database):
        """Open a database.

        Args:
            database: Path to the database file
        """
        self.database = os.fspath(database)

        try:
            self._file = open(self.database, "rb")
        except OSError as exc:
            raise FileUnreadable(
                f'The IP database file "{self.database}" does not exist '
                f"or is not readable: {exc.strerror}"
            ) from exc

        try:
            self.file_size = os.fstat(self._file.fileno()).st_size
            self._meta = load_metadata(self._file, self.file_size)
        except OSError as exc:
            self._file.close()
            raise FileUnreadable(
                f'Error reading the IP database file "{self.database}": {exc}'
            ) from exc
        except DatabaseError:
            self._file.close()
            raise

        self._store = NodeStore(self._file, self._meta.node_offset)
        self._traverser = AddressTraverser(self._store, self._meta.node_count)
        self._resolver = RecordResolver(
            self._store, self._meta.node_count, self.file_size
        )
        logger.debug("Opened IP database %s (%d bytes)", self.database, self.file_size)

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __repr__(self):
        state = "closed" if self.closed else "open"
        return f"<Reader {self.database!r} {state}>"

    @property
    def closed(self):
        return self._file.closed

    @property
    def metadata(self):
        return self._meta

    @property
    def fields(self):
        return list(self._meta.fields)

    @property
    def languages(self):
        return dict(self._meta.languages)

    @property
    def node_count(self):
        return self._meta.node_count

    @property
    def build_time(self):
        return self._meta.build_time

    def support_v4(self):
        return self._meta.support_v4()

    def support_v6(self):
        return self._meta.support_v6()

    def _check_query(self, ip, language):
        if self.closed:
            raise UseAfterClose()

        if not isinstance(language, str) or language not in self._meta.languages:
            raise UnsupportedLanguage(language)

        address = parse_address(ip)
        if address.version == 4 and not self.support_v4():
            raise UnsupportedAddressFamily(4)
        if address.version == 6 and not self.support_v6():
            raise UnsupportedAddressFamily(6)
        return address

    def find(self, ip, language=DEFAULT_LANGUAGE):
        """Look up the field values of ``ip`` in ``language``.

        Args:
            ip: Textual IPv4/IPv6 address or an ipaddress object
            language: Language code present in the database metadata

        Returns:
            list: One value per metadata field, in field order, or None if the
            database has no record for the address.
        """
        address = self._check_query(ip, language)

        try:
            pointer = self._traverser.find_node(address)
            if pointer is None:
                return None

            values = self._resolver.resolve(pointer)
            if values is None:
                return None

            return slice_fields(
                values, self._meta.languages[language], len(self._meta.fields)
            )
        except DataIntegrityError as e:
            logger.warning("Lookup of %s failed, treating as not found: %s", address, e)
            return None

    def find_map(self, ip, language=DEFAULT_LANGUAGE):
        """Like find(), but returns a dict keyed by field name."""
        values = self.find(ip, language)
        if values is None:
            return None
        return dict(zip(self._meta.fields, values))

    def close(self):
        """Release the database file. Calling it again has no effect."""
        if not self._file.closed:
            self._file.close()
            logger.debug("Closed IP database %s", self.database)
