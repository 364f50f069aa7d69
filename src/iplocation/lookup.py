"""Process-wide readers and shortcut lookup functions."""

import logging
import os
import threading

from .config import DEFAULT_DATABASE, DEFAULT_LANGUAGE
from .exceptions import IPLocationError
from .reader import Reader

logger = logging.getLogger(__name__)

_READERS = {}
_READERS_LOCK = threading.Lock()


def get_reader(database=None):
    """Get or open the shared reader for ``database``.

    One reader is kept per database path, so each file has its own
    traversal caches.
    """
    path = os.path.abspath(os.fspath(database or DEFAULT_DATABASE))
    with _READERS_LOCK:
        reader = _READERS.get(path)
        if reader is None or reader.closed:
            reader = Reader(path)
            _READERS[path] = reader
    return reader


def close_all():
    """Close every shared reader."""
    with _READERS_LOCK:
        for reader in _READERS.values():
            reader.close()
        _READERS.clear()


def lookup(ip, language=DEFAULT_LANGUAGE, database=None):
    """Main lookup function for both IPv4 and IPv6."""
    return get_reader(database).find_map(ip, language)


def _field_for_ip(ip, index, language, database):
    try:
        values = get_reader(database).find(ip, language)
    except IPLocationError as e:
        logger.debug("Lookup of %s failed: %s", ip, e)
        return None

    if values and len(values) > index:
        return values[index] or None
    return None


def get_country_for_ip(ip, language=DEFAULT_LANGUAGE, database=None):
    """Get the first field (the country) for an IP address."""
    return _field_for_ip(ip, 0, language, database)


def get_city_for_ip(ip, language=DEFAULT_LANGUAGE, database=None):
    """Get the second field of the record for an IP address.

    Returns None instead of raising, so callers rendering pages can use it
    unconditionally.
    """
    return _field_for_ip(ip, 1, language, database)
