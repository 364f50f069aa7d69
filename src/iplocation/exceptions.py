"""Exceptions raised by the IP database reader."""


class IPLocationError(Exception):
    """Base class for every error raised by iplocation."""


class DatabaseError(IPLocationError):
    """The database file cannot be opened as an IP database."""


class FileUnreadable(DatabaseError):
    """The database file does not exist or cannot be read."""


class SizeMismatch(DatabaseError):
    """The header sizes do not add up to the size of the file."""

    def __init__(self, expected, actual):
        super().__init__(
            f"IP database size error: header describes {expected} bytes, "
            f"file has {actual}"
        )
        self.expected = expected
        self.actual = actual


class MetadataInvalid(DatabaseError):
    """The metadata block is missing, malformed or incomplete."""


class UnsupportedLanguage(IPLocationError, ValueError):
    """The requested language is not present in the database."""

    def __init__(self, language):
        super().__init__(f"Language not supported: {language}")
        self.language = language


class InvalidAddress(IPLocationError, ValueError):
    """The value is not a valid IPv4 or IPv6 address."""

    def __init__(self, ip):
        super().__init__(f"Invalid IP address: {ip}")
        self.ip = ip


class UnsupportedAddressFamily(IPLocationError, ValueError):
    """The database holds no data for the address family of the query."""

    def __init__(self, version):
        super().__init__(f"The database does not support IPv{version} addresses")
        self.version = version


class DataIntegrityError(IPLocationError):
    """The database contents are inconsistent at lookup time."""


class TruncatedRead(DataIntegrityError):
    """Fewer bytes than requested were available in the database."""


class NodeTraversalFailure(DataIntegrityError):
    """All address bits were consumed without reaching a terminal node."""


class RecordDecodeError(DataIntegrityError):
    """A data record is not valid UTF-8."""


class RecordTooShort(DataIntegrityError):
    """A record holds fewer values than the language slice requires."""


class UseAfterClose(IPLocationError, RuntimeError):
    """The reader was used after close()."""

    def __init__(self):
        super().__init__("The IP database reader is closed")
