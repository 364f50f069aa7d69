"""Default paths and lookup settings."""

import os
from pathlib import Path

APP_NAME = "iplocation"

DEFAULT_LANGUAGE = os.environ.get("IPLOCATION_LANGUAGE", "CN")

DATA_DIR = Path(
    os.environ.get("IPLOCATION_DATA_DIR", Path.home() / f".{APP_NAME}")
)
DEFAULT_DATABASE = Path(
    os.environ.get("IPLOCATION_DB", DATA_DIR / "ipipfree.ipdb")
)

# Bits of the address family field in the database metadata
IPV4 = 1
IPV6 = 2
