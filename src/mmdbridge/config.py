"""Paths, open modes, and HTTP settings."""

from pathlib import Path

import maxminddb

APP_NAME = "mmdbridge"

# Local storage
DATA_DIR = Path.home() / ".mmdbridge"
DATABASE_FILENAME = "database.mmdb"
METADATA_FILENAME = "database.json"
DEFAULT_DATABASE = DATA_DIR / DATABASE_FILENAME

# Environment overrides, read through click options
DATABASE_ENV = "MMDBRIDGE_DATABASE"
DATA_DIR_ENV = "MMDBRIDGE_DATA_DIR"

# Decoder open modes. Memory mode reads the whole file up front.
DEFAULT_MODE = maxminddb.MODE_MEMORY
MODES = {
    "auto": maxminddb.MODE_AUTO,
    "mmap": maxminddb.MODE_MMAP,
    "file": maxminddb.MODE_FILE,
    "memory": maxminddb.MODE_MEMORY,
}

# HTTP
TIMEOUT = (10, 60)
MAX_RETRIES = 3
RETRY_BACKOFF = 1.0
CHUNK_SIZE = 8192
