"""Naming for uploaded image objects."""

import secrets
import time
from pathlib import PurePosixPath
from urllib.parse import quote


def object_path(uploader_username: str, filename: str) -> str:
    """Return ``<uploader>/<millis>-<random>.<ext>`` for a new upload."""
    suffix = PurePosixPath(filename).suffix.lower()
    token = secrets.token_hex(6)
    folder = quote(uploader_username, safe="")
    return f"{folder}/{int(time.time() * 1000)}-{token}{suffix}"
