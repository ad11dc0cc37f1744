#!/usr/bin/env python3
"""
Byte storage for documents
Resolves document uris to local files and wraps I/O failures
"""

# Standard library imports
import os
from pathlib import Path
from typing import Union
from urllib.parse import unquote, urlparse

from .pixeledit_constants import FILE_SCHEME, UNTITLED_SCHEME
from .pixeledit_exceptions import BackupDeleteError, ReadError, WriteError
from .pixeledit_utils import debug_log

Uri = Union[str, Path]


def is_untitled(uri: Uri) -> bool:
    """Check whether a uri names a document with no backing file"""
    return isinstance(uri, str) and uri.startswith(f"{UNTITLED_SCHEME}:")


def uri_to_path(uri: Uri) -> Path:
    """Convert a file uri or plain path to a local path"""
    if isinstance(uri, Path):
        return uri
    parsed = urlparse(uri)
    if parsed.scheme == FILE_SCHEME:
        return Path(unquote(parsed.path))
    return Path(uri)


class FileStorage:
    """Reads and writes document bytes on the local file system"""

    def read_file(self, uri: Uri) -> bytes:
        """Read the bytes behind a uri, untitled documents read as empty

        Raises:
            ReadError: If the file cannot be read
        """
        if is_untitled(uri):
            return b""
        path = uri_to_path(uri)
        try:
            return path.read_bytes()
        except OSError as e:
            raise ReadError(f"Cannot read {path}: {e.strerror or e}") from e

    def write_file(self, uri: Uri, data: bytes) -> None:
        """Write bytes to a uri, creating parent directories

        Raises:
            WriteError: If the file cannot be written
        """
        if is_untitled(uri):
            raise WriteError(f"Cannot write to untitled document {uri}")
        path = uri_to_path(uri)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise WriteError(f"Cannot write {path}: {e.strerror or e}") from e
        debug_log("STORAGE", f"Wrote {len(data)} bytes to {path}", "DEBUG")

    def delete(self, uri: Uri) -> None:
        """Delete the file behind a uri

        Raises:
            BackupDeleteError: If the file cannot be deleted
        """
        path = uri_to_path(uri)
        try:
            path.unlink()
        except OSError as e:
            raise BackupDeleteError(f"Cannot delete {path}: {e.strerror or e}") from e

    def is_writable(self, uri: Uri) -> bool:
        """Check whether saving to a uri can succeed"""
        if is_untitled(uri):
            return True
        path = uri_to_path(uri)
        if path.exists():
            return os.access(path, os.W_OK)
        parent = path.parent
        while not parent.exists() and parent != parent.parent:
            parent = parent.parent
        return os.access(parent, os.W_OK)
