"""
Resource locator and sink for workflow archives.

Turns a path or file:// URI into a readable stream, and writes an encoded
archive stream to disk.
"""

import logging
import shutil
from pathlib import Path
from typing import BinaryIO
from urllib.parse import urlparse
from urllib.request import url2pathname

logger = logging.getLogger(__name__)


def resolve_resource(ref: Path | str) -> Path:
    """
    Resolve a path or file:// URI to a local path.

    Raises:
        ValueError: If the URI scheme is not supported
    """
    if isinstance(ref, Path):
        return ref

    parsed = urlparse(ref)
    if parsed.scheme == "file":
        if parsed.netloc not in ("", "localhost"):
            raise ValueError(f"Remote file URIs are not supported: {ref}")
        return Path(url2pathname(parsed.path))

    # Single letters are Windows drive prefixes, not schemes
    if parsed.scheme and len(parsed.scheme) > 1:
        raise ValueError(f"Unsupported URI scheme '{parsed.scheme}': {ref}")

    return Path(ref)


def open_resource(ref: Path | str) -> BinaryIO:
    """Open a path or file:// URI for binary reading."""
    path = resolve_resource(ref)
    logger.debug(f"Opening {path}")
    return open(path, "rb")


def write_stream(stream: BinaryIO, dest: Path, overwrite: bool = False, chunk_size: int = 64 * 1024) -> int:
    """
    Copy a binary stream to a file.

    Args:
        stream: Readable binary stream, e.g. from WorkflowArchive.as_zip_stream()
        dest: Destination file
        overwrite: Replace dest if it already exists
        chunk_size: Copy buffer size

    Returns:
        Number of bytes written

    Raises:
        FileExistsError: If dest exists and overwrite is False
    """
    if dest.exists() and not overwrite:
        raise FileExistsError(f"Output file exists: {dest}")

    dest.parent.mkdir(parents=True, exist_ok=True)
    with open(dest, "wb") as f:
        shutil.copyfileobj(stream, f, chunk_size)
        written = f.tell()

    logger.info(f"Wrote {written} bytes to {dest}")
    return written
