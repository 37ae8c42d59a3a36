"""
Workflow archive model - Decodes and encodes gUSE workflow zip files.

Layout of a workflow zip:
1. workflow.xml at the zip root (the manifest, kept as opaque bytes)
2. <base>/ - shared top-level directory
3. <base>/<node>/ - one directory per job node
4. <base>/<node>/<file> - the node's script
"""

import io
import logging
import zipfile
import zlib
from pathlib import Path
from typing import BinaryIO

from ..constants import (
    DIR_MODE,
    DOS_DIRECTORY_FLAG,
    FILE_ENTRY_DEPTH,
    MANIFEST_MODE,
    MANIFEST_NAME,
    SCRIPT_MODE,
    ZIP_EPOCH,
)
from ..errors import FormatError, NotFoundError
from ..locator import open_resource
from .node import Node, read_content

logger = logging.getLogger(__name__)


def split_entry_name(name: str) -> list[str]:
    """Split a zip entry name on '/', dropping trailing empty segments."""
    parts = name.split("/")
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def _dir_info(name: str) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=ZIP_EPOCH)
    info.external_attr = (DIR_MODE << 16) | DOS_DIRECTORY_FLAG
    info.compress_type = zipfile.ZIP_STORED
    return info


def _read_entry(zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> bytes:
    """Read an entry's bytes, turning corrupt entry data into FormatError."""
    try:
        return zf.read(info)
    except (zipfile.BadZipFile, zlib.error) as err:
        raise FormatError(f"Corrupt entry {info.filename}: {err}") from err


def _file_info(name: str, mode: int, compression: int) -> zipfile.ZipInfo:
    info = zipfile.ZipInfo(name, date_time=ZIP_EPOCH)
    info.external_attr = mode << 16
    info.compress_type = compression
    return info


class WorkflowArchive:
    """
    In-memory model of a gUSE workflow zip.

    Build one with from_stream(), from_path() or from_uri(); change it with
    add_file(); turn it back into a zip with as_zip_stream().
    """

    def __init__(self, base_name: str | None = None, manifest: bytes = b""):
        self.base_name = base_name
        self.manifest = manifest
        self.nodes: dict[str, Node] = {}

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> "WorkflowArchive":
        """
        Decode a workflow archive from a readable zip stream.

        The stream is read but not closed; the caller owns it.

        Raises:
            FormatError: If the zip does not follow the workflow layout
        """
        if not stream.seekable():
            stream = io.BytesIO(stream.read())

        try:
            zf = zipfile.ZipFile(stream)
        except zipfile.BadZipFile as err:
            raise FormatError(f"Not a zip archive: {err}") from err

        archive = cls()
        manifest: bytes | None = None

        with zf:
            for info in zf.infolist():
                name = info.filename

                if name == MANIFEST_NAME:
                    manifest = _read_entry(zf, info)
                    continue

                parts = split_entry_name(name)
                if len(parts) < FILE_ENTRY_DEPTH:
                    logger.debug(f"Skipping directory entry: {name}")
                    continue

                if len(parts) > FILE_ENTRY_DEPTH or info.is_dir():
                    raise FormatError(
                        f"Entry nested beyond two levels, or unexpected directory at file depth: {name}"
                    )

                base_name, node_name, file_name = parts
                if archive.base_name is None:
                    archive.base_name = base_name
                elif archive.base_name != base_name:
                    raise FormatError(f"Entry {name} is outside base directory {archive.base_name}/")

                node = archive.nodes.get(node_name)
                if node is None:
                    node = archive.nodes[node_name] = Node(node_name)
                elif file_name not in node.files and node.files:
                    logger.warning(f"Node {node_name} holds more than one file: {file_name}")

                node.add_file(file_name, _read_entry(zf, info))

        if manifest is None:
            raise FormatError(f"Manifest entry absent: {MANIFEST_NAME}")
        archive.manifest = manifest

        logger.info(f"Decoded workflow archive {archive.base_name}/ with {len(archive.nodes)} nodes")
        return archive

    @classmethod
    def from_path(cls, path: Path | str) -> "WorkflowArchive":
        """Decode a workflow archive from a zip file on disk."""
        return cls.from_uri(path)

    @classmethod
    def from_uri(cls, ref: Path | str) -> "WorkflowArchive":
        """
        Decode a workflow archive from a path or file:// URI.

        The underlying file is closed whether decoding succeeds or not.
        """
        with open_resource(ref) as stream:
            return cls.from_stream(stream)

    def as_zip_bytes(self, compression: int = zipfile.ZIP_DEFLATED, compress_level: int | None = None) -> bytes:
        """
        Encode the archive as zip bytes.

        Entries are written as: base directory, then per node (sorted by
        name) its directory and files, then workflow.xml at the zip root.
        An archive without nodes or base directory holds only workflow.xml.

        Raises:
            FormatError: If there are nodes but no base directory
        """
        if self.base_name is None and self.nodes:
            raise FormatError("Cannot encode workflow nodes without a base directory")

        buffer = io.BytesIO()
        entries = 0
        with zipfile.ZipFile(buffer, "w", compression=compression, compresslevel=compress_level) as zf:
            if self.base_name is not None:
                zf.writestr(_dir_info(f"{self.base_name}/"), b"")
                entries += 1

            for node_name in sorted(self.nodes):
                node = self.nodes[node_name]
                prefix = f"{self.base_name}/{node_name}/"
                zf.writestr(_dir_info(prefix), b"")
                entries += 1
                for file_name in node.file_names():
                    info = _file_info(prefix + file_name, SCRIPT_MODE, compression)
                    zf.writestr(info, node.files[file_name], compresslevel=compress_level)
                    entries += 1

            info = _file_info(MANIFEST_NAME, MANIFEST_MODE, compression)
            zf.writestr(info, self.manifest, compresslevel=compress_level)
            entries += 1

        logger.debug(f"Encoded {entries} entries")
        return buffer.getvalue()

    def as_zip_stream(self, compression: int = zipfile.ZIP_DEFLATED, compress_level: int | None = None) -> BinaryIO:
        """Encode the archive and return a readable stream positioned at the start."""
        return io.BytesIO(self.as_zip_bytes(compression, compress_level))

    def add_file(self, node_name: str, file_name: str, content: bytes | BinaryIO) -> None:
        """
        Store a file on an existing node, replacing a file of the same name.

        Raises:
            NotFoundError: If the node does not exist (nodes are never created here)
        """
        node = self.nodes.get(node_name)
        if node is None:
            raise NotFoundError(node_name)
        node.add_file(file_name, read_content(content))
        logger.debug(f"Stored {file_name} on node {node_name}")

    def get_file(self, node_name: str, file_name: str) -> BinaryIO:
        """
        Get a fresh reader over a node's file.

        Raises:
            NotFoundError: If the node or the file does not exist
        """
        node = self.nodes.get(node_name)
        if node is None:
            raise NotFoundError(node_name)
        stream = node.get_file(file_name)
        if stream is None:
            raise NotFoundError(node_name, file_name)
        return stream

    def list_node_names(self) -> set[str]:
        """Get the names of all nodes in the archive."""
        return set(self.nodes)

    def __repr__(self) -> str:
        return f"WorkflowArchive(base_name={self.base_name!r}, nodes={sorted(self.nodes)!r})"
