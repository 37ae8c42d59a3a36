"""Job node definitions for workflow archives."""

import io
from dataclasses import dataclass, field
from typing import BinaryIO


def read_content(content: bytes | BinaryIO) -> bytes:
    """Return content as bytes, draining it if it is a readable stream."""
    if isinstance(content, (bytes, bytearray, memoryview)):
        return bytes(content)
    return content.read()


@dataclass
class Node:
    """
    One job of a workflow.

    A node is expected to carry a single script, but files are kept by name
    so that archives holding more than one file per node still round-trip.
    """

    name: str
    files: dict[str, bytes] = field(default_factory=dict)

    def add_file(self, file_name: str, content: bytes | BinaryIO) -> None:
        """Store a file, replacing any file with the same name."""
        self.files[file_name] = read_content(content)

    def get_file(self, file_name: str) -> BinaryIO | None:
        """Get a fresh reader over a stored file, or None if absent."""
        if file_name not in self.files:
            return None
        return io.BytesIO(self.files[file_name])

    def file_names(self) -> list[str]:
        """File names in the order they are written to an archive."""
        return sorted(self.files)

    @property
    def script(self) -> str | None:
        """Name of the node's script when it holds exactly one file."""
        if len(self.files) != 1:
            return None
        return next(iter(self.files))

    def is_empty(self) -> bool:
        return not self.files
