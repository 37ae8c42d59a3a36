class GuseZipError(Exception):
    """Base class for guse-zip errors."""


class FormatError(GuseZipError):
    """The archive violates the gUSE workflow zip layout."""


class NotFoundError(GuseZipError, LookupError):
    """A node or file name is not present in the archive."""

    def __init__(self, node_name: str, file_name: str | None = None):
        self.node_name = node_name
        self.file_name = file_name
        if file_name is None:
            message = f"Unknown node: {node_name}"
        else:
            message = f"Unknown file on node {node_name}: {file_name}"
        super().__init__(message)
