"""
Centralized constants for the gUSE workflow zip layout.
"""

# Manifest entry, always at the zip root (never under the base directory)
MANIFEST_NAME = "workflow.xml"

# base/<node>/<file> is the only accepted file entry shape
FILE_ENTRY_DEPTH = 3

# Fixed entry timestamp so repeated encodes are byte-identical
ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)

# Unix permission bits stored on entries
SCRIPT_MODE = 0o755
DIR_MODE = 0o40755
MANIFEST_MODE = 0o644

# MS-DOS directory flag in external attributes
DOS_DIRECTORY_FLAG = 0x10
