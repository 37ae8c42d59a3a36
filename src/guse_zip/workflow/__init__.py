"""
Workflow layer - In-memory model of gUSE workflow archives.

The model is DATA: named job nodes with their script files plus the opaque
workflow.xml manifest. Nothing here executes or interprets the workflow.
"""

from .archive import WorkflowArchive, split_entry_name
from .node import Node

__all__ = [
    "Node",
    "WorkflowArchive",
    "split_entry_name",
]
