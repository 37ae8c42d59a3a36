"""
guse-zip - Read, edit and rewrite gUSE workflow zip archives

A gUSE workflow archive holds:
- workflow.xml at the zip root, describing the job graph
- one directory per job node under a shared base directory
- a single script per node, executed on a compute resource
"""

__version__ = "0.1.0"
__package_name__ = "guse-zip"
__short_name__ = "gusezip"
