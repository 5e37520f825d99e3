"""
File System Mirror Tool
=======================

Keeps an in-memory tree of a directory and applies create, import, rename,
move and delete operations to both the disk and the tree.
"""

__version__ = "1.0.0"

from .builder import build_tree
from .errors import ErrorKind, FsMirrorError, OpResult
from .index import find_by_name, find_by_path, find_parent, search
from .mirror import Mirror
from .mutations import create_directory, create_file, delete_node, import_file, rename_node
from .node import FsNode, NodeKind, iter_nodes

__all__ = [
    "build_tree",
    "ErrorKind",
    "FsMirrorError",
    "OpResult",
    "find_by_name",
    "find_by_path",
    "find_parent",
    "search",
    "Mirror",
    "create_directory",
    "create_file",
    "delete_node",
    "import_file",
    "rename_node",
    "FsNode",
    "NodeKind",
    "iter_nodes",
]
