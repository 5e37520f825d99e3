"""
Tree nodes for the in-memory mirror.

A directory node owns its children; dropping a node drops its whole subtree.
"""

import os
from enum import Enum
from pathlib import Path
from typing import Iterator

from .errors import ErrorKind, OpResult
from .utils import print_error


class NodeKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"


class FsNode:
    """
    A single file or directory in the mirror.

    Nodes compare by identity. `kind` is fixed at construction; `name` and
    `path` change only through rename/move.
    """

    def __init__(self, name: str, path: Path | str, kind: NodeKind = NodeKind.FILE):
        self.name = name
        self.path = Path(path)
        self._kind = kind
        self.children: list["FsNode"] = []
        self.size = 0
        self.modified_time: float | None = None
        self.update_info()

    @property
    def kind(self) -> NodeKind:
        return self._kind

    @property
    def is_dir(self) -> bool:
        return self._kind is NodeKind.DIRECTORY

    @property
    def is_file(self) -> bool:
        return self._kind is NodeKind.FILE

    def __repr__(self) -> str:
        return f"FsNode({self.name!r}, {self._kind.value}, {str(self.path)!r})"

    def update_info(self) -> None:
        """
        Refresh cached size and modification time from disk.

        A missing path or failed stat leaves size=0 and modified_time=None;
        stale metadata is tolerated.
        """
        try:
            stat = os.stat(self.path)
        except (OSError, ValueError):
            self.size = 0
            self.modified_time = None
            return
        self.size = 0 if self.is_dir else stat.st_size
        self.modified_time = stat.st_mtime

    def add_child(self, child: "FsNode") -> OpResult:
        """Attach `child`. Files cannot own children; that is reported, not raised."""
        if not self.is_dir:
            message = f"Cannot add children to a file node: {self.path}"
            print_error(message)
            return OpResult.failure(ErrorKind.NOT_A_DIRECTORY, message)
        self.children.append(child)
        return OpResult.success(child)

    def remove_child(self, child: "FsNode") -> bool:
        for i, existing in enumerate(self.children):
            if existing is child:
                del self.children[i]
                return True
        return False

    def has_child(self, child: "FsNode") -> bool:
        return any(existing is child for existing in self.children)

    def rebase(self, new_path: Path) -> None:
        """Move this node to `new_path` and recompute every descendant path."""
        self.path = Path(new_path)
        self.update_info()
        stack = [self]
        while stack:
            current = stack.pop()
            for child in current.children:
                child.path = current.path / child.name
                child.update_info()
                stack.append(child)


def iter_nodes(root: FsNode | None) -> Iterator[FsNode]:
    """Yield `root` and all its descendants in depth-first pre-order."""
    if root is None:
        return
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        # Reversed so the first child is visited first
        stack.extend(reversed(node.children))


def contains(ancestor: FsNode, node: FsNode) -> bool:
    """True if `node` is `ancestor` or lies anywhere in its subtree."""
    return any(candidate is node for candidate in iter_nodes(ancestor))
