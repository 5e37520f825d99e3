"""
A mirror session: one root directory and the tree currently built from it.

This is the layer the command line talks to. It owns the root node, resolves
names, and refuses to delete or rename the root itself.
"""

from pathlib import Path

from . import index, mutations
from .builder import ProgressCallback, build_tree
from .errors import ErrorKind, OpResult
from .node import FsNode


class Mirror:
    def __init__(self, root_path: Path | str):
        self.root_path = Path(root_path)
        self.root: FsNode | None = None

    def load(self, progress_callback: ProgressCallback | None = None) -> bool:
        """
        Build (or rebuild) the tree from disk.

        Any node obtained before a reload belongs to the discarded tree and
        must not be passed back in.
        """
        self.root = build_tree(self.root_path, progress_callback)
        return self.root is not None

    refresh = load

    # -- lookup ---------------------------------------------------------------

    def find(self, name: str) -> FsNode | None:
        return index.find_by_name(self.root, name)

    def find_parent(self, node: FsNode) -> FsNode | None:
        return index.find_parent(self.root, node)

    def resolve(self, name: str) -> OpResult:
        return index.resolve_name(self.root, name)

    def resolve_directory(self, name: str | None) -> OpResult:
        """Resolve a directory by name; blank means the root."""
        if not name:
            if self.root is None:
                return OpResult.failure(ErrorKind.NOT_FOUND, "Tree is not loaded")
            return OpResult.success(self.root)

        result = self.resolve(name)
        if result and not result.node.is_dir:
            return OpResult.failure(ErrorKind.NOT_A_DIRECTORY, f"'{name}' is not a directory")
        return result

    def search(self, pattern: str) -> list[FsNode]:
        return index.search(self.root, pattern)

    # -- mutations ------------------------------------------------------------

    def create_directory(self, parent: FsNode, name: str) -> OpResult:
        return mutations.create_directory(parent, name)

    def create_file(self, parent: FsNode, name: str) -> OpResult:
        return mutations.create_file(parent, name)

    def import_file(self, dest_parent: FsNode, source_path: Path | str) -> OpResult:
        return mutations.import_file(dest_parent, source_path)

    def delete(self, target: FsNode) -> OpResult:
        if target is None or target is self.root:
            return OpResult.failure(ErrorKind.INVALID_TARGET, "Cannot delete root directory")

        parent = self.find_parent(target)
        if parent is None:
            return OpResult.failure(ErrorKind.NOT_A_CHILD, f"{target.path} is not part of this tree")
        return mutations.delete_node(parent, target)

    def rename(self, target: FsNode, new_name: str, new_parent: FsNode | None = None) -> OpResult:
        """Rename in place, or move under `new_parent` when one is given."""
        if target is None or target is self.root:
            return OpResult.failure(ErrorKind.INVALID_TARGET, "Renaming or moving the root directory is not supported")

        current_parent = self.find_parent(target)
        if current_parent is None:
            return OpResult.failure(ErrorKind.NOT_A_CHILD, f"{target.path} is not part of this tree")
        if new_parent is None:
            new_parent = current_parent
        return mutations.rename_node(self.root, target, new_parent, new_name)
