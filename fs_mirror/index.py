"""
Lookup and search over the mirror.

Name lookup returns the first node in depth-first pre-order. When several
entries share a name only the first one is reachable by name; use
find_by_path to address a specific one.
"""

import re
from pathlib import Path

from .errors import ErrorKind, FsMirrorError, OpResult
from .node import FsNode, iter_nodes
from .utils import print_error


def find_by_name(root: FsNode | None, name: str) -> FsNode | None:
    """Return the first node whose base name equals `name` (case-sensitive)."""
    for node in iter_nodes(root):
        if node.name == name:
            return node
    return None


def find_parent(root: FsNode | None, target: FsNode | None) -> FsNode | None:
    """
    Return the directory whose children contain `target` by identity.

    None when `target` is the root, is detached, or the tree is empty.
    """
    if target is None:
        return None
    for node in iter_nodes(root):
        if node.is_dir and node.has_child(target):
            return node
    return None


def compile_pattern(pattern: str) -> re.Pattern:
    """
    Compile a case-insensitive search pattern.

    Raises:
        FsMirrorError: INVALID_PATTERN if the regex is malformed.
    """
    try:
        return re.compile(pattern, re.IGNORECASE)
    except re.error as e:
        raise FsMirrorError(ErrorKind.INVALID_PATTERN, f"Invalid search pattern '{pattern}': {e}") from e


def search(root: FsNode | None, pattern: str) -> list[FsNode]:
    """
    Collect every node whose name matches `pattern`, in pre-order.

    An invalid pattern is reported and yields no results at all.
    """
    try:
        regex = compile_pattern(pattern)
    except FsMirrorError as e:
        print_error(e.message)
        return []
    return [node for node in iter_nodes(root) if regex.search(node.name)]


def find_by_path(root: FsNode | None, path: Path | str) -> FsNode | None:
    """
    Resolve a path (relative to the root, or absolute under it) to a node.

    Unlike find_by_name this is unambiguous.
    """
    if root is None:
        return None
    path = Path(path)
    if path.is_absolute():
        try:
            path = path.relative_to(root.path)
        except ValueError:
            return None

    node = root
    for part in path.parts:
        if part in ("", "."):
            continue
        node = next((child for child in node.children if child.name == part), None)
        if node is None:
            return None
    return node


def resolve_name(root: FsNode | None, name: str) -> OpResult:
    """find_by_name, reporting a miss as a NOT_FOUND failure."""
    node = find_by_name(root, name)
    if node is None:
        return OpResult.failure(
            ErrorKind.NOT_FOUND,
            f"'{name}' not found. If several items share this name only the first one is considered.",
        )
    return OpResult.success(node)
