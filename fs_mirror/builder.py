"""
Mirror construction.

Builds a fresh FsNode tree from a path on disk. Used at startup and on
refresh; a rebuild never reuses nodes from a previous tree.
"""

import os
from pathlib import Path
from typing import Callable

from .node import FsNode, NodeKind
from .utils import print_error, print_warning

ProgressCallback = Callable[[int, Path], None]


def _node_name(path: Path) -> str:
    # "/" and drive roots have no base name
    return path.name or str(path)


def build_tree(path: Path | str, progress_callback: ProgressCallback | None = None) -> FsNode | None:
    """
    Mirror `path` and everything below it.

    Args:
        path: Directory (or file) to mirror.
        progress_callback: Called as (count, path) after each node is built.

    Returns:
        The root node, or None if `path` does not exist.
    """
    root_path = Path(path).absolute()
    if not root_path.exists():
        print_error(f"Path does not exist: {root_path}")
        return None

    built_count = 0

    def make_node(node_path: Path, is_dir: bool) -> FsNode:
        nonlocal built_count
        kind = NodeKind.DIRECTORY if is_dir else NodeKind.FILE
        node = FsNode(_node_name(node_path), node_path, kind)
        built_count += 1
        if progress_callback:
            progress_callback(built_count, node_path)
        return node

    root = make_node(root_path, root_path.is_dir())

    # Directories still to be listed
    stack = [root] if root.is_dir else []
    while stack:
        current = stack.pop()
        try:
            entries = os.scandir(current.path)
        except OSError as e:
            print_warning(f"Skipping contents of {current.path}: {e.strerror or e}")
            continue

        with entries:
            while True:
                try:
                    entry = next(entries)
                except StopIteration:
                    break
                except OSError as e:
                    print_warning(f"Stopped reading {current.path}: {e.strerror or e}")
                    break

                entry_path = current.path / entry.name
                try:
                    # Symlinks are mirrored as plain entries and never followed
                    child_is_dir = entry.is_dir(follow_symlinks=False)
                    current.children.append(make_node(entry_path, child_is_dir))
                except OSError as e:
                    print_warning(f"Skipping {entry_path}: {e.strerror or e}")
                    continue

        stack.extend(child for child in reversed(current.children) if child.is_dir)

    return root
