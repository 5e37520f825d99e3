"""
Mutations for the File System Mirror Tool.

Every operation performs the filesystem call first and only then updates the
mirror. If the filesystem call fails the mirror is left untouched and the
failure is returned as an OpResult.
"""

import os
import shutil
from pathlib import Path

from .errors import ErrorKind, OpResult, os_failure
from .index import find_parent
from .node import FsNode, NodeKind, contains


def _check_parent(parent: FsNode | None) -> OpResult | None:
    if parent is None or not parent.is_dir:
        where = parent.path if parent is not None else None
        return OpResult.failure(ErrorKind.NOT_A_DIRECTORY, f"Invalid parent directory: {where}")
    return None


def _check_name(name: str) -> OpResult | None:
    """A name must be a single path component."""
    separators = {"/", os.sep} | ({os.altsep} if os.altsep else set())
    if not name or name in (".", "..") or any(sep in name for sep in separators):
        return OpResult.failure(ErrorKind.INVALID_NAME, f"Invalid name: {name!r}")
    return None


def _same_entry(a: Path, b: Path) -> bool:
    # Case-only renames on case-insensitive filesystems
    try:
        return os.path.samefile(a, b)
    except OSError:
        return False


def create_directory(parent: FsNode | None, name: str) -> OpResult:
    """Create `parent/name` on disk and append a Directory node for it."""
    invalid = _check_parent(parent)
    if invalid is not None:
        return invalid
    invalid = _check_name(name)
    if invalid is not None:
        return invalid

    new_path = parent.path / name
    try:
        new_path.mkdir()
    except OSError as e:
        return os_failure(e, "creating directory", new_path)

    node = FsNode(name, new_path, NodeKind.DIRECTORY)
    parent.children.append(node)
    return OpResult.success(node, f"Created directory: {new_path}")


def create_file(parent: FsNode | None, name: str) -> OpResult:
    """Create an empty file `parent/name`. An existing entry is not truncated."""
    invalid = _check_parent(parent)
    if invalid is not None:
        return invalid
    invalid = _check_name(name)
    if invalid is not None:
        return invalid

    new_path = parent.path / name
    try:
        with open(new_path, "x", encoding="utf-8"):
            pass
    except OSError as e:
        return os_failure(e, "creating file", new_path)

    node = FsNode(name, new_path, NodeKind.FILE)
    parent.children.append(node)
    return OpResult.success(node, f"Created file: {new_path}")


def import_file(dest_parent: FsNode | None, source_path: Path | str) -> OpResult:
    """
    Copy a regular file into `dest_parent`, overwriting a same-named file.

    If the mirror already holds a File node with that name it is refreshed and
    returned instead of adding a duplicate entry.
    """
    invalid = _check_parent(dest_parent)
    if invalid is not None:
        return invalid

    source = Path(source_path)
    if not source.exists():
        return OpResult.failure(ErrorKind.PATH_NOT_FOUND, f"Source file does not exist: {source}")
    if not source.is_file():
        return OpResult.failure(ErrorKind.NOT_A_REGULAR_FILE, f"Source path is not a regular file: {source}")

    dest_path = dest_parent.path / source.name
    # copy2 would write inside a same-named directory
    if dest_path.is_dir() or any(
        child.name == source.name and not child.is_file for child in dest_parent.children
    ):
        return OpResult.failure(
            ErrorKind.ALREADY_EXISTS, f"Destination exists and is not a regular file: {dest_path}"
        )

    try:
        shutil.copy2(source, dest_path)
    except OSError as e:
        return os_failure(e, "importing file to", dest_path)

    existing = next(
        (child for child in dest_parent.children if child.name == source.name and child.is_file),
        None,
    )
    if existing is not None:
        existing.update_info()
        return OpResult.success(existing, f"Imported (overwrote) file: {dest_path}")

    node = FsNode(source.name, dest_path, NodeKind.FILE)
    dest_parent.children.append(node)
    return OpResult.success(node, f"Imported file: {dest_path}")


def delete_node(parent: FsNode | None, target: FsNode | None) -> OpResult:
    """
    Remove `target` from disk and from `parent.children`.

    Directories are removed recursively. There is no undo.
    """
    if parent is None or target is None:
        return OpResult.failure(ErrorKind.INVALID_TARGET, "Parent or target node is missing")
    if not parent.has_child(target):
        return OpResult.failure(
            ErrorKind.NOT_A_CHILD, f"{target.path} is not a child of {parent.path}"
        )

    try:
        if target.is_dir:
            shutil.rmtree(target.path)
        else:
            target.path.unlink()
    except OSError as e:
        return os_failure(e, "removing", target.path)

    parent.remove_child(target)
    return OpResult.success(target, f"Removed: {target.path}")


def rename_node(root: FsNode | None, target: FsNode | None, new_parent: FsNode | None, new_name: str) -> OpResult:
    """
    Rename and/or move `target` to `new_parent/new_name`.

    The same node object is moved between parents; its path and every
    descendant path are recomputed. `root` is only used to locate the
    current parent.
    """
    if target is None:
        return OpResult.failure(ErrorKind.INVALID_TARGET, "No node given to rename")
    invalid = _check_parent(new_parent)
    if invalid is not None:
        return invalid
    invalid = _check_name(new_name)
    if invalid is not None:
        return invalid
    if contains(target, new_parent):
        return OpResult.failure(
            ErrorKind.INVALID_TARGET, f"Cannot move {target.path} into itself or its own subtree"
        )

    old_path = target.path
    new_path = new_parent.path / new_name

    # shutil.move would overwrite a file or nest inside a directory
    if new_path != old_path and os.path.lexists(new_path) and not _same_entry(old_path, new_path):
        return OpResult.failure(ErrorKind.ALREADY_EXISTS, f"Destination already exists: {new_path}")

    try:
        shutil.move(str(old_path), str(new_path))
    except OSError as e:
        return os_failure(e, f"renaming/moving {old_path} to", new_path)

    old_parent = find_parent(root, target)

    target.name = new_name
    target.rebase(new_path)

    if old_parent is not new_parent:
        if old_parent is not None:
            old_parent.remove_child(target)
        new_parent.children.append(target)

    return OpResult.success(target, f"Renamed/moved {old_path} to {new_path}")
