#!/usr/bin/env python3
"""
File System Mirror Tool - CLI Entry Point
=========================================

Usage:
    python -m fs_mirror                         # interactive menu
    python -m fs_mirror --root /path tree --details
    python -m fs_mirror search "\\.txt$"
    python -m fs_mirror mkdir photos --parent docs
    python -m fs_mirror import ~/a.txt ~/b.txt --dest docs
    python -m fs_mirror rename notes.txt todo.txt --to archive
    python -m fs_mirror delete old --yes
"""

import argparse
import sys
from pathlib import Path

from rich.markup import escape
from rich.progress import Progress, SpinnerColumn, TextColumn, TimeElapsedColumn
from tqdm import tqdm

from .config import load_settings
from .mirror import Mirror
from .utils import (
    console,
    print_error,
    print_header,
    print_node_info,
    print_result,
    print_search_results,
    print_tree,
    print_warning,
)
from .viewer import node_details, open_node


def load_mirror(root: Path) -> Mirror | None:
    """Build the mirror for `root` with a progress spinner."""
    mirror = Mirror(root)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        TimeElapsedColumn(),
        console=console,
        transient=True,
    ) as progress:
        task_id = progress.add_task("Loading...", total=None)

        def progress_cb(count, path):
            # Show count and last part of path
            short_path = str(path)
            if len(short_path) > 40:
                short_path = "..." + short_path[-37:]
            progress.update(task_id, description=f"Loading: {count} items... {escape(short_path)}")

        loaded = mirror.load(progress_callback=progress_cb)

    if not loaded:
        print_error(f"Could not initialize file tree from: {root}")
        return None
    return mirror


def confirm(question: str) -> bool:
    answer = input(f"{question} (y/n): ").strip().lower()
    return answer in ('y', 'yes')


# =============================================================================
# Subcommands
# =============================================================================

def cmd_tree(args, mirror: Mirror) -> int:
    """Tree command - print the mirrored tree."""
    print_tree(mirror.root, show_details=args.details)
    return 0


def cmd_search(args, mirror: Mirror) -> int:
    """Search command - case-insensitive regex over names."""
    results = mirror.search(args.pattern)
    print_search_results(args.pattern, results)
    return 0


def _create(args, mirror: Mirror, create) -> int:
    parent = mirror.resolve_directory(args.parent)
    if not parent:
        print_error(parent.message)
        return 1
    return 0 if print_result(create(parent.node, args.name)) else 1


def cmd_mkdir(args, mirror: Mirror) -> int:
    """Mkdir command - create a directory."""
    return _create(args, mirror, mirror.create_directory)


def cmd_touch(args, mirror: Mirror) -> int:
    """Touch command - create an empty file."""
    return _create(args, mirror, mirror.create_file)


def cmd_import(args, mirror: Mirror) -> int:
    """Import command - copy one or more files into the tree."""
    dest = mirror.resolve_directory(args.dest)
    if not dest:
        print_error(dest.message)
        return 1

    imported = 0
    failed = 0
    with tqdm(total=len(args.sources), unit="file") as pbar:
        for source in args.sources:
            result = mirror.import_file(dest.node, source)
            if result:
                imported += 1
            else:
                failed += 1
                tqdm.write(f"[ERROR] {result.message}")
            pbar.update(1)

    console.print(f"[INFO] Imported {imported} file(s), {failed} failed")
    return 0 if failed == 0 else 1


def cmd_rename(args, mirror: Mirror) -> int:
    """Rename command - rename and optionally move an item."""
    target = mirror.resolve(args.name)
    if not target:
        print_error(target.message)
        return 1

    new_parent = None
    if args.to is not None:
        resolved = mirror.resolve_directory(args.to)
        if not resolved:
            print_error(resolved.message)
            return 1
        new_parent = resolved.node

    return 0 if print_result(mirror.rename(target.node, args.new_name, new_parent)) else 1


def cmd_delete(args, mirror: Mirror) -> int:
    """Delete command - remove a file or a whole directory."""
    target = mirror.resolve(args.name)
    if not target:
        print_error(target.message)
        return 1

    if not args.yes and not confirm(f"Confirm delete '{target.node.path}'?"):
        console.print("Deletion cancelled.")
        return 1

    return 0 if print_result(mirror.delete(target.node)) else 1


def cmd_info(args, mirror: Mirror) -> int:
    """Info command - show details for one item."""
    target = mirror.resolve(args.name)
    if not target:
        print_error(target.message)
        return 1
    print_node_info(target.node, node_details(target.node))
    return 0


def cmd_open(args, mirror: Mirror) -> int:
    """Open command - page a text file or launch the default application."""
    target = mirror.resolve(args.name)
    if not target:
        print_error(target.message)
        return 1
    return 0 if open_node(target.node, args.settings) else 1


# =============================================================================
# Interactive menu
# =============================================================================

MENU = [
    ("1", "Display File Tree"),
    ("2", "Detailed File Tree View"),
    ("3", "Add New Folder"),
    ("4", "Add New File"),
    ("5", "Import Existing File"),
    ("6", "Open/View File"),
    ("7", "Rename File/Folder"),
    ("8", "Move File/Folder"),
    ("9", "Delete File/Folder"),
    ("10", "Search Files"),
    ("11", "Show Item Info"),
    ("12", "Refresh Tree"),
    ("13", "Exit"),
]


def _prompt_directory(mirror: Mirror, question: str):
    name = input(question).strip()
    result = mirror.resolve_directory(name)
    if not result:
        print_error(f"Invalid or non-existent directory: {result.message}")
        return None
    return result.node


def _prompt_item(mirror: Mirror, question: str):
    result = mirror.resolve(input(question).strip())
    if not result:
        print_error(result.message)
        return None
    return result.node


def _prompt_name(question: str) -> str | None:
    name = input(question).strip()
    if not name:
        print_warning("Name cannot be empty.")
        return None
    return name


def run_shell(mirror: Mirror, settings) -> int:
    """Interactive loop. Each action resolves names, then runs one operation."""
    actions = dict(MENU)
    while True:
        print_tree(mirror.root)
        console.print("\n[bold blue]=== FILE SYSTEM MANAGER ===[/bold blue]")
        for key, label in MENU:
            console.print(f"{key}. {label}")

        try:
            choice = input(f"Enter your choice (1-{len(MENU)}): ").strip()
        except EOFError:
            return 0

        action = actions.get(choice)
        if action is None:
            print_warning(f"Invalid choice. Please enter a number between 1 and {len(MENU)}.")
            continue
        if action == "Exit":
            console.print("Exiting...")
            return 0

        try:
            _dispatch(action, mirror, settings)
        except EOFError:
            return 0
        except KeyboardInterrupt:
            console.print("\n[dim]Cancelled[/dim]")


def _dispatch(action: str, mirror: Mirror, settings):
    if action == "Display File Tree":
        return
    if action == "Detailed File Tree View":
        print_tree(mirror.root, show_details=True)
    elif action in ("Add New Folder", "Add New File"):
        parent = _prompt_directory(mirror, "Parent folder (blank for root): ")
        if parent is None:
            return
        name = _prompt_name("New name: ")
        if name is None:
            return
        create = mirror.create_directory if action == "Add New Folder" else mirror.create_file
        print_result(create(parent, name))
    elif action == "Import Existing File":
        source = _prompt_name("Source file path: ")
        if source is None:
            return
        dest = _prompt_directory(mirror, "Destination folder (blank for root): ")
        if dest is not None:
            print_result(mirror.import_file(dest, Path(source).expanduser()))
    elif action == "Open/View File":
        node = _prompt_item(mirror, "File name to open: ")
        if node is not None:
            open_node(node, settings)
    elif action == "Rename File/Folder":
        node = _prompt_item(mirror, "Item to rename: ")
        if node is None:
            return
        new_name = _prompt_name("New name: ")
        if new_name is not None:
            print_result(mirror.rename(node, new_name))
    elif action == "Move File/Folder":
        node = _prompt_item(mirror, "Item to move: ")
        if node is None:
            return
        dest = _prompt_directory(mirror, "Destination folder (blank for root): ")
        if dest is not None:
            print_result(mirror.rename(node, node.name, dest))
    elif action == "Delete File/Folder":
        node = _prompt_item(mirror, "Item to delete: ")
        if node is None:
            return
        if node is mirror.root:
            print_error("Cannot delete root directory.")
        elif confirm(f"Confirm delete '{node.name}'?"):
            print_result(mirror.delete(node))
        else:
            console.print("Deletion cancelled.")
    elif action == "Search Files":
        pattern = input("Search pattern (regex): ")
        print_search_results(pattern, mirror.search(pattern))
    elif action == "Show Item Info":
        node = _prompt_item(mirror, "Item name: ")
        if node is not None:
            print_node_info(node, node_details(node))
    elif action == "Refresh Tree":
        if mirror.refresh():
            console.print("File tree refreshed.")
        else:
            print_error(f"Could not rebuild file tree from: {mirror.root_path}")


def cmd_shell(args, mirror: Mirror) -> int:
    """Shell command - interactive menu."""
    print_header("File System Manager", f"Root: {mirror.root_path}")
    return run_shell(mirror, args.settings)


# =============================================================================
# Main
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fs-mirror",
        description="File System Mirror Tool - browse and edit a directory tree",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--root", type=Path, default=None,
                        help="Root directory to mirror (default: FS_MIRROR_ROOT or '.')")
    parser.add_argument("--page-lines", type=int, default=None, metavar="N",
                        help="Lines per page when viewing text files")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    shell_parser = subparsers.add_parser("shell", help="Interactive menu (default)")
    shell_parser.set_defaults(func=cmd_shell)

    tree_parser = subparsers.add_parser("tree", help="Print the file tree")
    tree_parser.add_argument("--details", action="store_true", help="Show size and modified time")
    tree_parser.set_defaults(func=cmd_tree)

    search_parser = subparsers.add_parser("search", help="Search names with a case-insensitive regex")
    search_parser.add_argument("pattern", type=str, help="Regular expression")
    search_parser.set_defaults(func=cmd_search)

    mkdir_parser = subparsers.add_parser("mkdir", help="Create a directory")
    mkdir_parser.add_argument("name", type=str, help="New directory name")
    mkdir_parser.add_argument("--parent", type=str, help="Parent directory name (default: root)")
    mkdir_parser.set_defaults(func=cmd_mkdir)

    touch_parser = subparsers.add_parser("touch", help="Create an empty file")
    touch_parser.add_argument("name", type=str, help="New file name")
    touch_parser.add_argument("--parent", type=str, help="Parent directory name (default: root)")
    touch_parser.set_defaults(func=cmd_touch)

    import_parser = subparsers.add_parser("import", help="Copy files into the tree")
    import_parser.add_argument("sources", type=Path, nargs="+", help="Files to import")
    import_parser.add_argument("--dest", type=str, help="Destination directory name (default: root)")
    import_parser.set_defaults(func=cmd_import)

    rename_parser = subparsers.add_parser("rename", help="Rename or move a file/folder")
    rename_parser.add_argument("name", type=str, help="Item to rename")
    rename_parser.add_argument("new_name", type=str, help="New name")
    rename_parser.add_argument("--to", type=str, help="Move under this directory")
    rename_parser.set_defaults(func=cmd_rename)

    delete_parser = subparsers.add_parser("delete", help="Delete a file/folder")
    delete_parser.add_argument("name", type=str, help="Item to delete")
    delete_parser.add_argument("--yes", "-y", action="store_true", help="Do not ask for confirmation")
    delete_parser.set_defaults(func=cmd_delete)

    info_parser = subparsers.add_parser("info", help="Show details for an item")
    info_parser.add_argument("name", type=str, help="Item name")
    info_parser.set_defaults(func=cmd_info)

    open_parser = subparsers.add_parser("open", help="View a text file or open with the default app")
    open_parser.add_argument("name", type=str, help="File name")
    open_parser.set_defaults(func=cmd_open)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = load_settings()
    if args.root is not None:
        settings.root = args.root
    if args.page_lines is not None:
        if args.page_lines <= 0:
            print_error("--page-lines must be positive")
            return 1
        settings.page_lines = args.page_lines
    args.settings = settings

    if args.command is None:
        args.func = cmd_shell

    mirror = load_mirror(settings.root)
    if mirror is None:
        return 1

    try:
        return args.func(args, mirror)
    except KeyboardInterrupt:
        print("\n[ABORT] Operation cancelled by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())
