"""
Opening files from the mirror.

Text files are shown in a simple pager; anything else is handed to the
operating system's default application.
"""

import os
import subprocess
import sys
from pathlib import Path
from typing import Callable

from PIL import Image, UnidentifiedImageError
from PIL.ExifTags import TAGS
from rich.markup import escape

from .config import Settings
from .node import FsNode
from .utils import console, print_error

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.tiff', '.webp', '.heic', '.gif', '.bmp'}


def is_text_file(path: Path, text_extensions) -> bool:
    return path.suffix.lower() in text_extensions


def page_text_file(path: Path, page_lines: int, ask: Callable[[str], str] = input) -> int:
    """
    Print a text file `page_lines` lines at a time.

    Between pages the user presses Enter to continue or 'q' to stop.

    Returns:
        Number of lines printed.
    """
    shown = 0
    console.print(f"\n[bold]--- File Content: {escape(str(path))} ---[/bold]")
    with open(path, 'r', encoding='utf-8', errors='replace') as f:
        for line in f:
            if shown and shown % page_lines == 0:
                answer = ask(f"--- {shown} lines shown. Enter to continue, 'q' to quit: ")
                if answer.strip().lower() == 'q':
                    return shown
            console.print(line.rstrip('\n'), markup=False, highlight=False)
            shown += 1
    console.print("[bold]--- End of file ---[/bold]")
    return shown


def launch_with_default_app(path: Path) -> bool:
    """Open `path` with the platform's default application."""
    try:
        if sys.platform.startswith('win'):
            os.startfile(str(path))
            return True
        command = ['open' if sys.platform == 'darwin' else 'xdg-open', str(path)]
        result = subprocess.run(command, check=False)
    except OSError as e:
        print_error(f"Failed to open {path} with the default application: {e}")
        return False

    if result.returncode != 0:
        print_error(f"Failed to open file with default application. Command: {' '.join(command)}")
        return False
    return True


def _exif_date(exif, tag_name: str) -> str | None:
    for tag_id in exif:
        if TAGS.get(tag_id, tag_id) == tag_name:
            date_str = exif.get(tag_id)
            # Format is usually "YYYY:MM:DD HH:MM:SS"
            if isinstance(date_str, str) and len(date_str) >= 19:
                return date_str[:10].replace(':', '-') + 'T' + date_str[11:19]
    return None


def describe_image(path: Path) -> dict | None:
    """
    Read dimensions, format and capture date from an image.

    Returns None if the file is not a readable image.
    """
    try:
        with Image.open(path) as img:
            exif = img.getexif()
            date_taken = None
            if exif:
                date_taken = _exif_date(exif, 'DateTimeOriginal') or _exif_date(exif, 'DateTime')
            return {
                "Dimensions": f"{img.width}x{img.height}",
                "Format": img.format,
                "Date taken": date_taken,
            }
    except (UnidentifiedImageError, OSError):
        return None


def node_details(node: FsNode) -> dict:
    """Extra detail rows for the info view."""
    if node.is_file and node.path.suffix.lower() in IMAGE_EXTENSIONS:
        return describe_image(node.path) or {}
    return {}


def open_node(node: FsNode | None, settings: Settings, ask: Callable[[str], str] = input) -> bool:
    """Show a text file in the pager or launch anything else externally."""
    if node is None or not node.is_file:
        print_error("Cannot open a directory or a missing node.")
        return False

    console.print(f"\n[bold]--- Opening: {escape(str(node.path))} ---[/bold]")
    if is_text_file(node.path, settings.text_extensions):
        try:
            page_text_file(node.path, settings.page_lines, ask)
        except OSError as e:
            print_error(f"Could not read {node.path}: {e}")
            return False
        return True
    return launch_with_default_app(node.path)
