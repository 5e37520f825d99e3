"""
Configuration for the File System Mirror Tool.

Values come from the environment, optionally seeded from a .env file.
Command line flags take precedence over everything here.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from .utils import print_warning

DEFAULT_ROOT = "."
DEFAULT_PAGE_LINES = 100

# Files with these extensions are shown in the pager instead of the OS launcher
DEFAULT_TEXT_EXTENSIONS = frozenset({
    ".txt", ".log", ".csv", ".json", ".xml",
    ".cpp", ".h", ".hpp", ".java", ".py", ".js", ".html", ".css", ".md",
})


@dataclass
class Settings:
    root: Path = Path(DEFAULT_ROOT)
    page_lines: int = DEFAULT_PAGE_LINES
    text_extensions: frozenset[str] = field(default_factory=lambda: DEFAULT_TEXT_EXTENSIONS)


def _parse_page_lines(raw: str | None) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_PAGE_LINES
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value <= 0:
        print_warning(f"Ignoring invalid FS_MIRROR_PAGE_LINES={raw!r}, using {DEFAULT_PAGE_LINES}")
        return DEFAULT_PAGE_LINES
    return value


def _parse_extensions(raw: str | None) -> frozenset[str]:
    if raw is None or not raw.strip():
        return DEFAULT_TEXT_EXTENSIONS
    # Same normalization as the --ext-include style flags: ".TXT", "txt" -> ".txt"
    return frozenset(
        e.strip().lower() if e.strip().startswith('.') else f'.{e.strip().lower()}'
        for e in raw.split(',')
        if e.strip()
    )


def load_settings(env_file: Path | None = None) -> Settings:
    """
    Build Settings from the environment.

    Args:
        env_file: Optional .env file; by default python-dotenv searches for one.
    """
    load_dotenv(dotenv_path=env_file)

    return Settings(
        root=Path(os.environ.get("FS_MIRROR_ROOT") or DEFAULT_ROOT),
        page_lines=_parse_page_lines(os.environ.get("FS_MIRROR_PAGE_LINES")),
        text_extensions=_parse_extensions(os.environ.get("FS_MIRROR_TEXT_EXTENSIONS")),
    )
