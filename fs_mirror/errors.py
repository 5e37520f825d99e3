"""
Error kinds and operation results for the File System Mirror Tool.

Mutations never raise for filesystem problems; they return an OpResult that
carries either the affected node or the error kind and message.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(Enum):
    PATH_NOT_FOUND = "path_not_found"
    NOT_A_DIRECTORY = "not_a_directory"
    NOT_A_REGULAR_FILE = "not_a_regular_file"
    ALREADY_EXISTS = "already_exists"
    PERMISSION_DENIED = "permission_denied"
    IO_ERROR = "io_error"
    NOT_A_CHILD = "not_a_child"
    INVALID_PATTERN = "invalid_pattern"
    NOT_FOUND = "not_found"
    INVALID_TARGET = "invalid_target"
    INVALID_NAME = "invalid_name"


class FsMirrorError(Exception):
    """Raised where a caller must handle the failure explicitly."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message


@dataclass
class OpResult:
    """
    Outcome of a single operation on the mirror.

    Truthy on success. On failure `node` is None and `error` holds the kind.
    """
    ok: bool
    node: Any = None
    error: ErrorKind | None = None
    message: str = ""

    def __bool__(self) -> bool:
        return self.ok

    @classmethod
    def success(cls, node: Any = None, message: str = "") -> "OpResult":
        return cls(ok=True, node=node, message=message)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "OpResult":
        return cls(ok=False, error=kind, message=message)


def classify_os_error(exc: OSError) -> ErrorKind:
    """Map an OSError raised by a filesystem call to an ErrorKind."""
    if isinstance(exc, FileNotFoundError):
        return ErrorKind.PATH_NOT_FOUND
    if isinstance(exc, FileExistsError):
        return ErrorKind.ALREADY_EXISTS
    if isinstance(exc, PermissionError):
        return ErrorKind.PERMISSION_DENIED
    if isinstance(exc, NotADirectoryError):
        return ErrorKind.NOT_A_DIRECTORY
    return ErrorKind.IO_ERROR


def os_failure(exc: OSError, action: str, path) -> OpResult:
    """Build a failure result from an OSError raised while doing `action` on `path`."""
    reason = exc.strerror or str(exc)
    return OpResult.failure(classify_os_error(exc), f"Error {action} {path}: {reason}")
