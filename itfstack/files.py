"""ITF file helpers: locate, inspect and load ITF files from disk."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass
from pathlib import Path

from .config import STACK_RULES
from .data.stack import ProcessStack
from .parser.itf import ItfError, parse_itf_file

log = logging.getLogger("itfstack.files")

_SIZE_UNITS = ("B", "KB", "MB", "GB")


# ── Errors ─────────────────────────────────────────────────────────


class FileError(Exception):
    """Base class for problems loading an ITF file."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = Path(path)
        super().__init__(message)


class FileNotFoundItfError(FileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path, f"File not found: {path}")


class NotAFileError(FileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path, f"Path is not a file: {path}")


class InvalidExtensionError(FileError):
    def __init__(self, path: Path) -> None:
        super().__init__(path, f"Invalid file extension: {path}")


class ReadError(FileError):
    def __init__(self, path: Path, reason: str) -> None:
        self.reason = reason
        super().__init__(path, f"Failed to read file {path}: {reason}")


class FileParseError(FileError):
    def __init__(self, path: Path, error: ItfError) -> None:
        self.error = error
        super().__init__(path, f"Failed to parse file {path}: {error}")


@dataclass
class FileInfo:
    path: Path
    size_bytes: int
    size_formatted: str
    is_itf_file: bool
    technology_name: str | None


# ── Helpers ────────────────────────────────────────────────────────


def is_itf_file(path: str | Path) -> bool:
    return Path(path).suffix.lower() == f".{STACK_RULES.file_extension}"


def find_itf_files(directory: str | Path) -> list[Path]:
    """ITF files directly inside *directory*, sorted by path."""
    return sorted(p for p in Path(directory).iterdir() if p.is_file() and is_itf_file(p))


def get_file_size(path: str | Path) -> int:
    return Path(path).stat().st_size


def format_file_size(size_bytes: int) -> str:
    """Human-readable size: ``512 B``, ``1.5 KB``, ``2.0 MB`` ..."""
    if size_bytes < 1024:
        return f"{size_bytes} B"
    size = float(size_bytes)
    unit = 0
    while size >= 1024 and unit < len(_SIZE_UNITS) - 1:
        size /= 1024
        unit += 1
    return f"{size:.1f} {_SIZE_UNITS[unit]}"


def extract_technology_name(path: str | Path) -> str | None:
    """Technology name implied by the file name (its stem)."""
    stem = Path(path).stem
    return stem or None


def create_backup(path: str | Path) -> Path:
    """Copy *path* to ``<name>.<ext>.backup`` beside it and return the copy."""
    path = Path(path)
    ext = path.suffix.lstrip(".") or STACK_RULES.file_extension
    backup = path.with_suffix(f".{ext}.backup")
    shutil.copy2(path, backup)
    return backup


def _check_path(path: Path) -> None:
    if not path.exists():
        raise FileNotFoundItfError(path)
    if not path.is_file():
        raise NotAFileError(path)


def validate_file(path: str | Path) -> FileInfo:
    path = Path(path)
    _check_path(path)
    try:
        size = get_file_size(path)
    except OSError as e:
        raise ReadError(path, str(e)) from e
    return FileInfo(
        path=path,
        size_bytes=size,
        size_formatted=format_file_size(size),
        is_itf_file=is_itf_file(path),
        technology_name=extract_technology_name(path),
    )


def load_itf_file(path: str | Path) -> ProcessStack:
    """Read and parse one ITF file.

    Raises a FileError subclass for a missing path, a directory, a wrong
    extension, an unreadable file or unparseable content.
    """
    path = Path(path)
    _check_path(path)
    if not is_itf_file(path):
        raise InvalidExtensionError(path)

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ReadError(path, str(e)) from e

    try:
        stack = parse_itf_file(text)
    except ItfError as e:
        raise FileParseError(path, e) from e

    log.info("Loaded %s (%s)", path.name, format_file_size(len(text.encode("utf-8"))))
    return stack
