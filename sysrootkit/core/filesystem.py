"""
File system utilities for SysrootKit.

This module provides the file operations the sysroot build relies on:
- Idempotent directory creation
- Safe file writes (atomic replace, exclusive create)
- Whole-file and recursive directory copies
- Modification-time queries used for staleness checks

Every failure is re-raised as SysrootIOError carrying the path involved.
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Callable, Optional, Union

from .exceptions import SysrootIOError


# ============================================================================
# Directories
# ============================================================================


def ensure_directory(path: Union[str, Path]) -> Path:
    """
    Ensure a directory exists (idempotent).

    Args:
        path: Directory path

    Returns:
        Path object (as given, not resolved)

    Raises:
        SysrootIOError: If the directory cannot be created

    Example:
        >>> ensure_directory('/tmp/sysroot/lib/rustlib')
        PosixPath('/tmp/sysroot/lib/rustlib')
    """
    path = Path(path)
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise SysrootIOError(f"Couldn't create directory '{path}': {e}", path) from e
    return path


def remove_tree(path: Union[str, Path]) -> bool:
    """
    Remove a directory tree if it exists.

    Args:
        path: Directory to remove

    Returns:
        True if something was removed, False if the path did not exist

    Raises:
        SysrootIOError: If the path is not a directory or deletion fails
    """
    path = Path(path)

    if not path.exists():
        return False

    if not path.is_dir():
        raise SysrootIOError(f"Path is not a directory: {path}", path)

    try:
        shutil.rmtree(path)
    except OSError as e:
        raise SysrootIOError(f"Failed to remove directory '{path}': {e}", path) from e
    return True


def directory_mtime(path: Union[str, Path]) -> Optional[float]:
    """
    Get the modification time of a path.

    Args:
        path: File or directory

    Returns:
        Modification time in seconds since the epoch, or None if the
        path does not exist

    Raises:
        SysrootIOError: If the path exists but cannot be stat'ed
    """
    path = Path(path)
    try:
        return path.stat().st_mtime
    except FileNotFoundError:
        return None
    except OSError as e:
        raise SysrootIOError(
            f"Couldn't get modification time for {path}: {e}", path
        ) from e


# ============================================================================
# Safe File Writes
# ============================================================================


def atomic_write(
    file_path: Union[str, Path], content: Union[str, bytes], encoding: str = "utf-8"
) -> None:
    """
    Write file atomically using temp file + rename.

    This ensures the file is never in a partially-written state.
    If the write fails, the original file (if any) remains unchanged.

    Args:
        file_path: Path to write to
        content: Content to write (string or bytes)
        encoding: Text encoding (used only for string content)

    Raises:
        SysrootIOError: If the file cannot be written

    Example:
        >>> atomic_write('sysroot/Cargo.toml', '[package]\\nname = "sysroot"\\n')
    """
    file_path = Path(file_path)
    ensure_directory(file_path.parent)

    try:
        # Temp file in the same directory keeps the rename on one filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
        )
    except OSError as e:
        raise SysrootIOError(f"Failed writing {file_path}: {e}", file_path) from e
    temp_path = Path(temp_path_str)

    try:
        if isinstance(content, str):
            with open(temp_fd, "w", encoding=encoding) as f:
                f.write(content)
        else:
            with open(temp_fd, "wb") as f:
                f.write(content)

        temp_path.replace(file_path)

    except OSError as e:
        try:
            temp_path.unlink(missing_ok=True)
        except OSError:
            pass
        raise SysrootIOError(f"Failed writing {file_path}: {e}", file_path) from e


def write_new_file(
    file_path: Union[str, Path], content: str, encoding: str = "utf-8"
) -> bool:
    """
    Create a file only if it does not already exist.

    Args:
        file_path: Path to create
        content: Text content
        encoding: Text encoding

    Returns:
        True if the file was created, False if it already existed

    Raises:
        SysrootIOError: If creation fails for any other reason
    """
    file_path = Path(file_path)
    try:
        with open(file_path, "x", encoding=encoding) as f:
            f.write(content)
    except FileExistsError:
        return False
    except OSError as e:
        raise SysrootIOError(f"Failed writing {file_path}: {e}", file_path) from e
    return True


# ============================================================================
# Copies
# ============================================================================


def copy_file(source: Union[str, Path], destination: Union[str, Path]) -> Path:
    """
    Copy a single file as a whole unit, overwriting the destination.

    Args:
        source: File to copy
        destination: Target file path

    Returns:
        The destination path

    Raises:
        SysrootIOError: If the copy fails; names both paths
    """
    source = Path(source)
    destination = Path(destination)
    try:
        shutil.copy2(source, destination)
    except OSError as e:
        raise SysrootIOError(
            f"Copying sysroot artifact from {source} to {destination} failed: {e}",
            source,
            destination,
        ) from e
    return destination


def recursive_copy(
    source: Union[str, Path],
    destination: Union[str, Path],
    progress_callback: Optional[Callable[[Path], None]] = None,
    symlinks: bool = False,
) -> None:
    """
    Recursively copy a directory tree, overwriting existing files.

    Args:
        source: Source directory
        destination: Destination directory (created if missing)
        progress_callback: Optional callback called for each entry
        symlinks: If True, copy symlinks as symlinks (default: follow symlinks)

    Raises:
        SysrootIOError: If the source is missing or any entry fails to copy

    Example:
        >>> recursive_copy('/rustup/lib/rustlib/x86_64-unknown-linux-gnu',
        ...                'sysroot/lib/rustlib/x86_64-unknown-linux-gnu')
    """
    source = Path(source)
    destination = Path(destination)

    if not source.is_dir():
        raise SysrootIOError(f"Source is not a directory: {source}", source)

    ensure_directory(destination)

    for item in source.rglob("*"):
        relative = item.relative_to(source)
        # Entries reached through a linked directory are covered by the link
        if symlinks and any(
            (source / parent).is_symlink()
            for parent in relative.parents
            if parent != Path(".")
        ):
            continue
        dest_item = destination / relative

        try:
            if item.is_symlink() and symlinks:
                link_target = os.readlink(item)
                if dest_item.exists() or dest_item.is_symlink():
                    dest_item.unlink()
                os.symlink(link_target, dest_item)
            elif item.is_dir():
                dest_item.mkdir(parents=True, exist_ok=True)
            else:
                dest_item.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(item, dest_item)
        except OSError as e:
            raise SysrootIOError(
                f"Couldn't copy from `{item}` to `{dest_item}`: {e}",
                item,
                dest_item,
            ) from e

        if progress_callback:
            progress_callback(item)


__all__ = [
    "ensure_directory",
    "remove_tree",
    "directory_mtime",
    "atomic_write",
    "write_new_file",
    "copy_file",
    "recursive_copy",
]
