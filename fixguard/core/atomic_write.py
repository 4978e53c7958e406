"""
Atomic report writing.

Reports are written to a temp file in the target directory and renamed over
the destination, so an interrupted run never leaves a half-written report.
"""

import errno
import os
import tempfile
from pathlib import Path


class AtomicWriteError(Exception):
    """Error during atomic write operation."""


def atomic_write(file_path: Path, content: str, encoding: str = 'utf-8') -> Path:
    """
    Write text to file_path atomically.

    Args:
        file_path: Destination path (parent directories are created)
        content: Text to write
        encoding: Text encoding (default: utf-8)

    Returns:
        The destination path

    Raises:
        AtomicWriteError: If the temp file cannot be written or renamed
    """
    file_path = Path(file_path)
    temp_path = None

    try:
        file_path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory keeps the rename on one filesystem
        fd, temp_name = tempfile.mkstemp(
            prefix=f".tmp_{file_path.name}_",
            suffix=".tmp",
            dir=file_path.parent
        )
        temp_path = Path(temp_name)

        with os.fdopen(fd, 'w', encoding=encoding) as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())

        os.replace(temp_path, file_path)
        return file_path

    except OSError as e:
        if temp_path is not None and temp_path.exists():
            temp_path.unlink()

        if e.errno == errno.ENOSPC:
            raise AtomicWriteError(f"Disk full: Cannot write to {file_path}") from e
        if e.errno == errno.EACCES:
            raise AtomicWriteError(
                f"Permission denied: Cannot write to {file_path}. "
                f"Check file/directory permissions."
            ) from e
        raise AtomicWriteError(f"Failed to write {file_path}: {e}") from e
