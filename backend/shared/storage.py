"""Atomic file writes for locally persisted application data.

Files are replaced via temp-file-then-rename so readers never observe a
truncated document, and are created with owner-only permissions (0o600)
inside a directory created with owner-only permissions (0o700).
"""

import contextlib
import os
import tempfile
from pathlib import Path

import structlog

logger = structlog.get_logger()

_DATA_DIR_MODE = 0o700
_DATA_FILE_MODE = 0o600


def write_text_atomic(path: Path | str, content: str, *, prefix: str = ".data_") -> None:
    """Replace the file at path with content in a single rename.

    The parent directory is created lazily. On any failure the temp file is
    removed and the original file is left untouched.
    """
    target = Path(path)
    parent = target.parent
    if not parent.exists():
        parent.mkdir(mode=_DATA_DIR_MODE, parents=True, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=str(parent), suffix=".tmp", prefix=prefix)
    fd_owned = True
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            fd_owned = False  # os.fdopen took ownership; it will close fd
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_path, _DATA_FILE_MODE)  # noqa: PTH101
        Path(tmp_path).replace(target)
    except BaseException:
        if fd_owned:
            with contextlib.suppress(OSError):
                os.close(fd)
        with contextlib.suppress(OSError):
            Path(tmp_path).unlink()
        raise
    logger.debug("wrote file", path=str(target), size=len(content))
