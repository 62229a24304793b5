from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from common.types import DataSnapshot
from common.utils import from_epoch_utc


class SnapshotError(RuntimeError):
    """The data file could not be stat'ed, read, or decoded as text."""

    def __init__(self, path: Union[str, Path], reason: str):
        super().__init__(f"{path}: {reason}")
        self.path = Path(path)
        self.reason = reason


def read_snapshot(path: Union[str, Path]) -> DataSnapshot:
    """
    Read the data file's modification time and full UTF-8 contents.

    Called on every request; nothing is cached. Metadata and contents are two
    separate reads, so a concurrent writer can make them disagree.

    Raises:
        SnapshotError: file missing/unreadable, metadata unavailable, or
            contents are not valid UTF-8. The underlying error is chained.
    """
    path = Path(path)
    try:
        st = os.stat(path)
    except OSError as e:
        raise SnapshotError(path, f"failed to stat: {e.strerror or e}") from e

    try:
        raw = path.read_bytes()
    except OSError as e:
        raise SnapshotError(path, f"failed to read: {e.strerror or e}") from e

    # Decode by hand: read_text() would translate CRLF line endings.
    try:
        contents = raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise SnapshotError(path, f"not valid UTF-8 text: {e.reason}") from e

    return DataSnapshot(contents=contents, modified_at=from_epoch_utc(st.st_mtime))
