"""Output sinks for rendered expressions.

Both sinks take the complete text in a single ``write`` call.  Neither
retries: a failing write raises the sink's own exception, unchanged.

- ``StreamSink`` writes to an already open text or binary stream with one
  ``write`` call (binary streams receive UTF-8).
- ``AtomicFileSink`` writes to a temporary file next to the destination and
  renames it into place, so the destination either keeps its old content or
  holds the complete new expression.  The result keeps the permission bits
  of the file it replaces (new files get 0666 minus the umask).
"""

from __future__ import annotations

import contextlib
import io
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import IO, Any

__all__ = ["AtomicFileSink", "StreamSink"]

logger = logging.getLogger(__name__)


class StreamSink:
    """Writes to an open stream.

    Args:
        stream: A text stream (``io.TextIOBase``) or a binary stream.  Any
            other writer receives UTF-8 bytes.
    """

    def __init__(self, stream: IO[Any]) -> None:
        self._stream = stream

    def write(self, text: str) -> None:
        if isinstance(self._stream, io.TextIOBase):
            self._stream.write(text)
        else:
            self._stream.write(text.encode("utf-8"))


class AtomicFileSink:
    """Writes a file atomically via a sibling temporary file and ``os.replace``.

    Args:
        path: Destination file.  Its directory must exist.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def write(self, text: str) -> None:
        """Commit ``text`` as the full content of the destination file.

        Raises:
            OSError: If the temporary file cannot be written or renamed.  The
                temporary file is removed and the destination is untouched.
        """
        fd, tmp_name = tempfile.mkstemp(
            dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", newline="") as tmp:
                tmp.write(text)
            # mkstemp creates 0600; give the result the mode a plain open() would.
            os.chmod(tmp_name, self._target_mode())
            os.replace(tmp_name, self._path)
        except BaseException:
            with contextlib.suppress(FileNotFoundError):
                os.unlink(tmp_name)
            raise
        logger.debug("wrote %d characters to %s", len(text), self._path)

    def _target_mode(self) -> int:
        """Permission bits of the existing destination, else 0666 minus umask."""
        try:
            return stat.S_IMODE(self._path.stat().st_mode)
        except FileNotFoundError:
            umask = os.umask(0)
            os.umask(umask)
            return 0o666 & ~umask
