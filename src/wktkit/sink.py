"""
Output sink.

Writes an encoded buffer to a named file, or to standard output when no
name (or "-") is given.
"""

import logging
import os
import sys

from wktkit import constants
from wktkit.errors import IOFailureError, TruncatedError

logger = logging.getLogger(__name__)


def is_stdout(path) -> bool:
    return path is None or path == constants.STDOUT_SENTINEL


def write_output(path, data: bytes) -> int:
    """
    Writes all of 'data' in one write call and returns the number of bytes
    written.

    A named file is created if absent but is neither truncated nor replaced
    atomically, so a failed write can leave partial content behind. A short
    write raises TruncatedError and is not retried.
    """
    if is_stdout(path):
        name = constants.STDOUT_NAME
        # Keep anything already buffered on sys.stdout ahead of our bytes.
        sys.stdout.flush()
        fd = constants.STDOUT_FILENO
        opened = False
    else:
        name = path
        try:
            fd = os.open(path, os.O_WRONLY | os.O_CREAT, constants.OUTPUT_FILE_MODE)
        except OSError as e:
            raise IOFailureError(f"{name}: {e.strerror}") from e
        opened = True

    try:
        try:
            written = os.write(fd, data)
        except OSError as e:
            raise IOFailureError(f"{name}: {e.strerror}") from e

        if written != len(data):
            raise TruncatedError(f"{name}: truncated ({written} of {len(data)} bytes written)")
    finally:
        if opened:
            os.close(fd)

    logger.debug(f"Wrote {written} bytes to {name}")
    return written
