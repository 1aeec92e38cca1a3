"""
Input ingestion.

Maps an input file read-only into memory so codecs can decode it in place.
"""

import logging
import mmap
import os

from wktkit.errors import IOFailureError, NotFoundError

logger = logging.getLogger(__name__)


class MappedInput:
    """
    A read-only view of a whole input file.

    The view stays valid until release() is called. A zero-length file is
    represented by an empty buffer since it cannot be mapped.
    """

    def __init__(self, path: str, buffer, length: int):
        self.path = path
        self.length = length
        self._buffer = buffer

    @property
    def released(self) -> bool:
        return self._buffer is None

    @property
    def buffer(self):
        if self._buffer is None:
            raise IOFailureError(f"{self.path}: input has been released")
        return self._buffer

    def view(self) -> memoryview:
        return memoryview(self.buffer)

    def release(self):
        """
        Unmaps the input. Views handed out by view() must be released
        first; while one is alive the input stays mapped and IOFailureError
        is raised.
        """
        if self._buffer is None:
            return
        if isinstance(self._buffer, mmap.mmap):
            try:
                self._buffer.close()
            except BufferError as e:
                raise IOFailureError(f"{self.path}: input is still in use: {e}") from e
        self._buffer = None


def open_input(path: str) -> MappedInput:
    """
    Maps the file at 'path' into memory without copying it.

    Raises NotFoundError when the file does not exist (or no path was given)
    and IOFailureError for any other stat or map failure.
    """
    if path is None:
        raise NotFoundError("No input file")

    try:
        fd = os.open(path, os.O_RDONLY)
    except FileNotFoundError as e:
        raise NotFoundError(f"{path}: {e.strerror}") from e
    except OSError as e:
        raise IOFailureError(f"{path}: {e.strerror}") from e

    try:
        length = os.fstat(fd).st_size
        if length == 0:
            buffer = b""
        else:
            buffer = mmap.mmap(fd, length, access=mmap.ACCESS_READ)
    except OSError as e:
        raise IOFailureError(f"{path}: {e.strerror}") from e
    except ValueError as e:
        raise IOFailureError(f"{path}: {e}") from e
    finally:
        # The mapping does not need the descriptor.
        os.close(fd)

    logger.debug(f"Mapped {length} bytes from {path}")
    return MappedInput(path, buffer, length)
