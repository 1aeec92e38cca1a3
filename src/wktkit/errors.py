"""
Exceptions raised by wktkit.

Every failure the toolkit can report is a WktError, so callers at the
command boundary only need to catch one type.
"""


class WktError(Exception):
    """Base class for all wktkit failures."""

    pass


class NotFoundError(WktError):
    """The input file does not exist (or no input file was named)."""

    pass


class IOFailureError(WktError):
    """A system call on an input or output file failed."""

    pass


class TruncatedError(IOFailureError):
    """Fewer bytes were written than requested."""

    pass


class InitFailureError(WktError):
    """The engine context or a codec could not be created."""

    pass


class ParseFailureError(WktError):
    """A codec could not decode its input."""

    pass


class EncodeFailureError(WktError):
    """A codec could not encode a geometry."""

    pass


class UnsupportedDimensionError(WktError):
    """A coordinate sequence is not two dimensional."""

    pass


class NoGeometryError(WktError):
    """An operation needed a decoded geometry and there is none."""

    pass


class LoadFailureError(WktError):
    """Ingestion or decoding failed while loading a file."""

    pass


class EngineError(WktError):
    """A geometry engine call failed."""

    pass


class SessionStateError(WktError):
    """A session operation was invoked in a state that does not allow it."""

    pass
