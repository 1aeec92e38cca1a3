"""
Geometry session.

A GeometrySession owns one engine context, the reader and writer codecs, the
mapped input file and the geometry decoded from it. It moves through three
states:

    CLOSED --open()--> OPEN --load()--> LOADED
       ^                 |                 |
       +----close()------+-----close()-----+

emit() is valid in OPEN and LOADED; bounds() needs a decoded geometry.

The configured reader and writer formats never change once the session is
open. A failed load() disables the reader for the rest of the session,
which reader_usable reports, so a half-initialised codec is never used to
decode again.
"""

import logging
from enum import Enum
from typing import Optional

from shapely.geometry.base import BaseGeometry

from wktkit import bounds as bounds_extractor
from wktkit import codecs
from wktkit import ingest
from wktkit import sink
from wktkit.codecs import IOFormat
from wktkit.engine import EngineContext
from wktkit.errors import (
    EncodeFailureError,
    InitFailureError,
    LoadFailureError,
    NoGeometryError,
    SessionStateError,
    WktError,
)

logger = logging.getLogger(__name__)


class SessionState(Enum):
    CLOSED = "closed"
    OPEN = "open"
    LOADED = "loaded"


class GeometrySession:
    def __init__(
        self,
        reader_format: IOFormat = IOFormat.NONE,
        writer_format: IOFormat = IOFormat.NONE,
        configuration=None,
    ):
        self._reader_format = reader_format
        self._writer_format = writer_format
        self._configuration = configuration
        self._reader_usable = False
        self._state = SessionState.CLOSED
        self.context: Optional[EngineContext] = None
        self.reader: Optional[codecs.Codec] = None
        self.writer: Optional[codecs.Codec] = None
        self.input: Optional[ingest.MappedInput] = None
        self._geometry: Optional[BaseGeometry] = None

    def __enter__(self):
        if self._state is SessionState.CLOSED:
            self.open()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.close()
        return False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def reader_format(self) -> IOFormat:
        return self._reader_format

    @property
    def writer_format(self) -> IOFormat:
        return self._writer_format

    @property
    def reader_usable(self) -> bool:
        return self._reader_usable

    @property
    def geometry(self) -> Optional[BaseGeometry]:
        return self._geometry

    def open(self):
        """
        Creates the engine context and the codecs for the configured formats.
        """
        if self._state is not SessionState.CLOSED:
            raise SessionStateError(f"Cannot open a session that is {self._state.value}")

        # A context left behind by an earlier failed open.
        self._finish_context()
        try:
            self.context = EngineContext()
        except Exception as e:
            raise InitFailureError(f"Unable to create engine context: {e}") from e

        try:
            self.reader = codecs.create_codec(self._reader_format, self._configuration)
            self.writer = codecs.create_codec(self._writer_format, self._configuration)
        except InitFailureError:
            logger.error("Unable to create session codecs")
            self._close_reader()
            self._close_writer()
            raise

        self._state = SessionState.OPEN
        self._reader_usable = self.reader is not None
        logger.debug(
            f"Session open (reader: {self._reader_format.value}, writer: {self._writer_format.value})"
        )

    def load(self, path: str) -> BaseGeometry:
        """
        Maps 'path' and decodes it with the reader codec.

        On failure the reader is disabled and LoadFailureError is raised; the
        session stays OPEN.
        """
        if self._state is not SessionState.OPEN:
            raise SessionStateError(f"Cannot load into a session that is {self._state.value}")
        if not self._reader_usable:
            raise LoadFailureError(f"{path}: no usable reader (format {self._reader_format.value})")

        try:
            self.input = ingest.open_input(path)
            geom = self.reader.decode(self.input.buffer, self.input.length)
        except WktError as e:
            self._reader_usable = False
            if self.input is not None:
                self.input.release()
                self.input = None
            raise LoadFailureError(f"{path}: {e}") from e

        self._geometry = self.context.adopt(geom)
        self._state = SessionState.LOADED
        logger.debug(f"Loaded {geom.geom_type} from {path}")
        return self._geometry

    def emit(self, path=None, geometry: Optional[BaseGeometry] = None) -> int:
        """
        Encodes 'geometry' (the decoded geometry by default) with the writer
        codec and writes it to 'path', or to standard output when 'path' is
        None or "-". Returns the number of bytes written.
        """
        if self._state is SessionState.CLOSED:
            raise SessionStateError("Cannot emit from a closed session")
        if geometry is None:
            geometry = self._geometry
        if geometry is None:
            raise NoGeometryError("No geometry to emit")
        if self.writer is None:
            raise EncodeFailureError(f"No writer configured (format {self._writer_format.value})")

        data, length = self.writer.encode(geometry)
        return sink.write_output(path, data[:length])

    def bounds(self) -> tuple[float, float, float, float]:
        """
        Returns (xmin, xmax, ymin, ymax) of the decoded geometry.
        """
        if self._geometry is None:
            raise NoGeometryError("No decoded geometry to compute bounds for")
        return bounds_extractor.extract_bounds(self.context, self._geometry)

    def close(self):
        """
        Releases everything the session owns, in order: reader codec, writer
        codec, decoded geometry, mapped input, engine context. Teardown keeps
        going past a failed step and never raises.
        """
        steps = [
            ("reader codec", self._close_reader),
            ("writer codec", self._close_writer),
            ("geometry", self._destroy_geometry),
            ("input", self._release_input),
            ("engine context", self._finish_context),
        ]
        for name, step in steps:
            try:
                step()
            except Exception as e:
                logger.warning(f"Failed to release {name}: {e}")

        self._reader_usable = False
        self._state = SessionState.CLOSED

    def _close_reader(self):
        if self.reader is not None:
            reader, self.reader = self.reader, None
            reader.close()

    def _close_writer(self):
        if self.writer is not None:
            writer, self.writer = self.writer, None
            writer.close()

    def _destroy_geometry(self):
        if self._geometry is not None:
            geom, self._geometry = self._geometry, None
            self.context.destroy(geom)

    def _release_input(self):
        if self.input is not None:
            mapped, self.input = self.input, None
            mapped.release()

    def _finish_context(self):
        if self.context is not None:
            context, self.context = self.context, None
            context.finish()
