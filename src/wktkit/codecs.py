"""
Codecs for the three geometry wire formats.

Each codec pairs a decoder (bytes to geometry) and an encoder (geometry to
bytes) for one format:

* TextCodec: Well-Known Text, UTF-8 encoded.
* BinaryCodec: Well-Known Binary.
* HexCodec: Well-Known Binary rendered as ASCII hexadecimal.

Codecs are selected independently for reading and writing with an IOFormat.
"""

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

import shapely
from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry

from wktkit import constants
from wktkit.errors import EncodeFailureError, InitFailureError, ParseFailureError

logger = logging.getLogger(__name__)


class IOFormat(Enum):
    """Wire format used for one direction of a session."""

    NONE = "none"
    TEXT = "text"
    BINARY = "binary"
    HEX = "hex"

    @classmethod
    def from_name(cls, name: str) -> "IOFormat":
        try:
            return cls(name.lower())
        except (AttributeError, ValueError):
            raise ValueError(f"Unknown geometry format {name!r}") from None


class Codec(ABC):
    """Decodes and encodes geometries in a single format."""

    format: IOFormat

    def __init__(self):
        self.closed = False

    @abstractmethod
    def decode(self, buffer, length: int) -> BaseGeometry:
        """Decode the first 'length' bytes of 'buffer' into a geometry."""
        pass

    @abstractmethod
    def encode(self, geom: BaseGeometry) -> tuple[bytes, int]:
        """Encode 'geom' and return the bytes together with their length."""
        pass

    def close(self):
        self.closed = True

    def _raw(self, buffer, length: int) -> bytes:
        return bytes(memoryview(buffer)[:length])

    def _checked(self, geom: Optional[BaseGeometry]) -> BaseGeometry:
        if geom is None:
            raise ParseFailureError(f"{self.format.value} input produced no geometry")
        return geom


class TextCodec(Codec):
    format = IOFormat.TEXT

    def __init__(self, rounding_precision=constants.DEFAULT_ROUNDING_PRECISION, trim=constants.DEFAULT_TRIM, output_dimension=constants.DEFAULT_OUTPUT_DIMENSION):
        super().__init__()
        self.rounding_precision = rounding_precision
        self.trim = trim
        self.output_dimension = output_dimension

    def decode(self, buffer, length):
        try:
            text = self._raw(buffer, length).decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseFailureError(f"Text input is not valid UTF-8: {e}") from e
        try:
            return self._checked(shapely.from_wkt(text))
        except GEOSException as e:
            raise ParseFailureError(f"Unable to parse WKT: {e}") from e

    def encode(self, geom):
        try:
            text = shapely.to_wkt(
                geom,
                rounding_precision=self.rounding_precision,
                trim=self.trim,
                output_dimension=self.output_dimension,
            )
        except (GEOSException, TypeError, ValueError) as e:
            raise EncodeFailureError(f"Unable to write WKT: {e}") from e
        if text is None:
            raise EncodeFailureError("Unable to write WKT")
        data = text.encode("utf-8")
        return data, len(data)


class BinaryCodec(Codec):
    format = IOFormat.BINARY

    def __init__(self, output_dimension=constants.DEFAULT_OUTPUT_DIMENSION, byte_order=constants.DEFAULT_BYTE_ORDER):
        super().__init__()
        self.output_dimension = output_dimension
        self.byte_order = byte_order

    def decode(self, buffer, length):
        try:
            return self._checked(shapely.from_wkb(self._raw(buffer, length)))
        except GEOSException as e:
            raise ParseFailureError(f"Unable to parse WKB: {e}") from e

    def _wkb(self, geom, hex):
        try:
            wkb = shapely.to_wkb(
                geom,
                hex=hex,
                output_dimension=self.output_dimension,
                byte_order=self.byte_order,
            )
        except (GEOSException, TypeError, ValueError) as e:
            raise EncodeFailureError(f"Unable to write WKB: {e}") from e
        if wkb is None:
            raise EncodeFailureError("Unable to write WKB")
        return wkb

    def encode(self, geom):
        data = self._wkb(geom, hex=False)
        return data, len(data)


class HexCodec(BinaryCodec):
    format = IOFormat.HEX

    def __init__(self, output_dimension=constants.DEFAULT_OUTPUT_DIMENSION, byte_order=constants.DEFAULT_BYTE_ORDER, hex_case=constants.DEFAULT_HEX_CASE):
        super().__init__(output_dimension, byte_order)
        self.hex_case = hex_case

    def decode(self, buffer, length):
        try:
            text = self._raw(buffer, length).decode("ascii").strip()
        except UnicodeDecodeError as e:
            raise ParseFailureError(f"Hex input is not ASCII: {e}") from e
        try:
            return self._checked(shapely.from_wkb(text))
        except GEOSException as e:
            raise ParseFailureError(f"Unable to parse hex WKB: {e}") from e

    def encode(self, geom):
        text = self._wkb(geom, hex=True)
        text = text.lower() if self.hex_case == "lower" else text.upper()
        data = text.encode("ascii")
        return data, len(data)


def create_codec(io_format: IOFormat, configuration=None) -> Optional[Codec]:
    """
    Returns a new codec for 'io_format', configured from 'configuration' when
    one is given. IOFormat.NONE has no codec and returns None.
    """
    if io_format is IOFormat.NONE:
        return None

    options = codec_options(io_format, configuration)
    try:
        if io_format is IOFormat.TEXT:
            codec = TextCodec(**options)
        elif io_format is IOFormat.BINARY:
            codec = BinaryCodec(**options)
        elif io_format is IOFormat.HEX:
            codec = HexCodec(**options)
        else:
            raise InitFailureError(f"No codec for {io_format}")
    except TypeError as e:
        raise InitFailureError(f"Unable to create {io_format.value} codec: {e}") from e

    logger.debug(f"Created {io_format.value} codec")
    return codec


def codec_options(io_format: IOFormat, configuration) -> dict:
    if configuration is None:
        return {}
    if io_format is IOFormat.TEXT:
        return {
            "rounding_precision": configuration.rounding_precision,
            "trim": configuration.trim,
            "output_dimension": configuration.output_dimension,
        }
    options = {
        "output_dimension": configuration.output_dimension,
        "byte_order": configuration.byte_order,
    }
    if io_format is IOFormat.HEX:
        options["hex_case"] = configuration.hex_case
    return options
