"""
Geometry engine context.

Every geometry operation wktkit performs goes through an EngineContext,
which wraps the GEOS bindings provided by shapely. The context is the unit
of lifetime for the geometries it constructs: once finish() has been called
no further engine call is possible.
"""

import logging
import math
from typing import Sequence

import numpy as np
import shapely
from shapely.errors import GEOSException
from shapely.geometry import GeometryCollection, Point
from shapely.geometry.base import BaseGeometry

from wktkit import constants
from wktkit.errors import EngineError

logger = logging.getLogger(__name__)


class CoordinateSequence:
    """
    An ordered run of vertices belonging to a single geometry.

    The sequence is read-only; dimensions reports how many ordinates each
    vertex carries as the engine sees it (2, 3 or 4).
    """

    def __init__(self, coords: np.ndarray, dimensions: int):
        self._coords = coords
        self.dimensions = dimensions

    @property
    def size(self) -> int:
        return len(self._coords)

    def get_xy(self, index: int) -> tuple[float, float]:
        if index < 0 or index >= self.size:
            raise EngineError(f"Coordinate index {index} out of range 0..{self.size - 1}")
        return float(self._coords[index][0]), float(self._coords[index][1])


class EngineContext:
    """Handle required by every geometry engine call."""

    def __init__(self):
        self._finished = False
        self._owned = {}
        logger.debug(f"Engine context created (GEOS {shapely.geos_version_string})")

    @property
    def finished(self) -> bool:
        return self._finished

    def _check(self):
        if self._finished:
            raise EngineError("The engine context has been finished")

    def _own(self, geom: BaseGeometry) -> BaseGeometry:
        self._owned[id(geom)] = geom
        return geom

    def owns(self, geom: BaseGeometry) -> bool:
        return id(geom) in self._owned

    # Introspection

    def num_geometries(self, geom: BaseGeometry) -> int:
        self._check()
        return int(shapely.get_num_geometries(geom))

    def geometry_n(self, geom: BaseGeometry, index: int) -> BaseGeometry:
        self._check()
        member = shapely.get_geometry(geom, index)
        if member is None:
            raise EngineError(f"No member geometry at index {index}")
        return member

    def geom_type(self, geom: BaseGeometry) -> str:
        self._check()
        return geom.geom_type

    def coord_seq(self, geom: BaseGeometry) -> CoordinateSequence:
        self._check()
        gtype = geom.geom_type
        if gtype not in constants.SEQUENCE_TYPES:
            raise EngineError(f"A {gtype} does not have a coordinate sequence")
        dimensions = int(shapely.get_coordinate_dimension(geom))
        coords = shapely.get_coordinates(geom, include_z=dimensions >= 3)
        return CoordinateSequence(coords, dimensions)

    def exterior_ring(self, geom: BaseGeometry) -> BaseGeometry:
        self._check()
        ring = shapely.get_exterior_ring(geom)
        if ring is None:
            raise EngineError(f"A {geom.geom_type} does not have an exterior ring")
        return ring

    def num_interior_rings(self, geom: BaseGeometry) -> int:
        self._check()
        if geom.geom_type != "Polygon":
            raise EngineError(f"A {geom.geom_type} does not have interior rings")
        return int(shapely.get_num_interior_rings(geom))

    def interior_ring_n(self, geom: BaseGeometry, index: int) -> BaseGeometry:
        self._check()
        ring = shapely.get_interior_ring(geom, index)
        if ring is None:
            raise EngineError(f"No interior ring at index {index}")
        return ring

    # Extent queries

    def _extent(self, geom: BaseGeometry, index: int, name: str) -> float:
        self._check()
        value = float(shapely.bounds(geom)[index])
        if math.isnan(value):
            raise EngineError(f"Unable to compute {name} of an empty {geom.geom_type}")
        return value

    def xmin(self, geom: BaseGeometry) -> float:
        return self._extent(geom, 0, "xmin")

    def ymin(self, geom: BaseGeometry) -> float:
        return self._extent(geom, 1, "ymin")

    def xmax(self, geom: BaseGeometry) -> float:
        return self._extent(geom, 2, "xmax")

    def ymax(self, geom: BaseGeometry) -> float:
        return self._extent(geom, 3, "ymax")

    # Construction

    def create_point(self, x: float, y: float) -> Point:
        self._check()
        return self._own(Point(x, y))

    def create_collection(self, members: Sequence[BaseGeometry]) -> GeometryCollection:
        self._check()
        collection = GeometryCollection(list(members))
        # Members now belong to the collection.
        for member in members:
            self._owned.pop(id(member), None)
        return self._own(collection)

    def convex_hull(self, geom: BaseGeometry) -> BaseGeometry:
        self._check()
        try:
            hull = shapely.convex_hull(geom)
        except GEOSException as e:
            raise EngineError(f"Unable to compute convex hull: {e}") from e
        if hull is None:
            raise EngineError("Unable to compute convex hull")
        return self._own(hull)

    def adopt(self, geom: BaseGeometry) -> BaseGeometry:
        """
        Registers a geometry produced by a codec as owned by this context.
        """
        self._check()
        return self._own(geom)

    # Teardown

    def destroy(self, geom: BaseGeometry):
        self._check()
        self._owned.pop(id(geom), None)

    def finish(self):
        if self._finished:
            return
        if self._owned:
            logger.debug(f"Engine context finished with {len(self._owned)} live geometries")
        self._owned.clear()
        self._finished = True
