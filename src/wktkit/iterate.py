"""
Visitor-based traversal of a decoded geometry tree.

iterate() walks the direct members of a geometry (a non-collection counts as
a collection holding only itself) and iterate_coordinates() walks the
vertices of one coordinate sequence. Visitors return CONTINUE (or None) to
keep going, or a Stop carrying the error that ended the walk; the iterator
returns that error to its caller.

Polygons are not special-cased: callers wanting ring-aware traversal call
iterate_coordinates() on the exterior ring and then on each interior ring,
which iterate_rings() does for them.
"""

import dataclasses
from typing import Callable, Optional, Union

from shapely.geometry.base import BaseGeometry

from wktkit.engine import EngineContext
from wktkit.errors import UnsupportedDimensionError


@dataclasses.dataclass(frozen=True)
class Continue:
    pass


@dataclasses.dataclass(frozen=True)
class Stop:
    error: Optional[Exception] = None


CONTINUE = Continue()

VisitResult = Union[Continue, Stop, None]
MemberVisitor = Callable[[BaseGeometry, str], VisitResult]
CoordinateVisitor = Callable[[int, int, float, float], VisitResult]


def _stopped(result: VisitResult) -> bool:
    return isinstance(result, Stop)


def iterate(context: EngineContext, geom: BaseGeometry, visit: MemberVisitor) -> Optional[Exception]:
    """
    Calls visit(member, type_tag) for each direct member of 'geom' in tree
    order, stopping at the first Stop. Returns the error carried by that Stop,
    or None when every member was visited.
    """
    for i in range(context.num_geometries(geom)):
        member = context.geometry_n(geom, i)
        gtype = context.geom_type(member)
        result = visit(member, gtype)
        if _stopped(result):
            return result.error
    return None


def _walk_coordinates(context: EngineContext, geom: BaseGeometry, visit: CoordinateVisitor) -> Optional[Stop]:
    seq = context.coord_seq(geom)
    if seq.dimensions != 2:
        raise UnsupportedDimensionError(f"Unsupported {context.geom_type(geom)} dimension {seq.dimensions}")

    total = seq.size
    for i in range(total):
        x, y = seq.get_xy(i)
        result = visit(i, total, x, y)
        if _stopped(result):
            return result
    return None


def iterate_coordinates(context: EngineContext, geom: BaseGeometry, visit: CoordinateVisitor) -> Optional[Exception]:
    """
    Calls visit(index, total, x, y) for each vertex of the coordinate sequence
    of 'geom', in index order, stopping at the first Stop.

    Raises UnsupportedDimensionError, before any visit, when the sequence is
    not two dimensional.
    """
    stop = _walk_coordinates(context, geom, visit)
    return stop.error if stop else None


def iterate_rings(context: EngineContext, polygon: BaseGeometry, visit: CoordinateVisitor) -> Optional[Exception]:
    """
    Walks the exterior ring of 'polygon' and then each interior ring in ring
    order. Vertex indices restart at zero for every ring.
    """
    rings = [context.exterior_ring(polygon)]
    rings.extend(context.interior_ring_n(polygon, i) for i in range(context.num_interior_rings(polygon)))
    for ring in rings:
        stop = _walk_coordinates(context, ring, visit)
        if stop:
            return stop.error
    return None
