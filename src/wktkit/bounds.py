from shapely.geometry.base import BaseGeometry

from wktkit.engine import EngineContext


def extract_bounds(context: EngineContext, geom: BaseGeometry) -> tuple[float, float, float, float]:
    """
    Returns (xmin, xmax, ymin, ymax) of 'geom' from four separate extent
    queries. The first failing query raises EngineError; partial bounds are
    never returned.
    """
    xmin = context.xmin(geom)
    xmax = context.xmax(geom)
    ymin = context.ymin(geom)
    ymax = context.ymax(geom)
    return xmin, xmax, ymin, ymax
