"""
Constrained random point sampling.

Draws points inside a width x height rectangle subject to three optional
constraints:

* quantization: every coordinate is snapped down to a multiple of the
  quantization interval,
* minimum distance: accepted points are at least 'distance' apart and at
  least 'distance' from every edge before snapping (no point can be
  drawn once 2 * distance reaches the width or height),
* uniqueness: no two accepted points are equal.

Setting a quantization interval or a minimum distance turns uniqueness on.

Sampling is bounded rejection sampling. Every draw, accepted or rejected,
consumes one attempt from a budget of retry_multiplier * count, and the
sampler returns whatever it has accepted once the budget runs out. A short
result is not an error; callers that need an exact count must check it.
"""

import dataclasses
import logging
import math
from typing import Optional

import numpy as np
from shapely.geometry import GeometryCollection

from wktkit import constants
from wktkit.errors import SessionStateError

logger = logging.getLogger(__name__)


@dataclasses.dataclass(frozen=True)
class SamplerConfig:
    count: int
    width: float
    height: float
    quantize: float = constants.DEFAULT_QUANTIZE
    distance: float = constants.DEFAULT_DISTANCE
    unique: bool = constants.DEFAULT_UNIQUE
    retry_multiplier: int = constants.DEFAULT_RETRY_MULTIPLIER

    @property
    def uniqueness(self) -> bool:
        return self.unique or self.distance != 0 or self.quantize != 0

    @classmethod
    def from_configuration(cls, configuration) -> "SamplerConfig":
        return cls(
            count=configuration.count,
            width=configuration.width,
            height=configuration.height,
            quantize=configuration.quantize,
            distance=configuration.distance,
            unique=configuration.unique,
            retry_multiplier=configuration.retry_multiplier,
        )


def snap(value: float, interval: float) -> float:
    """Snaps 'value' down to the nearest multiple of 'interval'."""
    if interval == 0:
        return value
    return math.floor(value / interval) * interval


def draw(config: SamplerConfig, rng: np.random.Generator) -> Optional[tuple[float, float]]:
    """
    Draws one candidate point from [r, W - r) x [r, H - r). The edge offset
    is applied before snapping, so snapping can move a point below the
    offset.

    Returns None when the distance leaves no room to draw from, which is
    when r >= W/2 or r >= H/2.
    """
    r = config.distance
    span_x = config.width - 2 * r
    span_y = config.height - 2 * r
    if span_x <= 0 or span_y <= 0:
        return None
    x = r + rng.random() * span_x
    y = r + rng.random() * span_y
    return snap(x, config.quantize), snap(y, config.quantize)


def acceptable(candidate: np.ndarray, accepted: np.ndarray, config: SamplerConfig) -> bool:
    """
    Tests 'candidate' against the points accepted so far.

    Exact equality is meaningful because candidates and accepted points went
    through the same quantization.
    """
    if not config.uniqueness or len(accepted) == 0:
        return True

    if np.any(np.all(accepted == candidate, axis=1)):
        return False

    r2 = config.distance * config.distance
    distances = np.sum((accepted - candidate) ** 2, axis=1)
    return not np.any(distances < r2)


def sample_points(config: SamplerConfig, rng: np.random.Generator) -> np.ndarray:
    """
    Returns an (n, 2) array of accepted points, n <= config.count.
    """
    accepted = np.empty((config.count, 2), dtype=float)
    n = 0
    remaining_attempts = config.retry_multiplier * config.count

    while n < config.count and remaining_attempts > 0:
        remaining_attempts -= 1
        drawn = draw(config, rng)
        if drawn is None:
            continue
        candidate = np.array(drawn)
        if acceptable(candidate, accepted[:n], config):
            accepted[n] = candidate
            n += 1

    if n < config.count:
        logger.warning(f"Sampler exhausted its retry budget with {n} of {config.count} points")
    else:
        logger.debug(f"Sampled {n} points with {remaining_attempts} attempts to spare")

    return accepted[:n]


def sample(config: SamplerConfig, rng: np.random.Generator, session) -> GeometryCollection:
    """
    Samples points per 'config' and assembles them into a geometry collection
    owned by the engine context of 'session'.
    """
    context = session.context
    if context is None:
        raise SessionStateError("Sampling needs an open session")
    points = [context.create_point(float(x), float(y)) for x, y in sample_points(config, rng)]
    return context.create_collection(points)
