# ==============================================================================
# Saikei Geometry - Polyline Geometry Kernel for Saikei Civil
# Copyright (c) 2025 Michael Yoder / Desert Springs Civil Engineering PLLC
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
#
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
# You should have received a copy of the GNU General Public License along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Primary Author: Michael Yoder
# Company: Desert Springs Civil Engineering PLLC
# ==============================================================================

"""
Bézier Flattener
================

Approximate Bézier curves by polylines.

Two flattening strategies are provided:
    Fixed count: evaluate the curve at evenly spaced parameters
    Adaptive: bisect the curve (De Casteljau) until every piece is flat
        within epsilon

A cubic curve can also be synthesized from two rays; the control points are
placed along the start heading and against the end heading, which gives a
smooth connection between two alignments.

Example:
    >>> start = Ray2d(0.0, 0.0, 0.0)
    >>> end = Ray2d(100.0, 20.0, 0.0)
    >>> connection = cubic_rays(start, end)
    >>> connection.size()
    64
    >>> adaptive = cubic_rays_adaptive(start, end, epsilon=0.01)
"""

import math
from typing import List, Tuple

import numpy as np

from .constants import DEFAULT_BEZIER_SHAPE, DEFAULT_BEZIER_SIZE, MAX_SUBDIVISION_DEPTH
from .exceptions import (
    InvalidArgumentError,
    InvalidGeometryError,
    NullReferenceError,
    require_not_none,
    require_positive,
)
from .logging_config import get_logger
from .polyline import PolyLine
from .primitives import Point, Ray, Ray2d, Ray3d

logger = get_logger(__name__)


# ==============================================================================
# Validation helpers
# ==============================================================================

def _control_array(points) -> np.ndarray:
    if len(points) < 2:
        raise InvalidGeometryError(f"too few points: need at least 2, got {len(points)}")
    rows = []
    for index, point in enumerate(points):
        if point is None:
            raise NullReferenceError(f"control point {index} may not be None")
        point = point if isinstance(point, Point) else Point.of(point)
        if rows and len(point) != len(rows[0]):
            raise InvalidGeometryError("Control points differ in dimension")
        rows.append(point.coordinates)
    return np.array(rows, dtype=float)


def _check_size(size: int) -> int:
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
        raise InvalidArgumentError(f"size must be an integer, got {size!r}")
    if size < 2:
        raise InvalidArgumentError(f"size must be at least 2, got {size}")
    return int(size)


# ==============================================================================
# Evaluation
# ==============================================================================

def _evaluate(controls: np.ndarray, size: int) -> np.ndarray:
    """Evaluate the Bernstein form at size evenly spaced parameters."""
    degree = len(controls) - 1
    t = np.arange(size) / (size - 1.0)
    k = np.arange(degree + 1)
    binomials = np.array([math.comb(degree, i) for i in k], dtype=float)
    basis = binomials * t[:, None] ** k * (1.0 - t[:, None]) ** (degree - k)
    curve = basis @ controls
    curve[0] = controls[0]
    curve[-1] = controls[-1]
    return curve


def _split(controls: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """Split a curve at t = 0.5 (De Casteljau)."""
    left = [controls[0]]
    right = [controls[-1]]
    current = controls
    while len(current) > 1:
        current = 0.5 * (current[:-1] + current[1:])
        left.append(current[0])
        right.append(current[-1])
    return np.array(left), np.array(right[::-1])


def _is_flat(controls: np.ndarray, epsilon: float) -> bool:
    """True when every inner control point lies within epsilon of the chord.

    The curve lies in the convex hull of its control points, so it then
    deviates at most epsilon from the chord as well.
    """
    inner = controls[1:-1]
    if len(inner) == 0:
        return True
    start = controls[0]
    delta = controls[-1] - start
    length_squared = float(delta @ delta)
    if length_squared == 0.0:
        fractions = np.zeros(len(inner))
    else:
        fractions = np.clip((inner - start) @ delta / length_squared, 0.0, 1.0)
    feet = start + fractions[:, None] * delta
    return bool(np.all(np.sum((inner - feet) ** 2, axis=1) <= epsilon * epsilon))


def _flatten(controls: np.ndarray, epsilon: float) -> List[np.ndarray]:
    result = [controls[0]]
    stack = [(controls, 0)]
    limited = 0
    while stack:
        piece, depth = stack.pop()
        if _is_flat(piece, epsilon):
            result.append(piece[-1])
        elif depth >= MAX_SUBDIVISION_DEPTH:
            limited += 1
            result.append(piece[-1])
        else:
            left, right = _split(piece)
            stack.append((right, depth + 1))
            stack.append((left, depth + 1))
    if limited:
        logger.warning(
            "Bézier subdivision depth limit %d reached on %d pieces (epsilon %.3g)",
            MAX_SUBDIVISION_DEPTH, limited, epsilon,
        )
    logger.debug("Adaptive Bézier of degree %d gave %d points", len(controls) - 1, len(result))
    return result


# ==============================================================================
# Public API
# ==============================================================================

def bezier(size: int, *points) -> PolyLine:
    """Approximate a Bézier curve of any degree by size evenly spaced points.

    Args:
        size: Number of points of the result (at least 2)
        *points: Start point, control points and end point

    Returns:
        PolyLine2d or PolyLine3d; first and last points equal the first and
        last argument exactly
    """
    size = _check_size(size)
    controls = _control_array(points)
    return PolyLine.from_points(_evaluate(controls, size))


def bezier_adaptive(epsilon: float, *points) -> PolyLine:
    """Approximate a Bézier curve of any degree within epsilon.

    Args:
        epsilon: Maximum distance between the curve and the result
        *points: Start point, control points and end point

    Returns:
        PolyLine2d or PolyLine3d
    """
    epsilon = require_positive(epsilon, "epsilon")
    controls = _control_array(points)
    return PolyLine.cleaned(_flatten(controls, epsilon))


def cubic(size: int, start, control1, control2, end) -> PolyLine:
    """Approximate a cubic Bézier curve by size evenly spaced points.

    Args:
        size: Number of points (at least 2)
        start: Start point
        control1: First control point
        control2: Second control point
        end: End point

    Example:
        >>> line = cubic(4, Point2d(10, 0), Point2d(20, 0), Point2d(0, 20), Point2d(0, 10))
        >>> line.get(1)
        Point2d(11.852, 4.815)
    """
    return bezier(size, start, control1, control2, end)


def cubic_adaptive(epsilon: float, start, control1, control2, end) -> PolyLine:
    """Approximate a cubic Bézier curve within epsilon."""
    return bezier_adaptive(epsilon, start, control1, control2, end)


def create_control_points(
    start: Ray,
    end: Ray,
    shape: float = DEFAULT_BEZIER_SHAPE,
    weighted: bool = False,
) -> Tuple[Point, Point, Point, Point]:
    """Control points of a cubic curve connecting two rays.

    Unweighted, both control points lie at shape * chord / 2 from their end
    point: along the start heading and against the end heading. Weighted,
    the distances are shape * chord * w, where the weights split by how far
    each end point lies from the foot of the other end point on its own
    heading line.

    Args:
        start: Start location and heading
        end: End location and heading
        shape: Control point distance factor; > 1 is pointier, < 1 flatter
        weighted: Use weighted control point distances

    Returns:
        Tuple (start, control1, control2, end) of points

    Raises:
        InvalidGeometryError: If start and end coincide
        InvalidArgumentError: If shape is not finite and positive
    """
    require_not_none(start, "start")
    require_not_none(end, "end")
    for name, ray in (("start", start), ("end", end)):
        if not isinstance(ray, (Ray2d, Ray3d)):
            raise InvalidArgumentError(f"{name} must be a Ray2d or Ray3d, got {type(ray).__name__}")
    if len(start) != len(end):
        raise InvalidGeometryError("start and end differ in dimension")
    shape = require_positive(shape, "shape")
    chord = start.distance(end)
    if chord == 0:
        raise InvalidGeometryError(f"Cannot create control points; start and end coincide at {start.position}")

    if weighted:
        distance = shape * chord
        d_start = abs(start.project_orthogonal_fractional(end))
        d_end = abs(end.project_orthogonal_fractional(start))
        if d_start + d_end == 0:
            w_start = w_end = 0.5
        else:
            w_start = d_start / (d_start + d_end)
            w_end = d_end / (d_start + d_end)
        control1 = start.get_location_extended(distance * w_start).position
        control2 = end.flip().get_location_extended(distance * w_end).position
    else:
        distance = shape * chord / 2.0
        control1 = start.get_location_extended(distance).position
        control2 = end.flip().get_location_extended(distance).position

    return start.position, control1, control2, end.position


def cubic_rays(
    start: Ray,
    end: Ray,
    size: int = DEFAULT_BEZIER_SIZE,
    shape: float = DEFAULT_BEZIER_SHAPE,
    weighted: bool = False,
) -> PolyLine:
    """Cubic curve of size points from start to end, following both headings."""
    size = _check_size(size)
    return cubic(size, *create_control_points(start, end, shape, weighted))


def cubic_rays_adaptive(
    start: Ray,
    end: Ray,
    epsilon: float,
    shape: float = DEFAULT_BEZIER_SHAPE,
    weighted: bool = False,
) -> PolyLine:
    """Cubic curve from start to end within epsilon, following both headings."""
    epsilon = require_positive(epsilon, "epsilon")
    return cubic_adaptive(epsilon, *create_control_points(start, end, shape, weighted))


__all__ = [
    "bezier",
    "bezier_adaptive",
    "cubic",
    "cubic_adaptive",
    "cubic_rays",
    "cubic_rays_adaptive",
    "create_control_points",
]
