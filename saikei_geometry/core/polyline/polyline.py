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
PolyLine
========

Immutable piecewise linear curve of 2D or 3D points.

A PolyLine stores its vertices in a read-only numpy array together with the
cumulative length at every vertex. Both are computed once at construction;
all transformations return new lines.

Invariants:
    - at least 2 points (except the explicit degenerate form)
    - no two consecutive points with identical coordinates
    - lengths[0] == 0 and lengths is non-decreasing

Construction:
    PolyLine.from_points(points)        strict
    PolyLine.from_coordinates(x, y, z)  strict
    PolyLine.cleaned(points, tolerance) drops near-duplicate points
    PolyLine.degenerate(ray)            single point with a heading
    PolyLine.from_path(commands)        move/line path commands

Example:
    >>> line = PolyLine.from_points([(0, 0), (100, 0), (100, 50)])
    >>> line.get_length()
    150.0
    >>> line.get_location(120.0)
    Ray2d(100.000, 20.000, 1.571)
"""

from typing import Callable, Iterable, Iterator, Optional, Sequence, Tuple

import numpy as np

from ..constants import (
    DEFAULT_CONCATENATION_TOLERANCE,
    DEFAULT_DUPLICATE_TOLERANCE,
)
from ..exceptions import (
    IndexOutOfRangeError,
    InvalidArgumentError,
    InvalidGeometryError,
    NullReferenceError,
    OutOfRangeError,
    require_finite,
    require_not_none,
)
from ..logging_config import get_logger
from ..primitives import LineSegment, Point, Ray, Ray2d, Ray3d
from .location import LocationMixin

logger = get_logger(__name__)


def _read_only(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def _points_to_array(points) -> np.ndarray:
    """Convert Points or coordinate tuples to an (n, dimension) array.

    Raises:
        NullReferenceError: If points or one of the points is None
        InvalidGeometryError: If the points differ in dimension
        InvalidArgumentError: If a coordinate is not finite
    """
    if points is None:
        raise NullReferenceError("points may not be None")
    if isinstance(points, np.ndarray):
        rows = points.tolist()
    else:
        rows = list(points)

    coordinates = []
    for index, point in enumerate(rows):
        if point is None:
            raise NullReferenceError(f"point {index} may not be None")
        if not isinstance(point, Point):
            point = Point.of(point)
        if coordinates and len(point) != len(coordinates[0]):
            raise InvalidGeometryError(
                f"Cannot mix dimensions: point {index} has {len(point)} coordinates, "
                f"expected {len(coordinates[0])}"
            )
        coordinates.append(point.coordinates)

    if not coordinates:
        raise InvalidGeometryError("too few points: 0")
    return np.array(coordinates, dtype=float)


def _cumulative_lengths(points: np.ndarray) -> np.ndarray:
    segment_lengths = np.sqrt(np.sum(np.diff(points, axis=0) ** 2, axis=1))
    return np.concatenate(([0.0], np.cumsum(segment_lengths)))


def _segment_deviations(points: np.ndarray, start: np.ndarray, end: np.ndarray) -> np.ndarray:
    """Distance of every row of points to the segment start-end."""
    delta = end - start
    length_squared = float(delta @ delta)
    if length_squared == 0.0:
        fractions = np.zeros(len(points))
    else:
        fractions = np.clip((points - start) @ delta / length_squared, 0.0, 1.0)
    feet = start + fractions[:, None] * delta
    return np.sqrt(np.sum((points - feet) ** 2, axis=1))


class PolyLine(LocationMixin):
    """Immutable polyline of 2D or 3D points.

    Use the named constructors; PolyLine(points) is the same as
    PolyLine.from_points(points). Calling a constructor on the base class
    returns a PolyLine2d or PolyLine3d depending on the point dimension.

    Attributes:
        coordinates: Read-only (n, dimension) array of the vertices
        lengths: Read-only array of cumulative lengths at the vertices
        length: Total length
    """

    __slots__ = ("_points", "_lengths", "_ray")

    DIMENSION = 0

    def __new__(cls, points=None):
        array = _points_to_array(points)
        line = object.__new__(cls._class_for(array.shape[1]))
        line._init_from_array(array)
        return line

    def __init__(self, points=None):
        # Fully initialized by __new__
        pass

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def _class_for(cls, dimension: int):
        if cls.DIMENSION == 0:
            if dimension == 2:
                return PolyLine2d
            if dimension == 3:
                return PolyLine3d
            raise InvalidGeometryError(f"Only 2D and 3D lines are supported, got dimension {dimension}")
        if dimension != cls.DIMENSION:
            raise InvalidGeometryError(
                f"{cls.__name__} needs {cls.DIMENSION}D points, got {dimension}D"
            )
        return cls

    def _init_from_array(self, array: np.ndarray) -> None:
        if len(array) < 2:
            raise InvalidGeometryError(f"too few points: {len(array)}")
        duplicates = np.flatnonzero(np.all(array[1:] == array[:-1], axis=1))
        if duplicates.size:
            index = int(duplicates[0])
            raise InvalidGeometryError(
                f"Consecutive points {index} and {index + 1} have identical coordinates "
                f"{tuple(array[index].tolist())}"
            )
        self._points = _read_only(array)
        self._lengths = _read_only(_cumulative_lengths(array))
        self._ray = None

    @classmethod
    def _from_array(cls, array: np.ndarray) -> "PolyLine":
        line = object.__new__(cls._class_for(array.shape[1]))
        line._init_from_array(np.array(array, dtype=float))
        return line

    @classmethod
    def from_points(cls, points: Iterable) -> "PolyLine":
        """Create a polyline from points (strict).

        Args:
            points: Iterable of Point objects or (x, y[, z]) tuples

        Returns:
            New PolyLine2d or PolyLine3d

        Raises:
            InvalidGeometryError: If there are fewer than 2 points, consecutive
                points coincide or the points differ in dimension
        """
        return cls._from_array(_points_to_array(points))

    @classmethod
    def from_coordinates(
        cls,
        x: Sequence[float],
        y: Sequence[float],
        z: Optional[Sequence[float]] = None,
    ) -> "PolyLine":
        """Create a polyline from separate coordinate arrays (strict).

        Raises:
            InvalidGeometryError: If the arrays differ in length
        """
        require_not_none(x, "x")
        require_not_none(y, "y")
        columns = [np.asarray(x, dtype=float), np.asarray(y, dtype=float)]
        if z is not None:
            columns.append(np.asarray(z, dtype=float))
        sizes = {len(c) for c in columns}
        if len(sizes) != 1:
            raise InvalidGeometryError(f"Coordinate arrays differ in length: {[len(c) for c in columns]}")
        array = np.column_stack(columns)
        if not np.all(np.isfinite(array)):
            raise InvalidArgumentError("Coordinates must be finite")
        return cls._from_array(array)

    @classmethod
    def cleaned(cls, points: Iterable, tolerance: float = DEFAULT_DUPLICATE_TOLERANCE) -> "PolyLine":
        """Create a polyline, dropping points within tolerance of their predecessor.

        The last input point is always kept: when it is within tolerance of
        the last kept point, it replaces that point.

        Args:
            points: Iterable of Point objects or coordinate tuples
            tolerance: Maximum distance of a dropped point to the last kept
                point (0 drops only exact duplicates)

        Raises:
            InvalidGeometryError: If fewer than 2 points remain
            InvalidArgumentError: If tolerance is negative or not finite
        """
        tolerance = require_finite(tolerance, "tolerance")
        if tolerance < 0:
            raise InvalidArgumentError(f"tolerance must not be negative, got {tolerance}")
        array = _points_to_array(points)

        kept = [0]
        for index in range(1, len(array)):
            if np.linalg.norm(array[index] - array[kept[-1]]) > tolerance:
                kept.append(index)
        last = len(array) - 1
        if kept[-1] != last and len(kept) > 1:
            kept[-1] = last
            if np.array_equal(array[kept[-2]], array[last]):
                kept.pop()

        if len(kept) < 2:
            raise InvalidGeometryError(
                f"too few points: {len(kept)} left of {len(array)} after filtering"
            )
        if len(kept) < len(array):
            logger.debug("Filtered %d of %d points", len(array) - len(kept), len(array))
        return cls._from_array(array[kept])

    @classmethod
    def degenerate(cls, ray: Ray) -> "PolyLine":
        """Create the zero length single point line of a ray.

        The line keeps the ray's heading, so location queries return the ray
        and extended queries move along it.
        """
        require_not_none(ray, "ray")
        if not isinstance(ray, (Ray2d, Ray3d)):
            raise InvalidArgumentError(f"A degenerate line needs a Ray2d or Ray3d, got {type(ray).__name__}")
        line = object.__new__(cls._class_for(len(ray)))
        line._points = _read_only(np.array([ray.coordinates], dtype=float))
        line._lengths = _read_only(np.zeros(1))
        line._ray = ray
        return line

    @classmethod
    def from_path(cls, commands) -> "PolyLine":
        """Create a polyline from (PathCommand, coordinates) pairs.

        See saikei_geometry.core.path_import for the supported commands.
        """
        from ..path_import import points_from_path
        return cls.cleaned(points_from_path(commands))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def dimension(self) -> int:
        """Number of coordinates per point."""
        return self._points.shape[1]

    @property
    def coordinates(self) -> np.ndarray:
        """Read-only (n, dimension) vertex array."""
        return self._points

    @property
    def lengths(self) -> np.ndarray:
        """Read-only cumulative length array."""
        return self._lengths

    @property
    def length(self) -> float:
        """Total length."""
        return float(self._lengths[-1])

    @property
    def is_degenerate(self) -> bool:
        """True for the single point form created by degenerate()."""
        return self._ray is not None

    @property
    def points(self) -> Tuple[Point, ...]:
        """Vertices as a tuple of points."""
        return tuple(self.get_points())

    def size(self) -> int:
        """Number of points."""
        return len(self._points)

    def __len__(self):
        return len(self._points)

    def _check_index(self, index: int, limit: int, what: str) -> int:
        if isinstance(index, bool) or not isinstance(index, (int, np.integer)):
            raise InvalidArgumentError(f"{what} index must be an integer, got {index!r}")
        if index < 0 or index >= limit:
            raise IndexOutOfRangeError(f"{what} index {index} outside [0, {limit})")
        return int(index)

    def get(self, index: int) -> Point:
        """Point at index.

        Raises:
            IndexOutOfRangeError: If index is outside [0, size)
        """
        index = self._check_index(index, len(self._points), "point")
        return Point.of(self._points[index].tolist())

    def get_first(self) -> Point:
        """First point."""
        return self.get(0)

    def get_last(self) -> Point:
        """Last point."""
        return self.get(len(self._points) - 1)

    def length_at_index(self, index: int) -> float:
        """Cumulative length at point index."""
        index = self._check_index(index, len(self._points), "point")
        return float(self._lengths[index])

    def get_length(self) -> float:
        """Total length."""
        return float(self._lengths[-1])

    def get_segment(self, index: int) -> LineSegment:
        """Segment from point index to point index + 1.

        Raises:
            IndexOutOfRangeError: If index is outside [0, size - 1)
        """
        index = self._check_index(index, len(self._points) - 1, "segment")
        return LineSegment(self.get(index), self.get(index + 1))

    def get_points(self) -> Iterator[Point]:
        """Iterate over the vertices."""
        for row in self._points:
            yield Point.of(row.tolist())

    def __iter__(self):
        return self.get_points()

    def __eq__(self, other):
        if not isinstance(other, PolyLine) or type(self) is not type(other):
            return False
        return self._ray == other._ray and np.array_equal(self._points, other._points)

    def __hash__(self):
        return hash((type(self).__name__, self._points.tobytes()))

    def __repr__(self):
        if self._ray is not None:
            return f"{type(self).__name__}.degenerate({self._ray!r})"
        return f"{type(self).__name__}(size={len(self._points)}, length={self.length:.3f})"

    # ------------------------------------------------------------------
    # Transformations
    # ------------------------------------------------------------------

    def reverse(self) -> "PolyLine":
        """Same points in opposite order."""
        if self._ray is not None:
            return type(self).degenerate(self._ray.flip())
        return type(self)._from_array(self._points[::-1])

    def extract(self, start: float, end: float) -> "PolyLine":
        """Sub-line between two distances along the line.

        Args:
            start: Start distance, 0 <= start < end
            end: End distance, end <= length

        Raises:
            InvalidArgumentError: If start or end is not finite
            OutOfRangeError: If the interval is not within [0, length] or empty
        """
        start = require_finite(start, "start")
        end = require_finite(end, "end")
        length = self.length
        if start < 0.0 or start >= end or end > length:
            raise OutOfRangeError(f"Cannot extract [{start}, {end}] from line of length {length}")
        if start == 0.0 and end == length:
            return self

        first = self.find(start)
        last = self.find(end)
        rows = [self._location_on_segment(first, start).coordinates]
        inner = np.arange(first + 1, last + 1)
        inner = inner[(self._lengths[inner] > start) & (self._lengths[inner] < end)]
        rows.extend(tuple(row) for row in self._points[inner].tolist())
        if end == length:
            rows.append(tuple(self._points[-1].tolist()))
        else:
            rows.append(self._location_on_segment(last, end).coordinates)

        array = np.array(rows, dtype=float)
        keep = np.concatenate(([True], np.any(array[1:] != array[:-1], axis=1)))
        return type(self)._from_array(array[keep])

    def extract_fractional(self, start_fraction: float, end_fraction: float) -> "PolyLine":
        """Sub-line between two fractions of the total length.

        Raises:
            OutOfRangeError: Unless 0 <= start_fraction < end_fraction <= 1
        """
        start_fraction = require_finite(start_fraction, "start_fraction")
        end_fraction = require_finite(end_fraction, "end_fraction")
        if start_fraction < 0.0 or start_fraction >= end_fraction or end_fraction > 1.0:
            raise OutOfRangeError(f"Cannot extract fractions [{start_fraction}, {end_fraction}]")
        length = self.length
        end = length if end_fraction == 1.0 else end_fraction * length
        return self.extract(start_fraction * length, end)

    def truncate(self, position: float) -> "PolyLine":
        """Line from the first point up to position.

        Raises:
            OutOfRangeError: Unless 0 < position <= length
        """
        position = require_finite(position, "position")
        if position <= 0.0 or position > self.length:
            raise OutOfRangeError(f"Cannot truncate line of length {self.length} at {position}")
        if position == self.length:
            return self
        return self.extract(0.0, position)

    @classmethod
    def concatenate(cls, *lines: "PolyLine", tolerance: float = DEFAULT_CONCATENATION_TOLERANCE) -> "PolyLine":
        """Join lines end to start.

        The first point of every following line is dropped; the gap between
        consecutive lines may not exceed tolerance.

        Args:
            *lines: Lines to join (a single list or tuple is unpacked)
            tolerance: Maximum gap between the end of a line and the start of
                the next

        Raises:
            InvalidGeometryError: If no lines are given or lines do not connect
        """
        if len(lines) == 1 and isinstance(lines[0], (list, tuple)):
            lines = tuple(lines[0])
        tolerance = require_finite(tolerance, "tolerance")
        if tolerance < 0:
            raise InvalidArgumentError(f"tolerance must not be negative, got {tolerance}")
        if not lines:
            raise InvalidGeometryError("Need at least one line to concatenate")
        for index, line in enumerate(lines):
            if line is None:
                raise NullReferenceError(f"line {index} may not be None")
            if line.dimension != lines[0].dimension:
                raise InvalidGeometryError("Cannot concatenate lines of different dimension")
        if len(lines) == 1:
            return lines[0]

        parts = [lines[0]._points]
        for index in range(1, len(lines)):
            gap = float(np.linalg.norm(lines[index]._points[0] - lines[index - 1]._points[-1]))
            if gap > tolerance:
                raise InvalidGeometryError(
                    f"Lines {index - 1} and {index} do not connect: gap {gap} > tolerance {tolerance}"
                )
            parts.append(lines[index]._points[1:])

        array = np.concatenate(parts)
        keep = np.concatenate(([True], np.any(array[1:] != array[:-1], axis=1)))
        return cls._class_for(array.shape[1])._from_array(array[keep])

    def noise_filtered_line(self, tolerance: float) -> "PolyLine":
        """Remove points that deviate at most tolerance from the chord of
        their kept neighbours.

        A point is only dropped when every point dropped since the last kept
        point (and the point itself) stays within tolerance of the chord from
        that last kept point to the next point. First and last points are
        always kept.

        Args:
            tolerance: Maximum deviation of a dropped point

        Returns:
            Filtered line, or this line when no point is removed
        """
        tolerance = require_finite(tolerance, "tolerance")
        if tolerance < 0:
            raise InvalidArgumentError(f"tolerance must not be negative, got {tolerance}")
        points = self._points
        if self._ray is not None or len(points) <= 2:
            return self

        kept = [0]
        for index in range(1, len(points) - 1):
            anchor = points[kept[-1]]
            following = points[index + 1]
            if not np.array_equal(anchor, following):
                deviations = _segment_deviations(points[kept[-1] + 1:index + 1], anchor, following)
                if deviations.max() <= tolerance:
                    continue
            kept.append(index)
        kept.append(len(points) - 1)

        if len(kept) == len(points):
            return self
        logger.debug(
            "Noise filter %.6g removed %d of %d points", tolerance, len(points) - len(kept), len(points)
        )
        return type(self)._from_array(points[kept])

    # ------------------------------------------------------------------
    # Offsets (see offset.py)
    # ------------------------------------------------------------------

    def offset_line(self, offset: float, settings=None) -> "PolyLine":
        """Line at a constant lateral offset (positive is left)."""
        from .offset import offset_line
        return offset_line(self, offset, settings)

    def offset_line_varying(
        self,
        offset_at_start: float,
        offset_at_end: float,
        transition: Optional[Callable[[float], float]] = None,
        settings=None,
    ) -> "PolyLine":
        """Line with an offset changing from offset_at_start to offset_at_end."""
        from .offset import offset_line_varying
        return offset_line_varying(self, offset_at_start, offset_at_end, transition, settings)

    def offset_line_piecewise(self, relative_fractions, offsets, settings=None) -> "PolyLine":
        """Line with offsets interpolated linearly between fractional positions."""
        from .offset import offset_line_piecewise
        return offset_line_piecewise(self, relative_fractions, offsets, settings)

    def transition_line(self, end_line: "PolyLine", transition: Callable[[float], float]) -> "PolyLine":
        """Blend from this line to end_line."""
        from .transition import transition_line
        return transition_line(self, end_line, transition)


class PolyLine2d(PolyLine):
    """Polyline of 2D points."""

    __slots__ = ()
    DIMENSION = 2


class PolyLine3d(PolyLine):
    """Polyline of 3D points."""

    __slots__ = ()
    DIMENSION = 3

    def project_xy(self) -> PolyLine2d:
        """Projection onto the XY plane; points that coincide in plan are dropped.

        Raises:
            InvalidGeometryError: If fewer than 2 distinct points remain in plan
        """
        if self._ray is not None:
            ray = self._ray
            return PolyLine2d.degenerate(Ray2d(ray.x, ray.y, ray.dir_z))
        return PolyLine2d.cleaned(self._points[:, :2])


__all__ = [
    "PolyLine",
    "PolyLine2d",
    "PolyLine3d",
]
