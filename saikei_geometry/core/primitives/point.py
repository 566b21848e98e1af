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
Point Primitives
================

Immutable 2D and 3D points for polyline geometry.

The algorithms of the kernel are written once against the dimension
generic Point base class; Point2d and Point3d are thin instantiations
that add named coordinate access.

Example:
    >>> p1 = Point2d(100.0, 200.0)
    >>> p2 = Point2d(150.0, 250.0)
    >>> mid = p1.interpolate(p2, 0.5)
    >>> print(f"Distance: {p1.distance(p2):.2f}")
"""

import math
from typing import Iterable, Optional, Tuple

from ..exceptions import InvalidArgumentError, InvalidGeometryError, NullReferenceError


class Point:
    """Immutable point with an arbitrary number of coordinates.

    Equality and hashing are exact on the coordinates. Coordinates must be
    finite; NaN and infinity are rejected at construction.

    Attributes:
        coordinates: Tuple of float coordinates
        dimension: Number of coordinates
    """

    __slots__ = ("_coords",)

    # Fixed by the 2D / 3D instantiations; 0 means "any"
    DIMENSION = 0

    def __init__(self, *coords):
        """Initialize point from coordinates.

        Args:
            *coords: Coordinate values

        Raises:
            InvalidArgumentError: If a coordinate is not finite or the number
                of coordinates does not match the point class
        """
        values = tuple(float(c) for c in coords)
        if self.DIMENSION and len(values) != self.DIMENSION:
            raise InvalidArgumentError(
                f"{type(self).__name__} needs {self.DIMENSION} coordinates, got {len(values)}"
            )
        if len(values) < 1:
            raise InvalidArgumentError("Point needs at least one coordinate")
        for value in values:
            if not math.isfinite(value):
                raise InvalidArgumentError(f"Point coordinates must be finite, got {values}")
        object.__setattr__(self, "_coords", values)

    def __setattr__(self, name, value):
        raise AttributeError(f"{type(self).__name__} is immutable")

    @staticmethod
    def of(coords: Iterable[float]) -> "Point":
        """Create a Point2d or Point3d from a coordinate sequence.

        Args:
            coords: Sequence of 2 or 3 coordinates (a Point is returned as-is)

        Returns:
            Point of matching dimension
        """
        if coords is None:
            raise NullReferenceError("coordinates may not be None")
        if isinstance(coords, Point):
            return coords
        values = tuple(coords)
        if len(values) == 2:
            return Point2d(*values)
        if len(values) == 3:
            return Point3d(*values)
        raise InvalidArgumentError(f"Only 2D and 3D points are supported, got {len(values)} coordinates")

    @property
    def coordinates(self) -> Tuple[float, ...]:
        """Coordinate tuple."""
        return self._coords

    @property
    def dimension(self) -> int:
        """Number of coordinates."""
        return len(self._coords)

    @property
    def x(self) -> float:
        """X coordinate (Easting)."""
        return self._coords[0]

    @property
    def y(self) -> float:
        """Y coordinate (Northing)."""
        return self._coords[1]

    def __iter__(self):
        return iter(self._coords)

    def __len__(self):
        return len(self._coords)

    def __getitem__(self, index):
        return self._coords[index]

    def __eq__(self, other):
        """Exact coordinate equality (directed points also compare headings)."""
        if not isinstance(other, Point) or isinstance(other, _Directed) != isinstance(self, _Directed):
            return False
        return self._coords == other._coords

    def __hash__(self):
        return hash(self._coords)

    def __repr__(self):
        coords = ", ".join(f"{c:.3f}" for c in self._coords)
        return f"{type(self).__name__}({coords})"

    # ------------------------------------------------------------------
    # Vector arithmetic (results are plain points)
    # ------------------------------------------------------------------

    def _check_dimension(self, other: "Point") -> None:
        if other is None:
            raise NullReferenceError("point may not be None")
        if len(other) != len(self._coords):
            raise InvalidArgumentError(
                f"Dimension mismatch: {len(self._coords)}D and {len(other)}D"
            )

    def __add__(self, other):
        """Add two vectors."""
        self._check_dimension(other)
        return Point.of(a + b for a, b in zip(self._coords, other))

    def __sub__(self, other):
        """Subtract two vectors."""
        self._check_dimension(other)
        return Point.of(a - b for a, b in zip(self._coords, other))

    def __mul__(self, scalar):
        """Multiply vector by scalar."""
        return Point.of(a * scalar for a in self._coords)

    def __rmul__(self, scalar):
        return self.__mul__(scalar)

    def __truediv__(self, scalar):
        """Divide vector by scalar."""
        return Point.of(a / scalar for a in self._coords)

    def __neg__(self):
        return Point.of(-a for a in self._coords)

    @property
    def norm(self) -> float:
        """Vector magnitude (distance to the origin)."""
        return math.sqrt(sum(a * a for a in self._coords))

    def normalized(self) -> "Point":
        """Return unit vector in same direction.

        Raises:
            InvalidGeometryError: If the vector has zero length
        """
        norm = self.norm
        if norm == 0:
            raise InvalidGeometryError("Cannot normalize a zero length vector")
        return self / norm

    def dot(self, other: "Point") -> float:
        """Dot product with another vector."""
        self._check_dimension(other)
        return sum(a * b for a, b in zip(self._coords, other))

    # ------------------------------------------------------------------
    # Metric operations
    # ------------------------------------------------------------------

    def distance_squared(self, other: "Point") -> float:
        """Squared distance (avoids sqrt for comparisons)."""
        self._check_dimension(other)
        return sum((a - b) ** 2 for a, b in zip(self._coords, other))

    def distance(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.sqrt(self.distance_squared(other))

    def interpolate(self, other: "Point", fraction: float) -> "Point":
        """Point at fraction between this point (0.0) and other (1.0).

        Written as (1 - f) * a + f * b so that fractions 0 and 1 reproduce
        the end points exactly. Fractions outside [0, 1] extrapolate.

        Args:
            other: Point at fraction 1.0
            fraction: Position between the points

        Returns:
            Interpolated plain point
        """
        self._check_dimension(other)
        fraction = float(fraction)
        if not math.isfinite(fraction):
            raise InvalidArgumentError(f"fraction must be finite, got {fraction}")
        if fraction == 0.0:
            return Point.of(self._coords)
        if fraction == 1.0:
            return Point.of(other.coordinates)
        return Point.of(
            (1.0 - fraction) * a + fraction * b for a, b in zip(self._coords, other)
        )

    def fractional_position_on_line(self, start: "Point", end: "Point") -> float:
        """Fraction of the perpendicular foot of this point on the line start-end.

        0.0 corresponds to start, 1.0 to end; values outside [0, 1] lie on
        the extension of the segment.

        Raises:
            InvalidGeometryError: If start and end coincide
        """
        self._check_dimension(start)
        self._check_dimension(end)
        direction = [b - a for a, b in zip(start, end)]
        length_squared = sum(d * d for d in direction)
        if length_squared == 0:
            raise InvalidGeometryError("Line is degenerate; start and end coincide")
        return sum((p - a) * d for p, a, d in zip(self._coords, start, direction)) / length_squared

    def closest_point_on_line(self, start: "Point", end: "Point") -> "Point":
        """Perpendicular foot of this point on the infinite line through start and end."""
        return start.interpolate(end, self.fractional_position_on_line(start, end))

    def closest_point_on_segment(self, start: "Point", end: "Point") -> "Point":
        """Closest point to this point on the segment start-end.

        A degenerate segment (start == end) yields start.
        """
        self._check_dimension(start)
        if start == end or start.coordinates == end.coordinates:
            return Point.of(start.coordinates)
        fraction = self.fractional_position_on_line(start, end)
        return start.interpolate(end, min(1.0, max(0.0, fraction)))

    def to_tuple(self) -> tuple:
        """Convert to coordinate tuple."""
        return self._coords


class _Directed:
    """Marker for points that carry a heading (see ray.py)."""

    __slots__ = ()


class Point2d(Point):
    """Immutable 2D point.

    Attributes:
        x: X coordinate (Easting)
        y: Y coordinate (Northing)

    Example:
        >>> p = Point2d(3.0, 4.0)
        >>> p.distance(Point2d(0.0, 0.0))
        5.0
    """

    __slots__ = ()
    DIMENSION = 2

    def __init__(self, x, y):
        super().__init__(x, y)

    def direction_to(self, other: "Point2d") -> float:
        """Angle in radians from positive X axis of the vector towards other."""
        self._check_dimension(other)
        return math.atan2(other.y - self.y, other.x - self.x)

    def cross(self, other: "Point2d") -> float:
        """2D cross product (scalar z-component)."""
        self._check_dimension(other)
        return self.x * other.y - self.y * other.x

    def perpendicular(self, clockwise: bool = False) -> "Point2d":
        """Perpendicular vector with same length."""
        if clockwise:
            return Point2d(self.y, -self.x)
        return Point2d(-self.y, self.x)


class Point3d(Point):
    """Immutable 3D point.

    Attributes:
        x: X coordinate (Easting)
        y: Y coordinate (Northing)
        z: Z coordinate (Elevation)
    """

    __slots__ = ()
    DIMENSION = 3

    def __init__(self, x, y, z):
        super().__init__(x, y, z)

    @property
    def z(self) -> float:
        """Z coordinate (Elevation)."""
        return self._coords[2]

    def direction_to(self, other: "Point3d") -> Tuple[float, float]:
        """Heading (dir_y, dir_z) of the vector towards other.

        dir_y is the angle from the positive Z axis, dir_z the angle in the
        XY plane from the positive X axis.
        """
        self._check_dimension(other)
        dx = other.x - self.x
        dy = other.y - self.y
        dz = other.z - self.z
        return math.atan2(math.hypot(dx, dy), dz), math.atan2(dy, dx)

    def cross(self, other: "Point3d") -> "Point3d":
        """3D cross product."""
        self._check_dimension(other)
        return Point3d(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def project_xy(self) -> Point2d:
        """Drop the z coordinate."""
        return Point2d(self.x, self.y)


def intersection_of_lines(
    p1: Point2d,
    p2: Point2d,
    p3: Point2d,
    p4: Point2d,
    first_is_segment: bool = False,
    second_is_segment: bool = False,
) -> Optional[Point2d]:
    """Calculate intersection point of the lines p1-p2 and p3-p4.

    Args:
        p1, p2: Two points on the first line
        p3, p4: Two points on the second line
        first_is_segment: Restrict the first line to the segment p1-p2
        second_is_segment: Restrict the second line to the segment p3-p4

    Returns:
        Intersection point, or None if the lines are parallel or the
        intersection lies outside a restricted segment
    """
    d1x = p2.x - p1.x
    d1y = p2.y - p1.y
    d2x = p4.x - p3.x
    d2y = p4.y - p3.y

    det = d1x * d2y - d1y * d2x
    if det == 0:
        # Lines are parallel
        return None

    dx = p3.x - p1.x
    dy = p3.y - p1.y
    t1 = (dx * d2y - dy * d2x) / det
    t2 = (dx * d1y - dy * d1x) / det

    if first_is_segment and (t1 < 0.0 or t1 > 1.0):
        return None
    if second_is_segment and (t2 < 0.0 or t2 > 1.0):
        return None

    return Point2d(p1.x + t1 * d1x, p1.y + t1 * d1y)


def intersection_of_line_segments(
    p1: Point2d,
    p2: Point2d,
    p3: Point2d,
    p4: Point2d,
) -> Optional[Point2d]:
    """Intersection of the segments p1-p2 and p3-p4, or None."""
    return intersection_of_lines(p1, p2, p3, p4, True, True)


__all__ = [
    "Point",
    "Point2d",
    "Point3d",
    "intersection_of_lines",
    "intersection_of_line_segments",
]
