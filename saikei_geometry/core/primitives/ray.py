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
Directed Points (Rays)
======================

A ray is a point with a heading. Rays are returned by location queries on
polylines and are the input of ray projection and Bézier synthesis.

Angle conventions:
    dir_z: Angle in the XY plane measured from the positive X axis
    dir_y: Angle measured from the positive Z axis (3D only)

    3D unit vector = (sin(dir_y) cos(dir_z), sin(dir_y) sin(dir_z), cos(dir_y))
"""

import math
from typing import Sequence, Union

from ..exceptions import (
    InvalidArgumentError,
    InvalidGeometryError,
    require_finite,
    require_not_none,
)
from .point import Point, Point2d, Point3d, _Directed


def normalize_angle(angle: float) -> float:
    """Normalize an angle to the interval (-pi, pi]."""
    angle = math.atan2(math.sin(angle), math.cos(angle))
    if angle == -math.pi:
        return math.pi
    return angle


class Ray2d(_Directed, Point2d):
    """2D point with a heading.

    Attributes:
        x: X coordinate
        y: Y coordinate
        dir_z: Heading in radians from the positive X axis

    Example:
        >>> ray = Ray2d(0.0, 0.0, math.pi / 2)
        >>> ray.get_location_extended(10.0)
        Ray2d(0.000, 10.000, 1.571)
    """

    __slots__ = ("_dir_z",)

    def __init__(self, x, y, dir_z):
        super().__init__(x, y)
        object.__setattr__(self, "_dir_z", require_finite(dir_z, "dir_z"))

    @classmethod
    def through(cls, point: Point2d, through_point: Point2d) -> "Ray2d":
        """Ray at point heading towards through_point.

        Raises:
            InvalidGeometryError: If the two points coincide
        """
        require_not_none(point, "point")
        require_not_none(through_point, "through_point")
        if point.x == through_point.x and point.y == through_point.y:
            raise InvalidGeometryError(f"Cannot direct a ray from {point} through itself")
        return cls(point.x, point.y, math.atan2(through_point.y - point.y, through_point.x - point.x))

    @property
    def dir_z(self) -> float:
        """Heading in the XY plane."""
        return self._dir_z

    @property
    def position(self) -> Point2d:
        """Location of the ray without heading."""
        return Point2d(self.x, self.y)

    @property
    def direction(self) -> Point2d:
        """Unit direction vector."""
        return Point2d(math.cos(self._dir_z), math.sin(self._dir_z))

    def get_location_extended(self, position: float) -> "Ray2d":
        """Ray moved by position along its heading (negative moves backwards)."""
        position = require_finite(position, "position")
        return Ray2d(
            self.x + position * math.cos(self._dir_z),
            self.y + position * math.sin(self._dir_z),
            self._dir_z,
        )

    def flip(self) -> "Ray2d":
        """Same location, opposite heading."""
        return Ray2d(self.x, self.y, normalize_angle(self._dir_z + math.pi))

    def project_orthogonal_fractional(self, point: Point) -> float:
        """Signed distance along the heading of the perpendicular foot of point."""
        require_not_none(point, "point")
        d = self.direction
        return (point.x - self.x) * d.x + (point.y - self.y) * d.y

    def project_orthogonal(self, point: Point) -> Point2d:
        """Perpendicular foot of point on the infinite line of the ray."""
        return self.get_location_extended(self.project_orthogonal_fractional(point)).position

    def __eq__(self, other):
        if not isinstance(other, Ray2d):
            return False
        return self.coordinates == other.coordinates and self._dir_z == other._dir_z

    def __hash__(self):
        return hash((self.coordinates, self._dir_z))

    def __repr__(self):
        return f"Ray2d({self.x:.3f}, {self.y:.3f}, {self._dir_z:.3f})"


class Ray3d(_Directed, Point3d):
    """3D point with a heading.

    Attributes:
        x, y, z: Coordinates
        dir_y: Angle from the positive Z axis (pi / 2 is horizontal)
        dir_z: Angle in the XY plane from the positive X axis
    """

    __slots__ = ("_dir_y", "_dir_z")

    def __init__(self, x, y, z, dir_y, dir_z):
        super().__init__(x, y, z)
        object.__setattr__(self, "_dir_y", require_finite(dir_y, "dir_y"))
        object.__setattr__(self, "_dir_z", require_finite(dir_z, "dir_z"))

    @classmethod
    def through(cls, point: Point3d, through_point: Point3d) -> "Ray3d":
        """Ray at point heading towards through_point.

        Raises:
            InvalidGeometryError: If the two points coincide
        """
        require_not_none(point, "point")
        require_not_none(through_point, "through_point")
        if point.coordinates == through_point.coordinates:
            raise InvalidGeometryError(f"Cannot direct a ray from {point} through itself")
        dir_y, dir_z = point.direction_to(through_point)
        return cls(point.x, point.y, point.z, dir_y, dir_z)

    @property
    def dir_y(self) -> float:
        """Angle from the positive Z axis."""
        return self._dir_y

    @property
    def dir_z(self) -> float:
        """Heading in the XY plane."""
        return self._dir_z

    @property
    def position(self) -> Point3d:
        """Location of the ray without heading."""
        return Point3d(self.x, self.y, self.z)

    @property
    def direction(self) -> Point3d:
        """Unit direction vector."""
        sin_y = math.sin(self._dir_y)
        return Point3d(
            sin_y * math.cos(self._dir_z),
            sin_y * math.sin(self._dir_z),
            math.cos(self._dir_y),
        )

    def get_location_extended(self, position: float) -> "Ray3d":
        """Ray moved by position along its heading (negative moves backwards)."""
        position = require_finite(position, "position")
        d = self.direction
        return Ray3d(
            self.x + position * d.x,
            self.y + position * d.y,
            self.z + position * d.z,
            self._dir_y,
            self._dir_z,
        )

    def flip(self) -> "Ray3d":
        """Same location, opposite heading."""
        return Ray3d(
            self.x, self.y, self.z,
            math.pi - self._dir_y,
            normalize_angle(self._dir_z + math.pi),
        )

    def project_orthogonal_fractional(self, point: Point) -> float:
        """Signed distance along the heading of the perpendicular foot of point."""
        require_not_none(point, "point")
        if len(point) != 3:
            raise InvalidArgumentError(f"Ray3d needs a 3D point, got {point}")
        return (point - self.position).dot(self.direction)

    def project_orthogonal(self, point: Point) -> Point3d:
        """Perpendicular foot of point on the infinite line of the ray."""
        return self.get_location_extended(self.project_orthogonal_fractional(point)).position

    def __eq__(self, other):
        if not isinstance(other, Ray3d):
            return False
        return (
            self.coordinates == other.coordinates
            and self._dir_y == other._dir_y
            and self._dir_z == other._dir_z
        )

    def __hash__(self):
        return hash((self.coordinates, self._dir_y, self._dir_z))

    def __repr__(self):
        return (
            f"Ray3d({self.x:.3f}, {self.y:.3f}, {self.z:.3f}, "
            f"{self._dir_y:.3f}, {self._dir_z:.3f})"
        )


Ray = Union[Ray2d, Ray3d]


def make_ray(coords: Sequence[float], vector: Sequence[float]) -> Ray:
    """Create a ray at coords heading along vector.

    Args:
        coords: 2 or 3 coordinates (or a Point)
        vector: Direction vector of the same dimension; need not be unit length

    Returns:
        Ray2d or Ray3d

    Raises:
        InvalidGeometryError: If vector has zero length
    """
    point = Point.of(require_not_none(coords, "coords"))
    vector = tuple(float(v) for v in require_not_none(vector, "vector"))
    if len(vector) != len(point):
        raise InvalidArgumentError(
            f"Direction vector dimension {len(vector)} does not match point dimension {len(point)}"
        )
    if all(v == 0.0 for v in vector):
        raise InvalidGeometryError("Cannot derive a heading from a zero length vector")
    if len(point) == 2:
        return Ray2d(point.x, point.y, math.atan2(vector[1], vector[0]))
    dx, dy, dz = vector
    return Ray3d(point.x, point.y, point.z, math.atan2(math.hypot(dx, dy), dz), math.atan2(dy, dx))


__all__ = [
    "Ray",
    "Ray2d",
    "Ray3d",
    "make_ray",
    "normalize_angle",
]
