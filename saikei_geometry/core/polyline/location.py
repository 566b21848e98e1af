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
Position and Projection
=======================

Arclength indexed location queries and projections onto a polyline.

Stationing works like an alignment: a distance along the line (measured
from the first point) maps to a location with the heading of the segment it
lies on, and a point near the line maps back to a distance.

Projection results that do not exist are returned as None.

The mixin expects the host class to provide:
    _points: read-only (n, dimension) float array
    _lengths: read-only cumulative length array, _lengths[0] == 0
    _ray: heading of a degenerate (single point) line, else None
"""

from typing import Optional

import numpy as np

from ..exceptions import (
    InvalidArgumentError,
    InvalidGeometryError,
    OutOfRangeError,
    require_finite,
    require_not_none,
)
from ..primitives import Point, Ray, make_ray


def _interpolate_row(a: np.ndarray, b: np.ndarray, fraction: float) -> tuple:
    """Coordinates at fraction between rows a and b; exact at 0 and 1."""
    if fraction == 0.0:
        return tuple(a.tolist())
    if fraction == 1.0:
        return tuple(b.tolist())
    return tuple(((1.0 - fraction) * a + fraction * b).tolist())


class LocationMixin:
    """Location and projection queries of a PolyLine."""

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _point_array(self, point, name: str = "point") -> np.ndarray:
        require_not_none(point, name)
        coords = np.asarray(tuple(point), dtype=float)
        if coords.shape != (self._points.shape[1],):
            raise InvalidGeometryError(
                f"{name} has dimension {coords.size}, line has dimension {self._points.shape[1]}"
            )
        return coords

    def _location_on_segment(self, index: int, distance: float) -> Ray:
        """Ray at distance along the line, interpolated on segment index.

        Distances outside the segment extrapolate along it.
        """
        start = self._points[index]
        end = self._points[index + 1]
        segment_length = self._lengths[index + 1] - self._lengths[index]
        if distance == self._lengths[index + 1]:
            fraction = 1.0
        elif segment_length > 0:
            fraction = (distance - self._lengths[index]) / segment_length
        else:
            fraction = 0.0
        return make_ray(_interpolate_row(start, end, float(fraction)), tuple((end - start).tolist()))

    def _segment_fractions(self, coords: np.ndarray):
        """Perpendicular projection fraction of coords on every segment line.

        Returns:
            Tuple (fractions, squared distances to the perpendicular feet)
        """
        starts = self._points[:-1]
        deltas = self._points[1:] - starts
        denominators = np.einsum("ij,ij->i", deltas, deltas)
        fractions = np.einsum("ij,ij->i", coords - starts, deltas) / denominators
        feet = starts + fractions[:, None] * deltas
        distances = np.einsum("ij,ij->i", feet - coords, feet - coords)
        return fractions, distances

    def _distance_on_segment(self, index: int, fraction: float) -> float:
        return float(
            self._lengths[index] + fraction * (self._lengths[index + 1] - self._lengths[index])
        )

    # ------------------------------------------------------------------
    # Location queries
    # ------------------------------------------------------------------

    def find(self, distance: float) -> int:
        """Index of the segment that contains the given distance.

        Returns i with lengths[i] <= distance <= lengths[i + 1]; on an exact
        vertex the lower segment index is returned and find(0) is 0.

        Args:
            distance: Distance along the line

        Returns:
            Segment index

        Raises:
            InvalidArgumentError: If distance is not finite
            OutOfRangeError: If distance is outside [0, length]
        """
        distance = require_finite(distance, "distance")
        length = float(self._lengths[-1])
        if distance < 0.0 or distance > length:
            raise OutOfRangeError(f"distance {distance} outside [0, {length}]")
        if len(self._lengths) < 2:
            return 0
        index = int(np.searchsorted(self._lengths, distance, side="left")) - 1
        return min(max(index, 0), len(self._lengths) - 2)

    def get_location(self, distance: float) -> Ray:
        """Location and heading at a distance along the line.

        Args:
            distance: Distance from the first point, in [0, length]

        Returns:
            Ray2d or Ray3d with the heading of the containing segment

        Raises:
            InvalidArgumentError: If distance is not finite
            OutOfRangeError: If distance is outside [0, length]
        """
        distance = require_finite(distance, "distance")
        index = self.find(distance)
        if self._ray is not None:
            return self._ray
        return self._location_on_segment(index, distance)

    def get_location_fraction(self, fraction: float, tolerance: float = 0.0) -> Ray:
        """Location at a fraction of the total length.

        Fractions within tolerance outside [0, 1] are clamped to the ends.

        Raises:
            OutOfRangeError: If fraction is outside [-tolerance, 1 + tolerance]
        """
        fraction = require_finite(fraction, "fraction")
        tolerance = require_finite(tolerance, "tolerance")
        if tolerance < 0:
            raise InvalidArgumentError(f"tolerance must not be negative, got {tolerance}")
        if fraction < -tolerance or fraction > 1.0 + tolerance:
            raise OutOfRangeError(f"fraction {fraction} outside [{-tolerance}, {1.0 + tolerance}]")
        fraction = min(1.0, max(0.0, fraction))
        if fraction == 1.0:
            return self.get_location(float(self._lengths[-1]))
        return self.get_location(fraction * float(self._lengths[-1]))

    def get_location_extended(self, distance: float) -> Ray:
        """Location at any distance; beyond the ends the first or last
        segment is extended linearly.

        Raises:
            InvalidArgumentError: If distance is not finite
        """
        distance = require_finite(distance, "distance")
        if self._ray is not None:
            return self._ray.get_location_extended(distance)
        if distance < 0.0:
            return self._location_on_segment(0, distance)
        if distance > self._lengths[-1]:
            return self._location_on_segment(len(self._lengths) - 2, distance)
        return self.get_location(distance)

    def get_location_fraction_extended(self, fraction: float) -> Ray:
        """Location at any fraction of the total length (see get_location_extended)."""
        fraction = require_finite(fraction, "fraction")
        if fraction == 1.0:
            return self.get_location_extended(float(self._lengths[-1]))
        return self.get_location_extended(fraction * float(self._lengths[-1]))

    # ------------------------------------------------------------------
    # Orthogonal projection
    # ------------------------------------------------------------------

    def _project_fractional(self, point, extended: bool) -> Optional[float]:
        coords = self._point_array(point)
        if self._ray is not None:
            return None
        fractions, distances = self._segment_fractions(coords)
        last = len(fractions) - 1
        on_segment = (fractions >= 0.0) & (fractions <= 1.0)
        on_extension = np.zeros_like(on_segment)
        on_extension[0] |= fractions[0] < 0.0
        on_extension[last] |= fractions[last] > 1.0

        allowed = on_segment | on_extension if extended else on_segment
        if not allowed.any():
            return None
        candidates = np.where(allowed, distances, np.inf)
        index = int(np.argmin(candidates))

        if not extended:
            extension_candidates = np.where(on_extension, distances, np.inf)
            if extension_candidates.min() < candidates[index]:
                # The point lies beyond the first or last point of the line
                return None

        fraction = self._distance_on_segment(index, float(fractions[index])) / float(self._lengths[-1])
        if extended:
            return fraction
        return min(1.0, max(0.0, fraction))

    def project_orthogonal_fractional(self, point: Point) -> Optional[float]:
        """Fractional position of the orthogonal projection of point.

        The nearest perpendicular foot on any segment wins (lowest segment
        index on ties).

        Args:
            point: Point to project

        Returns:
            Fraction in [0, 1], or None when there is no perpendicular foot on
            the line or a nearer one exists only beyond either end
        """
        return self._project_fractional(point, False)

    def project_orthogonal_fractional_extended(self, point: Point) -> Optional[float]:
        """Like project_orthogonal_fractional, but the first and last segments
        extend beyond the ends; the result may lie outside [0, 1]."""
        return self._project_fractional(point, True)

    def project_orthogonal(self, point: Point) -> Optional[Point]:
        """Orthogonal projection of point on the line, or None."""
        fraction = self.project_orthogonal_fractional(point)
        if fraction is None:
            return None
        return self.get_location_fraction(fraction).position

    def project_orthogonal_extended(self, point: Point) -> Optional[Point]:
        """Orthogonal projection of point on the extended line, or None."""
        fraction = self.project_orthogonal_fractional_extended(point)
        if fraction is None:
            return None
        return self.get_location_fraction_extended(fraction).position

    def _closest_segment(self, coords: np.ndarray):
        """Segment index and clamped fraction of the point of the line nearest to coords."""
        starts = self._points[:-1]
        deltas = self._points[1:] - starts
        fractions = np.einsum("ij,ij->i", coords - starts, deltas) / np.einsum("ij,ij->i", deltas, deltas)
        fractions = np.clip(fractions, 0.0, 1.0)
        feet = starts + fractions[:, None] * deltas
        index = int(np.argmin(np.einsum("ij,ij->i", feet - coords, feet - coords)))
        return index, float(fractions[index])

    def closest_position(self, point: Point) -> float:
        """Distance along the line of the point nearest to point."""
        coords = self._point_array(point)
        if self._ray is not None:
            return 0.0
        index, fraction = self._closest_segment(coords)
        return min(float(self._lengths[-1]), self._distance_on_segment(index, fraction))

    def closest_point_on_polyline(self, point: Point) -> Point:
        """Point of the line nearest to point (always exists)."""
        coords = self._point_array(point)
        if self._ray is not None:
            return self._ray.position
        index, fraction = self._closest_segment(coords)
        return Point.of(_interpolate_row(self._points[index], self._points[index + 1], fraction))

    # ------------------------------------------------------------------
    # Ray projection
    # ------------------------------------------------------------------

    def project_ray(self, ray: Ray) -> Optional[float]:
        """Distance along the line where the ray projects.

        The ray defines a line (2D) or plane (3D) through its position
        perpendicular to its heading. Every segment crossing it yields a
        candidate. Candidates on segments heading the same way as the ray are
        preferred; among those the one nearest to the ray position wins.

        Args:
            ray: Ray2d or Ray3d

        Returns:
            Distance in [0, length], or None when no segment is crossed
        """
        origin = self._point_array(require_not_none(ray, "ray"), "ray")
        if self._ray is not None:
            return None
        heading = np.asarray(tuple(ray.direction), dtype=float)
        starts = self._points[:-1]
        deltas = self._points[1:] - starts
        along = deltas @ heading

        with np.errstate(divide="ignore", invalid="ignore"):
            fractions = ((origin - starts) @ heading) / along
        crossing = (along != 0.0) & (fractions >= 0.0) & (fractions <= 1.0)
        if not crossing.any():
            return None

        feet = starts + np.where(crossing, fractions, 0.0)[:, None] * deltas
        distances = np.where(crossing, np.einsum("ij,ij->i", feet - origin, feet - origin), np.inf)
        preferred = crossing & (along > 0.0)
        if preferred.any():
            distances = np.where(preferred, distances, np.inf)
        index = int(np.argmin(distances))
        position = self._distance_on_segment(index, float(fractions[index]))
        return min(float(self._lengths[-1]), max(0.0, position))


__all__ = ["LocationMixin"]
