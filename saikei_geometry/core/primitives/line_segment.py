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
Line Segment
============

Two-point view used by polyline segment queries.
"""

from dataclasses import dataclass

from ..exceptions import InvalidGeometryError, require_finite, require_not_none
from .point import Point
from .ray import Ray, make_ray


@dataclass(frozen=True)
class LineSegment:
    """Straight segment between two points of equal dimension.

    Attributes:
        start: Start point
        end: End point
    """
    start: Point
    end: Point

    def __post_init__(self):
        """Validate segment data."""
        require_not_none(self.start, "start")
        require_not_none(self.end, "end")
        if len(self.start) != len(self.end):
            raise InvalidGeometryError(
                f"Segment end points differ in dimension: {self.start}, {self.end}"
            )

    @property
    def length(self) -> float:
        """Segment length."""
        return self.start.distance(self.end)

    @property
    def direction(self) -> Ray:
        """Ray at the start point heading towards the end point."""
        return make_ray(self.start.coordinates, (self.end - self.start).coordinates)

    def location(self, fraction: float) -> Point:
        """Point at fraction of the segment (0 = start, 1 = end)."""
        return self.start.interpolate(self.end, require_finite(fraction, "fraction"))

    def closest_point(self, point: Point) -> Point:
        """Closest point on the segment to point."""
        return require_not_none(point, "point").closest_point_on_segment(self.start, self.end)

    def project_orthogonal_fractional(self, point: Point) -> float:
        """Fraction of the perpendicular foot of point on the segment's line.

        Returns:
            Fraction, possibly outside [0, 1]
        """
        return require_not_none(point, "point").fractional_position_on_line(self.start, self.end)


__all__ = ["LineSegment"]
