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
Geometric Primitives
====================

Points, rays and line segments shared by the polyline engine.

Classes:
    Point, Point2d, Point3d: Immutable points
    Ray2d, Ray3d: Points with a heading
    LineSegment: Two-point view of a polyline segment
"""

from .point import (
    Point,
    Point2d,
    Point3d,
    intersection_of_lines,
    intersection_of_line_segments,
)
from .ray import Ray, Ray2d, Ray3d, make_ray, normalize_angle
from .line_segment import LineSegment

__all__ = [
    "Point",
    "Point2d",
    "Point3d",
    "intersection_of_lines",
    "intersection_of_line_segments",
    "Ray",
    "Ray2d",
    "Ray3d",
    "make_ray",
    "normalize_angle",
    "LineSegment",
]
