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
Saikei Geometry Core Module

Pure Python geometry kernel used for alignment and corridor work.
This module contains:
- Point, ray and segment primitives (primitives/)
- PolyLine construction, positioning, projection and offsets (polyline/)
- Bézier flattening (bezier.py)
- Path import and text export
- Errors, defaults and logging configuration
"""

# Import logging configuration first (no dependencies)
from .logging_config import get_logger, setup_logging

from .exceptions import (
    GeometryError,
    InvalidGeometryError,
    InvalidArgumentError,
    OutOfRangeError,
    IndexOutOfRangeError,
    NullReferenceError,
    UnsupportedInputError,
)
from .primitives import (
    Point,
    Point2d,
    Point3d,
    Ray2d,
    Ray3d,
    LineSegment,
    make_ray,
)
from .polyline import (
    PolyLine,
    PolyLine2d,
    PolyLine3d,
    OffsetSettings,
    DEFAULT_OFFSET_SETTINGS,
    offset_line,
    offset_line_varying,
    offset_line_piecewise,
    transition_line,
    linear_transition,
    cosine_transition,
)
from .bezier import (
    bezier,
    bezier_adaptive,
    cubic,
    cubic_adaptive,
    cubic_rays,
    cubic_rays_adaptive,
    create_control_points,
)
from .path_import import PathCommand, points_from_path
from .export import iter_coordinates, to_plot, to_tsv

__all__ = [
    "get_logger",
    "setup_logging",
    "GeometryError",
    "InvalidGeometryError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "IndexOutOfRangeError",
    "NullReferenceError",
    "UnsupportedInputError",
    "Point",
    "Point2d",
    "Point3d",
    "Ray2d",
    "Ray3d",
    "LineSegment",
    "make_ray",
    "PolyLine",
    "PolyLine2d",
    "PolyLine3d",
    "OffsetSettings",
    "DEFAULT_OFFSET_SETTINGS",
    "offset_line",
    "offset_line_varying",
    "offset_line_piecewise",
    "transition_line",
    "linear_transition",
    "cosine_transition",
    "bezier",
    "bezier_adaptive",
    "cubic",
    "cubic_adaptive",
    "cubic_rays",
    "cubic_rays_adaptive",
    "create_control_points",
    "PathCommand",
    "points_from_path",
    "iter_coordinates",
    "to_plot",
    "to_tsv",
]
