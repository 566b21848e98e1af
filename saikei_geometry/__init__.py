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
Saikei Geometry
===============

Polyline geometry kernel for road and track centerlines: arclength
positioning, projection, lateral offsets and Bézier flattening.

Usage:
    from saikei_geometry import PolyLine, offset_line

    centerline = PolyLine.from_points([(0, 0), (100, 0), (200, 50)])
    edge = offset_line(centerline, -3.6)
"""

__version__ = "0.5.0"

from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all

__all__ = ["__version__"] + list(_core_all)
