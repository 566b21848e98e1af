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
PolyLine Engine
===============

Polyline construction, arclength positioning, projection and offsetting.

Classes:
    PolyLine: Dimension generic immutable polyline
    PolyLine2d, PolyLine3d: Dimension checked polylines
    OffsetSettings: Offset engine tolerances

Functions:
    offset_line: Constant lateral offset
    offset_line_varying: Offset blended between two values
    offset_line_piecewise: Offset interpolated between positions
    transition_line: Blend between two lines
"""

from .polyline import PolyLine, PolyLine2d, PolyLine3d
from .transition import (
    TransitionFunction,
    cosine_transition,
    linear_transition,
    transition_line,
)
from .offset import (
    DEFAULT_OFFSET_SETTINGS,
    OffsetSettings,
    offset_line,
    offset_line_piecewise,
    offset_line_varying,
)

__all__ = [
    "PolyLine",
    "PolyLine2d",
    "PolyLine3d",
    "TransitionFunction",
    "linear_transition",
    "cosine_transition",
    "transition_line",
    "OffsetSettings",
    "DEFAULT_OFFSET_SETTINGS",
    "offset_line",
    "offset_line_varying",
    "offset_line_piecewise",
]
