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
Geometry Kernel Defaults
========================

Default tolerances for polyline construction, offsetting and Bézier
flattening. All lengths are in model units (usually meters).

Offset filter window:
    noise level = clamp(|offset| / FILTER_RATIO, MINIMUM_FILTER_VALUE, MAXIMUM_FILTER_VALUE)

    Reference line noise below this level is removed before the offset
    line is constructed, so the output does not grow with input vertex count.
"""

# Maximum sagitta (m) of the straight pieces approximating an offset corner arc
DEFAULT_CIRCLE_PRECISION = 0.001

# Reference line noise below this value is always filtered
DEFAULT_OFFSET_MINIMUM_FILTER_VALUE = 0.001

# Reference line noise above this value is never filtered
DEFAULT_OFFSET_MAXIMUM_FILTER_VALUE = 0.1

# Noise below |offset| / ratio is filtered (within the window above)
DEFAULT_OFFSET_FILTER_RATIO = 10.0

# Offsets smaller than this are treated as zero
DEFAULT_OFFSET_PRECISION = 0.00001

# Upper limit of the number of straight pieces of one offset corner arc
MAX_ARC_SEGMENTS = 4096

# Duplicate point tolerance for filtering construction
DEFAULT_DUPLICATE_TOLERANCE = 0.0

# Endpoint gap allowed by concatenation
DEFAULT_CONCATENATION_TOLERANCE = 0.0

# Number of points of a fixed-count Bézier flattening
DEFAULT_BEZIER_SIZE = 64

# Safety limit for adaptive De Casteljau bisection (2**depth pieces at most)
MAX_SUBDIVISION_DEPTH = 20

# Bézier control point distance factor for ray based synthesis
DEFAULT_BEZIER_SHAPE = 1.0

__all__ = [
    "DEFAULT_CIRCLE_PRECISION",
    "DEFAULT_OFFSET_MINIMUM_FILTER_VALUE",
    "DEFAULT_OFFSET_MAXIMUM_FILTER_VALUE",
    "DEFAULT_OFFSET_FILTER_RATIO",
    "DEFAULT_OFFSET_PRECISION",
    "MAX_ARC_SEGMENTS",
    "DEFAULT_DUPLICATE_TOLERANCE",
    "DEFAULT_CONCATENATION_TOLERANCE",
    "DEFAULT_BEZIER_SIZE",
    "MAX_SUBDIVISION_DEPTH",
    "DEFAULT_BEZIER_SHAPE",
]
