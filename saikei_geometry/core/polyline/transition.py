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
Transition Lines
================

Blend one polyline into another, e.g. for a lane widening taper.

A transition function maps the fractional position along the lines to the
blend ratio: 0.0 gives a point of the start line, 1.0 a point of the end
line. For a smooth taper it should return 0.0 at 0.0 and 1.0 at 1.0.
"""

import math
from typing import Callable

from ..exceptions import InvalidArgumentError, InvalidGeometryError, require_not_none
from ..logging_config import get_logger

logger = get_logger(__name__)

TransitionFunction = Callable[[float], float]


def linear_transition(fraction: float) -> float:
    """Blend ratio equal to the fraction."""
    return fraction


def cosine_transition(fraction: float) -> float:
    """Blend ratio with zero slope at both ends (half cosine wave)."""
    return 0.5 - 0.5 * math.cos(math.pi * fraction)


def transition_line(start_line, end_line, transition: TransitionFunction):
    """Blend from start_line to end_line.

    The vertices of both lines are visited in order of their fractional
    position; every vertex is paired with the location at the same fraction
    on the other line and the pair is interpolated with transition(fraction).

    Args:
        start_line: Line at blend ratio 0
        end_line: Line at blend ratio 1
        transition: Function of the fractional position

    Returns:
        New polyline of the dimension of the inputs

    Raises:
        InvalidGeometryError: If the lines differ in dimension or one is degenerate
        InvalidArgumentError: If transition returns a non-finite value
    """
    require_not_none(start_line, "start_line")
    require_not_none(end_line, "end_line")
    require_not_none(transition, "transition")
    if start_line.dimension != end_line.dimension:
        raise InvalidGeometryError("Cannot blend lines of different dimension")
    if start_line.is_degenerate or end_line.is_degenerate:
        raise InvalidGeometryError("Cannot blend a degenerate line")

    start_length = start_line.get_length()
    end_length = end_line.get_length()

    def blend(fraction, start_point, end_point):
        ratio = float(transition(fraction))
        if not math.isfinite(ratio):
            raise InvalidArgumentError(f"transition({fraction}) returned {ratio}")
        return start_point.interpolate(end_point, ratio)

    def location(line, length, fraction):
        return line.get_location(length if fraction == 1.0 else min(length, fraction * length))

    points = []
    index_in_start = 0
    index_in_end = 0
    while index_in_start < start_line.size() and index_in_end < end_line.size():
        fraction_in_start = start_line.length_at_index(index_in_start) / start_length
        fraction_in_end = end_line.length_at_index(index_in_end) / end_length
        if fraction_in_start < fraction_in_end:
            points.append(blend(
                fraction_in_start,
                start_line.get(index_in_start),
                location(end_line, end_length, fraction_in_start),
            ))
            index_in_start += 1
        elif fraction_in_start > fraction_in_end:
            points.append(blend(
                fraction_in_end,
                location(start_line, start_length, fraction_in_end),
                end_line.get(index_in_end),
            ))
            index_in_end += 1
        else:
            points.append(blend(
                fraction_in_start,
                start_line.get(index_in_start),
                end_line.get(index_in_end),
            ))
            index_in_start += 1
            index_in_end += 1

    logger.debug(
        "Transition of %d and %d points gave %d points",
        start_line.size(), end_line.size(), len(points),
    )
    return type(start_line).cleaned(points)


__all__ = [
    "TransitionFunction",
    "linear_transition",
    "cosine_transition",
    "transition_line",
]
