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
Text Export
===========

Plain text renderings of polylines for spreadsheets and quick plots.

Formats:
    TSV:  one point per line, coordinates separated by tabs
    Plot: "M x,y L x,y ..." path string with 3 decimals (plan only)
"""

from typing import Iterator, Tuple, Union

from .exceptions import InvalidArgumentError, require_not_none
from .polyline import PolyLine
from .primitives import LineSegment

Exportable = Union[PolyLine, LineSegment]


def iter_coordinates(line: Exportable) -> Iterator[Tuple[float, ...]]:
    """Iterate over the coordinate tuples of a polyline or segment."""
    require_not_none(line, "line")
    if isinstance(line, LineSegment):
        yield line.start.coordinates
        yield line.end.coordinates
    elif isinstance(line, PolyLine):
        for row in line.coordinates.tolist():
            yield tuple(row)
    else:
        raise InvalidArgumentError(f"Cannot export {type(line).__name__}")


def to_tsv(line: Exportable) -> str:
    """Tab separated coordinates, one point per line.

    Example:
        >>> to_tsv(PolyLine.from_points([(0, 0), (1.5, 2)]))
        '0.0\\t0.0\\n1.5\\t2.0\\n'
    """
    return "".join(
        "\t".join(repr(value) for value in coords) + "\n"
        for coords in iter_coordinates(line)
    )


def to_plot(line: Exportable) -> str:
    """Plan path string "M x,y L x,y ..." with 3 decimals, newline terminated."""
    parts = [
        f"{'M' if index == 0 else ' L'}{coords[0]:.3f},{coords[1]:.3f}"
        for index, coords in enumerate(iter_coordinates(line))
    ]
    return "".join(parts) + "\n"


__all__ = ["iter_coordinates", "to_tsv", "to_plot"]
