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
Path Import
===========

Read vertices from drawing path commands (as produced by vector drawing
tools or CAD exports) so they can be turned into a PolyLine.

Only straight commands are supported. Curved commands must be flattened
with the Bézier functions first.

Example:
    >>> commands = [
    ...     (PathCommand.MOVE_TO, (0.0, 0.0)),
    ...     (PathCommand.LINE_TO, (10.0, 0.0)),
    ...     (PathCommand.LINE_TO, (10.0, 5.0)),
    ...     (PathCommand.CLOSE, ()),
    ... ]
    >>> points_from_path(commands)
    [Point2d(0.000, 0.000), Point2d(10.000, 0.000), Point2d(10.000, 5.000), Point2d(0.000, 0.000)]
"""

from enum import Enum
from typing import Iterable, List, Sequence, Tuple

from .exceptions import (
    InvalidArgumentError,
    InvalidGeometryError,
    UnsupportedInputError,
    require_not_none,
)
from .logging_config import get_logger
from .primitives import Point

logger = get_logger(__name__)


class PathCommand(Enum):
    """Drawing path segment types."""
    MOVE_TO = "move_to"
    LINE_TO = "line_to"
    QUAD_TO = "quad_to"
    CUBIC_TO = "cubic_to"
    CLOSE = "close"


def points_from_path(commands: Iterable[Tuple[PathCommand, Sequence[float]]]) -> List[Point]:
    """Collect the vertices of a straight path.

    Args:
        commands: (PathCommand, coordinates) pairs; coordinates are ignored
            for CLOSE

    Returns:
        List of points; CLOSE appends the first point when the path is not
        closed yet and ends the path

    Raises:
        UnsupportedInputError: For QUAD_TO and CUBIC_TO
        InvalidGeometryError: If the path does not start with MOVE_TO or a
            second MOVE_TO starts a new sub-path
    """
    require_not_none(commands, "commands")
    points: List[Point] = []
    for index, entry in enumerate(commands):
        command, coordinates = entry
        if not isinstance(command, PathCommand):
            try:
                command = PathCommand(command)
            except ValueError:
                raise InvalidArgumentError(f"Unknown path command {command!r} at {index}") from None

        if command in (PathCommand.QUAD_TO, PathCommand.CUBIC_TO):
            raise UnsupportedInputError(f"Path command {command.name} at {index} is not supported")

        if command is PathCommand.CLOSE:
            if points and points[-1] != points[0]:
                points.append(points[0])
            break

        if command is PathCommand.MOVE_TO and points:
            raise InvalidGeometryError(f"Path contains more than one sub-path (MOVE_TO at {index})")
        if command is PathCommand.LINE_TO and not points:
            raise InvalidGeometryError("Path must start with MOVE_TO")
        points.append(Point.of(coordinates))

    logger.debug("Read %d points from path", len(points))
    return points


__all__ = ["PathCommand", "points_from_path"]
