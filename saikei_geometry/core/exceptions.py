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
Geometry Exceptions
===================

Error kinds raised by the geometry kernel.

Every error derives from GeometryError and from the built-in exception a
caller would naturally expect (ValueError, IndexError, TypeError), so code
that only catches the built-ins keeps working.

Usage:
    from saikei_geometry.core.exceptions import InvalidGeometryError

    try:
        line = PolyLine.from_points([(0, 0)])
    except InvalidGeometryError as e:
        logger.warning("Cannot build line: %s", e)
"""

import math


class GeometryError(Exception):
    """Base class of all geometry kernel errors."""


class InvalidGeometryError(GeometryError, ValueError):
    """Structurally impossible input.

    Too few points, coincident points where distinct points are required,
    or lines that do not connect.
    """


class InvalidArgumentError(GeometryError, ValueError):
    """Numeric parameter outside its domain (non-finite, non-positive, inverted)."""


class OutOfRangeError(GeometryError, ValueError):
    """Query argument outside the valid interval of a non-extended query."""


class IndexOutOfRangeError(GeometryError, IndexError):
    """Structural index outside the valid range."""


class NullReferenceError(GeometryError, TypeError):
    """A required argument is None."""


class UnsupportedInputError(GeometryError, NotImplementedError):
    """Input kind that the kernel does not handle (e.g. native curve path commands)."""


def require_not_none(value, name: str):
    """Return value, or raise NullReferenceError if it is None.

    Args:
        value: Argument to check
        name: Argument name used in the error message

    Returns:
        The value itself
    """
    if value is None:
        raise NullReferenceError(f"{name} may not be None")
    return value


def require_finite(value: float, name: str) -> float:
    """Return value as float, or raise InvalidArgumentError if it is NaN or infinite."""
    require_not_none(value, name)
    value = float(value)
    if not math.isfinite(value):
        raise InvalidArgumentError(f"{name} must be finite, got {value}")
    return value


def require_positive(value: float, name: str) -> float:
    """Return value as float, or raise InvalidArgumentError unless finite and > 0."""
    value = require_finite(value, name)
    if value <= 0:
        raise InvalidArgumentError(f"{name} must be positive, got {value}")
    return value


__all__ = [
    "GeometryError",
    "InvalidGeometryError",
    "InvalidArgumentError",
    "OutOfRangeError",
    "IndexOutOfRangeError",
    "NullReferenceError",
    "UnsupportedInputError",
    "require_not_none",
    "require_finite",
    "require_positive",
]
