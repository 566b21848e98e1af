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
Offset Engine
=============

Parallel lines at a lateral distance from a reference polyline, as used for
edge of pavement, lane lines and shoulders.

Sign convention:
    Positive offset = left of the direction of travel
    Negative offset = right of the direction of travel

Algorithm (constant offset):
    1. Remove reference line noise below the filter level
    2. Displace every reference segment perpendicular to its own direction
    3. Outside of a turn, fill the gap with an arc of straight pieces around
       the reference vertex; pieces are halved until the arc sagitta is below
       circle_precision
    4. Inside of a turn, trim the offset segments at their intersection
    5. Remove auxiliary points that are too close to the reference line or
       not at the offset distance from any reference segment
    6. Collapse points that are collinear within minimum_filter_value

Example:
    >>> centerline = PolyLine.from_points([(0, 0), (100, 0), (200, 50)])
    >>> left_edge = offset_line(centerline, 3.6)
    >>> taper = offset_line_varying(centerline, 3.6, 7.2, cosine_transition)
"""

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np

from ..constants import (
    DEFAULT_CIRCLE_PRECISION,
    DEFAULT_OFFSET_FILTER_RATIO,
    DEFAULT_OFFSET_MAXIMUM_FILTER_VALUE,
    DEFAULT_OFFSET_MINIMUM_FILTER_VALUE,
    DEFAULT_OFFSET_PRECISION,
    MAX_ARC_SEGMENTS,
)
from ..exceptions import (
    InvalidArgumentError,
    InvalidGeometryError,
    require_finite,
    require_not_none,
)
from ..logging_config import get_logger
from ..primitives import Point2d, Point3d, Ray2d, Ray3d, intersection_of_line_segments
from .polyline import PolyLine, PolyLine2d, PolyLine3d
from .transition import TransitionFunction, linear_transition, transition_line

logger = get_logger(__name__)


@dataclass(frozen=True)
class OffsetSettings:
    """Tolerances of the offset engine.

    Attributes:
        circle_precision: Maximum sagitta of the pieces of a corner arc
        minimum_filter_value: Reference line noise below this is always filtered
        maximum_filter_value: Reference line noise above this is never filtered
        filter_ratio: Noise below |offset| / filter_ratio is filtered
        minimum_offset: Offsets smaller than this return the reference line
    """
    circle_precision: float = DEFAULT_CIRCLE_PRECISION
    minimum_filter_value: float = DEFAULT_OFFSET_MINIMUM_FILTER_VALUE
    maximum_filter_value: float = DEFAULT_OFFSET_MAXIMUM_FILTER_VALUE
    filter_ratio: float = DEFAULT_OFFSET_FILTER_RATIO
    minimum_offset: float = DEFAULT_OFFSET_PRECISION

    def __post_init__(self):
        """Validate offset settings."""
        for name in (
            "circle_precision",
            "minimum_filter_value",
            "maximum_filter_value",
            "filter_ratio",
            "minimum_offset",
        ):
            value = getattr(self, name)
            if value is None or not math.isfinite(value) or value <= 0:
                raise InvalidArgumentError(f"{name} must be positive and finite, got {value}")

        if self.minimum_filter_value >= self.maximum_filter_value:
            raise InvalidArgumentError(
                f"minimum_filter_value ({self.minimum_filter_value}) must be less than "
                f"maximum_filter_value ({self.maximum_filter_value})"
            )

    def filter_level(self, offset: float) -> float:
        """Noise filter level for an offset distance."""
        return max(
            self.minimum_filter_value,
            min(abs(offset) / self.filter_ratio, self.maximum_filter_value),
        )


DEFAULT_OFFSET_SETTINGS = OffsetSettings()

# Point/segment pairs evaluated at once by the stray point pass
_STRAY_BLOCK_PAIRS = 1 << 18


def _wrap_angle(angle: float) -> float:
    if abs(angle) > math.pi:
        angle -= math.copysign(2 * math.pi, angle)
    return angle


def _offset_point(point: Point2d, angle: float, offset: float) -> Point2d:
    return Point2d(point.x - math.sin(angle) * offset, point.y + math.cos(angle) * offset)


def _crossings(first_from, first_to, second_from, second_to):
    """Intersections of segments first_from-first_to and second_from-second_to.

    Either side may be a single (2,) segment or a stack of (n, 2) segments.

    Returns:
        Tuple (mask of crossing pairs, intersection points on the first segments)
    """
    d1 = first_to - first_from
    d2 = second_to - second_from
    det = d1[..., 0] * d2[..., 1] - d1[..., 1] * d2[..., 0]
    relative = second_from - first_from
    with np.errstate(divide="ignore", invalid="ignore"):
        t1 = (relative[..., 0] * d2[..., 1] - relative[..., 1] * d2[..., 0]) / det
        t2 = (relative[..., 0] * d1[..., 1] - relative[..., 1] * d1[..., 0]) / det
    crossed = (det != 0) & (t1 >= 0.0) & (t1 <= 1.0) & (t2 >= 0.0) & (t2 <= 1.0)
    return crossed, first_from + t1[..., None] * d1


class _EmittedPoints:
    """Offset points emitted so far, with their coordinates in a growing array."""

    def __init__(self):
        self.points: List[Point2d] = []
        self._buffer = np.empty((64, 2))

    def __len__(self):
        return len(self.points)

    def __getitem__(self, index):
        return self.points[index]

    @property
    def coordinates(self) -> np.ndarray:
        return self._buffer[:len(self.points)]

    def append(self, point: Point2d) -> None:
        count = len(self.points)
        if count == len(self._buffer):
            self._buffer = np.concatenate((self._buffer, np.empty_like(self._buffer)))
        self._buffer[count] = (point.x, point.y)
        self.points.append(point)

    def pop(self) -> Point2d:
        return self.points.pop()


def _arc_segment_count(delta_angle: float, buffer: float, circle_precision: float) -> int:
    count = 2 if abs(delta_angle) > math.pi / 2 else 1
    while buffer * (1 - abs(math.cos(delta_angle / count / 2))) >= circle_precision:
        if count >= MAX_ARC_SEGMENTS:
            logger.warning(
                "Corner arc limited to %d pieces (offset %.3f, precision %.3g)",
                count, buffer, circle_precision,
            )
            break
        count *= 2
    return count


def _add_arc(
    points: _EmittedPoints,
    pivot: Point2d,
    prev_angle: float,
    angle: float,
    offset: float,
    segment_from: Point2d,
    segment_to: Point2d,
    settings: OffsetSettings,
) -> None:
    """Append the arc around pivot that closes an outside corner.

    Arc pieces that cross earlier offset segments add the crossing points.
    """
    precision = settings.circle_precision
    delta_angle = _wrap_angle(angle - prev_angle)
    count = _arc_segment_count(delta_angle, abs(offset), precision)
    # Interpolating between headings on either side of +/- pi needs a half turn
    crosses_back = prev_angle * angle < 0 and abs(prev_angle) > math.pi / 2 and abs(angle) > math.pi / 2

    # The arc stays inside the circle around pivot; farther segments cannot be crossed
    earlier = points.coordinates
    starts = earlier[:-1]
    ends = earlier[1:]
    center = np.array(pivot.coordinates)
    reach = abs(offset) + precision
    near = np.all(np.minimum(starts, ends) <= center + reach, axis=1) & np.all(
        np.maximum(starts, ends) >= center - reach, axis=1
    )
    starts = starts[near]
    ends = ends[near]

    prev_arc_point = points[-1]
    for step in range(1, count):
        intermediate_angle = (step * angle + (count - step) * prev_angle) / count
        if crosses_back:
            intermediate_angle += math.pi
        arc_point = _offset_point(pivot, intermediate_angle, offset)

        last = points[-1]
        if len(starts):
            piece_from = np.array(prev_arc_point.coordinates)
            crossed, crossings = _crossings(piece_from, np.array(arc_point.coordinates), starts, ends)
            if crossed.any():
                crossings = crossings[crossed]
                distinct = (
                    (np.linalg.norm(crossings - piece_from, axis=1) > precision)
                    & (np.linalg.norm(crossings - starts[crossed], axis=1) > precision)
                    & (np.linalg.norm(crossings - ends[crossed], axis=1) > precision)
                )
                for x, y in crossings[distinct].tolist():
                    points.append(Point2d(x, y))

        crossing = intersection_of_line_segments(last, arc_point, segment_from, segment_to)
        if crossing is not None:
            points.append(crossing)
        points.append(arc_point)
        prev_arc_point = arc_point


def _trim_inside(points: _EmittedPoints, angle: float, segment_from: Point2d, segment_to: Point2d) -> Point2d:
    """Intersect the emitted offset segments with the next one.

    Crossings of earlier segments are appended. When only the last emitted
    segment is crossed it is trimmed to the crossing instead.

    Returns:
        Start point of the next offset segment (moved when the last emitted
        segment had to be trimmed)
    """
    if len(points) < 2:
        return segment_from
    coordinates = points.coordinates
    crossed, crossings = _crossings(
        coordinates[:-1],
        coordinates[1:],
        np.array(segment_from.coordinates),
        np.array(segment_to.coordinates),
    )
    if crossed[:-1].any():
        for x, y in crossings[crossed].tolist():
            points.append(Point2d(x, y))
        return segment_from

    last = points[-1]
    before = points[-2]
    if _wrap_angle(angle - math.atan2(last.y - before.y, last.x - before.x)) == 0:
        # Emitted segment is parallel to the next one; continue from its start
        points.pop()
        return points.pop()
    crossing = intersection_of_line_segments(before, last, segment_from, segment_to)
    if crossing is not None:
        points.pop()
        return crossing
    return segment_from


def _remove_stray_points(
    points: List[Point2d],
    reference: PolyLine2d,
    buffer: float,
    settings: OffsetSettings,
) -> List[Point2d]:
    """Drop interior points that are not at the offset distance of the reference line."""
    if len(points) <= 2:
        return points
    candidates = np.array([p.coordinates for p in points[1:-1]])
    starts = reference.coordinates[:-1]
    deltas = reference.coordinates[1:] - starts
    squared_lengths = np.einsum("sd,sd->s", deltas, deltas)

    # Blocks of (points, segments) distances keep memory bounded on long lines
    block = max(1, _STRAY_BLOCK_PAIRS // len(starts))
    keep = np.empty(len(candidates), dtype=bool)
    for first in range(0, len(candidates), block):
        chunk = candidates[first:first + block]
        relative = chunk[:, None, :] - starts[None, :, :]
        fractions = np.clip(np.einsum("psd,sd->ps", relative, deltas) / squared_lengths, 0.0, 1.0)
        gaps = relative - fractions[:, :, None] * deltas[None, :, :]
        distances = np.sqrt(np.einsum("psd,psd->ps", gaps, gaps))
        too_close = np.any(distances < buffer - settings.circle_precision, axis=1)
        at_offset = np.any(distances < buffer + settings.minimum_offset, axis=1)
        keep[first:first + block] = ~too_close & at_offset

    kept = [points[0]]
    kept.extend(p for p, k in zip(points[1:-1], keep) if k)
    kept.append(points[-1])
    return kept


def _offset_plan(line: PolyLine2d, offset: float, settings: OffsetSettings) -> PolyLine2d:
    buffer = abs(offset)
    reference = line.noise_filtered_line(settings.filter_level(buffer))
    vertices = reference.points

    points = _EmittedPoints()
    prev_point = vertices[0]
    prev_angle = None
    for index in range(len(vertices) - 1):
        next_point = vertices[index + 1]
        angle = math.atan2(next_point.y - prev_point.y, next_point.x - prev_point.x)
        segment_from = _offset_point(prev_point, angle, offset)
        segment_to = _offset_point(next_point, angle, offset)
        if index > 0:
            delta_angle = _wrap_angle(angle - prev_angle)
            if delta_angle * offset <= 0:
                _add_arc(points, prev_point, prev_angle, angle, offset, segment_from, segment_to, settings)
            segment_from = _trim_inside(points, angle, segment_from, segment_to)
        points.append(segment_from)
        points.append(segment_to)
        prev_point = next_point
        prev_angle = angle

    raw_count = len(points)
    kept = _remove_stray_points(points.points, reference, buffer, settings)
    result = PolyLine2d.cleaned(kept).noise_filtered_line(settings.minimum_filter_value)
    logger.debug(
        "Offset %.3f: %d reference points, %d raw points, %d result points",
        offset, reference.size(), raw_count, result.size(),
    )
    return result


def _offset_degenerate(line: PolyLine, offset: float) -> PolyLine:
    ray = line.get_location(0.0)
    dx = -math.sin(ray.dir_z) * offset
    dy = math.cos(ray.dir_z) * offset
    if isinstance(ray, Ray3d):
        return PolyLine3d.degenerate(Ray3d(ray.x + dx, ray.y + dy, ray.z, ray.dir_y, ray.dir_z))
    return PolyLine2d.degenerate(Ray2d(ray.x + dx, ray.y + dy, ray.dir_z))


def _offset_elevated(line: PolyLine3d, offset: float, settings: OffsetSettings) -> PolyLine3d:
    """Offset a 3D line in plan; elevations follow the nearest reference position."""
    plan = line.project_xy()
    coordinates = line.coordinates
    steps = np.sqrt(np.sum(np.diff(coordinates[:, :2], axis=0) ** 2, axis=1))
    stations = np.concatenate(([0.0], np.cumsum(steps)))
    elevations = coordinates[:, 2]

    points = []
    for point in _offset_plan(plan, offset, settings).get_points():
        station = plan.closest_position(point)
        points.append(Point3d(point.x, point.y, float(np.interp(station, stations, elevations))))
    return PolyLine3d.cleaned(points)


def offset_line(line: PolyLine, offset: float, settings: Optional[OffsetSettings] = None) -> PolyLine:
    """Create a line at a constant lateral offset.

    Args:
        line: Reference line
        offset: Lateral distance; positive is left of the direction of travel
        settings: Offset tolerances (DEFAULT_OFFSET_SETTINGS if None)

    Returns:
        Offset line of the same dimension; the line itself when |offset| is
        below settings.minimum_offset

    Raises:
        InvalidArgumentError: If offset is not finite

    Example:
        >>> line = PolyLine.from_points([(0, 0), (10, 0)])
        >>> offset_line(line, 2.0).get_first()
        Point2d(0.000, 2.000)
    """
    require_not_none(line, "line")
    settings = settings or DEFAULT_OFFSET_SETTINGS
    offset = require_finite(offset, "offset")
    if abs(offset) < settings.minimum_offset:
        return line
    if line.is_degenerate:
        return _offset_degenerate(line, offset)
    if line.dimension == 3:
        return _offset_elevated(line, offset, settings)
    return _offset_plan(line, offset, settings)


def offset_line_varying(
    line: PolyLine,
    offset_at_start: float,
    offset_at_end: float,
    transition: Optional[TransitionFunction] = None,
    settings: Optional[OffsetSettings] = None,
) -> PolyLine:
    """Create a line with an offset changing along the reference line.

    The offset lines at the start and end offsets are blended with
    transition_line.

    Args:
        line: Reference line
        offset_at_start: Offset at the first point
        offset_at_end: Offset at the last point
        transition: Blend function of the fractional position
            (linear_transition if None)
        settings: Offset tolerances

    Returns:
        Offset line
    """
    require_not_none(line, "line")
    transition = transition or linear_transition
    offset_at_start = require_finite(offset_at_start, "offset_at_start")
    offset_at_end = require_finite(offset_at_end, "offset_at_end")
    if offset_at_start == offset_at_end or line.is_degenerate:
        return offset_line(line, offset_at_start, settings)
    at_start = offset_line(line, offset_at_start, settings)
    at_end = offset_line(line, offset_at_end, settings)
    return transition_line(at_start, at_end, transition)


def offset_line_piecewise(
    line: PolyLine,
    relative_fractions: Sequence[float],
    offsets: Sequence[float],
    settings: Optional[OffsetSettings] = None,
) -> PolyLine:
    """Create a line with offsets interpolated linearly between positions.

    Args:
        line: Reference line
        relative_fractions: Strictly increasing fractions of the length,
            starting at 0.0 and ending at 1.0
        offsets: Offset at every fraction

    Returns:
        Offset line

    Raises:
        InvalidArgumentError: If the fractions are malformed or the number
            of offsets does not match

    Example:
        >>> widening = offset_line_piecewise(centerline, [0, 0.4, 0.6, 1], [3.6, 3.6, 7.2, 7.2])
    """
    require_not_none(line, "line")
    require_not_none(relative_fractions, "relative_fractions")
    require_not_none(offsets, "offsets")
    fractions = [require_finite(f, "relative fraction") for f in relative_fractions]
    offsets = [require_finite(o, "offset") for o in offsets]
    if len(fractions) < 2 or len(fractions) != len(offsets):
        raise InvalidArgumentError(
            f"Need at least 2 fractions and one offset per fraction, "
            f"got {len(fractions)} fractions and {len(offsets)} offsets"
        )
    if fractions[0] != 0.0 or fractions[-1] != 1.0:
        raise InvalidArgumentError(f"Fractions must start at 0.0 and end at 1.0, got {fractions}")
    if any(b <= a for a, b in zip(fractions, fractions[1:])):
        raise InvalidArgumentError(f"Fractions must be strictly increasing, got {fractions}")
    if line.is_degenerate:
        raise InvalidGeometryError("Cannot apply offsets at positions along a degenerate line")

    settings = settings or DEFAULT_OFFSET_SETTINGS
    points = []
    for index in range(len(fractions) - 1):
        piece = offset_line_varying(
            line.extract_fractional(fractions[index], fractions[index + 1]),
            offsets[index],
            offsets[index + 1],
            linear_transition,
            settings,
        )
        piece_points = list(piece.get_points())
        if points and points[-1].distance(piece_points[0]) <= settings.minimum_filter_value:
            piece_points = piece_points[1:]
        points.extend(piece_points)
    return type(line).cleaned(points)


__all__ = [
    "OffsetSettings",
    "DEFAULT_OFFSET_SETTINGS",
    "offset_line",
    "offset_line_varying",
    "offset_line_piecewise",
]
