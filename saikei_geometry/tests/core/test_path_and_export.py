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
Tests for Path Import and Text Export
=====================================
"""

import pytest

from saikei_geometry.core.exceptions import (
    InvalidArgumentError,
    InvalidGeometryError,
    NullReferenceError,
    UnsupportedInputError,
)
from saikei_geometry.core.export import iter_coordinates, to_plot, to_tsv
from saikei_geometry.core.path_import import PathCommand, points_from_path
from saikei_geometry.core.polyline import PolyLine
from saikei_geometry.core.primitives import LineSegment, Point2d, Point3d


# ==============================================================================
# Path import
# ==============================================================================

class TestPointsFromPath:
    """Tests for points_from_path."""

    @pytest.mark.unit
    def test_open_path(self):
        """Test a path of straight commands."""
        points = points_from_path([
            (PathCommand.MOVE_TO, (0, 0)),
            (PathCommand.LINE_TO, (10, 0)),
            (PathCommand.LINE_TO, (10, 5)),
        ])
        assert points == [Point2d(0, 0), Point2d(10, 0), Point2d(10, 5)]

    @pytest.mark.unit
    def test_close_appends_start(self):
        """Test that CLOSE returns to the first point and ends the path."""
        points = points_from_path([
            (PathCommand.MOVE_TO, (0, 0)),
            (PathCommand.LINE_TO, (10, 0)),
            (PathCommand.LINE_TO, (10, 5)),
            (PathCommand.CLOSE, ()),
            (PathCommand.LINE_TO, (99, 99)),
        ])
        assert points == [Point2d(0, 0), Point2d(10, 0), Point2d(10, 5), Point2d(0, 0)]

    @pytest.mark.unit
    def test_close_on_closed_path(self):
        """Test that an already closed path is not extended."""
        points = points_from_path([
            ("move_to", (0, 0)),
            ("line_to", (1, 0)),
            ("line_to", (0, 0)),
            ("close", ()),
        ])
        assert len(points) == 3

    @pytest.mark.unit
    def test_3d_path(self):
        """Test that 3D coordinates give 3D points."""
        points = points_from_path([(PathCommand.MOVE_TO, (0, 0, 1)), (PathCommand.LINE_TO, (1, 0, 2))])
        assert points == [Point3d(0, 0, 1), Point3d(1, 0, 2)]

    @pytest.mark.unit
    @pytest.mark.parametrize("command", [PathCommand.QUAD_TO, PathCommand.CUBIC_TO])
    def test_curves_unsupported(self, command):
        """Test that curved commands are rejected."""
        with pytest.raises(UnsupportedInputError):
            points_from_path([(PathCommand.MOVE_TO, (0, 0)), (command, (1, 1, 2, 2))])

    @pytest.mark.unit
    def test_unknown_command(self):
        """Test that unknown command names are invalid arguments."""
        with pytest.raises(InvalidArgumentError):
            points_from_path([("arc_to", (0, 0))])

    @pytest.mark.unit
    def test_malformed_paths(self):
        """Test a missing start and a second sub-path."""
        with pytest.raises(InvalidGeometryError):
            points_from_path([(PathCommand.LINE_TO, (1, 1))])
        with pytest.raises(InvalidGeometryError):
            points_from_path([
                (PathCommand.MOVE_TO, (0, 0)),
                (PathCommand.LINE_TO, (1, 0)),
                (PathCommand.MOVE_TO, (5, 5)),
            ])
        with pytest.raises(NullReferenceError):
            points_from_path(None)

    @pytest.mark.unit
    def test_polyline_from_path_drops_duplicates(self):
        """Test that repeated path points are filtered."""
        line = PolyLine.from_path([
            (PathCommand.MOVE_TO, (0, 0)),
            (PathCommand.LINE_TO, (0, 0)),
            (PathCommand.LINE_TO, (1, 0)),
        ])
        assert line.points == (Point2d(0, 0), Point2d(1, 0))
        with pytest.raises(InvalidGeometryError):
            PolyLine.from_path([])


# ==============================================================================
# Export
# ==============================================================================

class TestExport:
    """Tests for the text renderings."""

    @pytest.mark.unit
    def test_tsv(self):
        """Test tab separated output of a 2D line."""
        line = PolyLine.from_points([(0, 0), (1.5, 2)])
        assert to_tsv(line) == "0.0\t0.0\n1.5\t2.0\n"

    @pytest.mark.unit
    def test_tsv_segment_3d(self):
        """Test tab separated output of a 3D segment."""
        segment = LineSegment(Point3d(0, 0, 0), Point3d(1, 2, 3))
        assert to_tsv(segment) == "0.0\t0.0\t0.0\n1.0\t2.0\t3.0\n"

    @pytest.mark.unit
    def test_plot(self):
        """Test the plot path string."""
        line = PolyLine.from_points([(0, 0), (10, 0), (10, 5.5)])
        assert to_plot(line) == "M0.000,0.000 L10.000,0.000 L10.000,5.500\n"

    @pytest.mark.unit
    def test_plot_ignores_z(self, line_3d):
        """Test that the plot string is in plan."""
        assert to_plot(line_3d) == "M0.000,0.000 L100.000,0.000 L200.000,0.000\n"

    @pytest.mark.unit
    def test_unsupported_input(self):
        """Test that only lines and segments can be exported."""
        with pytest.raises(InvalidArgumentError):
            list(iter_coordinates(Point2d(0, 0)))
        with pytest.raises(NullReferenceError):
            to_tsv(None)
