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
Tests for the Bézier Flattener
==============================

Tests for fixed count and adaptive flattening and for curves between rays.
"""

import importlib
import logging
import math

import pytest

from saikei_geometry.core.bezier import (
    bezier,
    bezier_adaptive,
    create_control_points,
    cubic,
    cubic_adaptive,
    cubic_rays,
    cubic_rays_adaptive,
)
from saikei_geometry.core.exceptions import (
    InvalidArgumentError,
    InvalidGeometryError,
    NullReferenceError,
)
from saikei_geometry.core.polyline import PolyLine2d, PolyLine3d
from saikei_geometry.core.primitives import Point2d, Point3d, Ray2d, Ray3d

bezier_module = importlib.import_module("saikei_geometry.core.bezier")


# S shaped cubic
START = Point2d(1, 1)
CONTROL1 = Point2d(11, 1)
CONTROL2 = Point2d(1, 11)
END = Point2d(11, 11)


def deviation(reference, candidate):
    """Largest distance of a reference vertex to the candidate line."""
    return max(p.distance(candidate.closest_point_on_polyline(p)) for p in reference.get_points())


# ==============================================================================
# Fixed count
# ==============================================================================

class TestFixedCount:
    """Tests for bezier and cubic with a point count."""

    @pytest.mark.unit
    def test_cubic_values(self):
        """Test the points of a 4 point cubic."""
        line = cubic(4, Point2d(10, 0), Point2d(20, 0), Point2d(0, 20), Point2d(0, 10))
        assert line.size() == 4
        assert line.get(0) == Point2d(10, 0)
        assert line.get(1).x == pytest.approx(320 / 27)
        assert line.get(1).y == pytest.approx(130 / 27)
        assert line.get(3) == Point2d(0, 10)
        for i in (1, 2):
            assert 0 < line.get(i).x < 15
            assert 0 < line.get(i).y < 15

    @pytest.mark.unit
    @pytest.mark.parametrize("size", [2, 3, 4, 100])
    def test_cubic_3d(self, size):
        """Test a 3D cubic with linearly rising control points."""
        line = cubic(size, Point3d(10, 0, 0), Point3d(20, 0, 10), Point3d(0, 20, 20), Point3d(0, 10, 30))
        assert isinstance(line, PolyLine3d)
        assert line.size() == size
        assert line.get_first() == Point3d(10, 0, 0)
        assert line.get_last() == Point3d(0, 10, 30)
        for i in range(1, size - 1):
            p = line.get(i)
            assert line.get(i - 1).z < p.z < line.get(i + 1).z
            assert 0 < p.x < 15
            assert 0 < p.y < 15

    @pytest.mark.unit
    def test_linear_and_quadratic(self):
        """Test lower degree curves."""
        line = bezier(5, (0, 0), (4, 0))
        assert [p.x for p in line.get_points()] == [0.0, 1.0, 2.0, 3.0, 4.0]
        quadratic = bezier(3, Point2d(0, 0), Point2d(1, 2), Point2d(2, 0))
        assert quadratic.get(1) == Point2d(1, 1)

    @pytest.mark.unit
    def test_higher_degree_endpoints(self):
        """Test that any degree starts and ends on the end control points."""
        controls = [Point2d(0, 0), Point2d(1, 3), Point2d(2, -3), Point2d(3, 3), Point2d(4, -3), Point2d(5, 0)]
        line = bezier(10, *controls)
        assert line.size() == 10
        assert line.get_first() == controls[0]
        assert line.get_last() == controls[-1]

    @pytest.mark.unit
    @pytest.mark.parametrize("size", [1, 0, -3, 2.5, True])
    def test_invalid_size(self, size):
        """Test that the size must be an integer of at least 2."""
        with pytest.raises(InvalidArgumentError):
            bezier(size, START, END)

    @pytest.mark.unit
    def test_invalid_control_points(self):
        """Test missing, None and mixed dimension control points."""
        with pytest.raises(InvalidGeometryError):
            bezier(4, START)
        with pytest.raises(NullReferenceError):
            cubic(4, START, None, CONTROL2, END)
        with pytest.raises(InvalidGeometryError):
            cubic(4, START, CONTROL1, Point3d(1, 11, 0), END)


# ==============================================================================
# Adaptive
# ==============================================================================

class TestAdaptive:
    """Tests for the adaptive flattening."""

    @pytest.mark.unit
    @pytest.mark.parametrize("epsilon", [3.0, 1.0, 0.1, 0.05, 0.02])
    def test_within_epsilon(self, epsilon):
        """Test that the flattened curve stays within epsilon of a fine reference."""
        reference = bezier(256, START, CONTROL1, CONTROL2, END)
        line = cubic_adaptive(epsilon, START, CONTROL1, CONTROL2, END)
        assert line.get_first() == START
        assert line.get_last() == END
        assert deviation(reference, line) < epsilon + 1e-3
        assert bezier_adaptive(epsilon, START, CONTROL1, CONTROL2, END) == line

    @pytest.mark.unit
    def test_smaller_epsilon_more_points(self):
        """Test that a tighter tolerance refines the result."""
        coarse = cubic_adaptive(3.0, START, CONTROL1, CONTROL2, END)
        fine = cubic_adaptive(0.02, START, CONTROL1, CONTROL2, END)
        assert fine.size() > coarse.size()

    @pytest.mark.unit
    def test_straight_curve(self):
        """Test that collinear control points need no subdivision."""
        line = cubic_adaptive(0.1, (0, 0), (1, 0), (2, 0), (3, 0))
        assert line.points == (Point2d(0, 0), Point2d(3, 0))

    @pytest.mark.unit
    @pytest.mark.parametrize("epsilon", [0.0, -0.1, math.nan, math.inf])
    def test_invalid_epsilon(self, epsilon):
        """Test that epsilon must be finite and positive."""
        with pytest.raises(InvalidArgumentError):
            cubic_adaptive(epsilon, START, CONTROL1, CONTROL2, END)

    @pytest.mark.unit
    def test_none_epsilon(self):
        """Test that epsilon may not be None."""
        with pytest.raises(NullReferenceError):
            bezier_adaptive(None, START, END)

    @pytest.mark.unit
    def test_depth_limit_warns(self, monkeypatch, caplog):
        """Test that reaching the subdivision limit is logged and still gives a line."""
        monkeypatch.setattr(bezier_module, "MAX_SUBDIVISION_DEPTH", 2)
        logging.getLogger("saikei.geometry").addHandler(caplog.handler)
        try:
            with caplog.at_level(logging.WARNING, logger="saikei.geometry"):
                line = cubic_adaptive(1e-6, START, CONTROL1, CONTROL2, END)
        finally:
            logging.getLogger("saikei.geometry").removeHandler(caplog.handler)
        assert line.size() == 5
        assert any("depth limit" in record.getMessage() for record in caplog.records)


# ==============================================================================
# Curves between rays
# ==============================================================================

class TestControlPoints:
    """Tests for create_control_points."""

    @pytest.mark.unit
    def test_unweighted(self):
        """Test control points at half the chord along both headings."""
        start = Ray2d.through(START, CONTROL1)
        end = Ray2d.through(CONTROL2, END)
        end = Ray2d(END.x, END.y, end.dir_z)
        p0, c1, c2, p3 = create_control_points(start, end)
        half_chord = START.distance(END) / 2
        assert p0 == START
        assert p3 == END
        assert c1.x == pytest.approx(START.x + half_chord)
        assert c1.y == pytest.approx(START.y)
        assert c2.x == pytest.approx(END.x - half_chord)
        assert c2.y == pytest.approx(END.y)

    @pytest.mark.unit
    def test_shape(self):
        """Test that shape scales the control distances."""
        _, c1, c2, _ = create_control_points(Ray2d(0, 0, 0), Ray2d(10, 0, 0), shape=2.0)
        assert c1.x == pytest.approx(10.0)
        assert c2.x == pytest.approx(0.0)

    @pytest.mark.unit
    def test_weighted(self):
        """Test weighted control distances."""
        _, c1, c2, _ = create_control_points(Ray2d(0, 0, 0), Ray2d(10, 5, 0), weighted=True)
        assert c1.x == pytest.approx(0.5 * math.sqrt(125))
        assert c1.y == pytest.approx(0.0)
        assert c2.x == pytest.approx(10 - 0.5 * math.sqrt(125))
        assert c2.y == pytest.approx(5.0)

    @pytest.mark.unit
    def test_weighted_uses_distance_along_heading(self):
        """Test that weights split by the distance along each heading to the other end's foot."""
        start = Ray2d(0, 0, 0)
        end = Ray2d(10, 4, math.pi / 4)
        _, c1, c2, _ = create_control_points(start, end, weighted=True)
        chord = math.sqrt(116)
        along_start = 10.0
        along_end = 14.0 / math.sqrt(2)
        w_start = along_start / (along_start + along_end)
        w_end = along_end / (along_start + along_end)
        assert c1.x == pytest.approx(chord * w_start)
        assert c1.y == pytest.approx(0.0, abs=1e-12)
        assert c2.x == pytest.approx(10 - chord * w_end / math.sqrt(2))
        assert c2.y == pytest.approx(4 - chord * w_end / math.sqrt(2))

    @pytest.mark.unit
    def test_weighted_side_by_side(self):
        """Test weighted rays whose positions are level across their headings."""
        _, c1, c2, _ = create_control_points(Ray2d(0, 0, math.pi / 2), Ray2d(10, 0, math.pi / 2), weighted=True)
        assert c1.x == pytest.approx(0.0)
        assert c1.y == pytest.approx(5.0)
        assert c2.x == pytest.approx(10.0)
        assert c2.y == pytest.approx(-5.0)

    @pytest.mark.unit
    def test_invalid_rays(self):
        """Test coincident rays, bad shapes and non-ray input."""
        with pytest.raises(InvalidGeometryError):
            create_control_points(Ray2d(1, 1, 0), Ray2d(1, 1, 1))
        with pytest.raises(InvalidArgumentError):
            create_control_points(Ray2d(0, 0, 0), Ray2d(10, 0, 0), shape=0.0)
        with pytest.raises(InvalidArgumentError):
            create_control_points(Point2d(0, 0), Ray2d(10, 0, 0))
        with pytest.raises(InvalidGeometryError):
            create_control_points(Ray2d(0, 0, 0), Ray3d(10, 0, 0, math.pi / 2, 0))
        with pytest.raises(NullReferenceError):
            create_control_points(None, Ray2d(10, 0, 0))


class TestCubicRays:
    """Tests for cubic_rays and cubic_rays_adaptive."""

    @pytest.mark.unit
    def test_default_size(self):
        """Test the default point count and exact ends."""
        start = Ray2d(0, 0, 0)
        end = Ray2d(100, 20, 0)
        line = cubic_rays(start, end)
        assert isinstance(line, PolyLine2d)
        assert line.size() == 64
        assert line.get_first() == start.position
        assert line.get_last() == end.position

    @pytest.mark.unit
    def test_follows_headings(self):
        """Test that the curve leaves and enters along the ray headings."""
        start = Ray2d(0, 0, 0)
        end = Ray2d(100, 20, math.pi / 4)
        line = cubic_rays(start, end, 200)
        assert line.get_location(0.0).dir_z == pytest.approx(0.0, abs=0.01)
        assert line.get_location(line.length).dir_z == pytest.approx(math.pi / 4, abs=0.01)

    @pytest.mark.unit
    def test_3d(self):
        """Test a curve between 3D rays."""
        start = Ray3d(0, 0, 0, math.pi / 2, 0.0)
        end = Ray3d(10, 0, 10, math.pi / 2, 0.0)
        line = cubic_rays(start, end, 16)
        assert isinstance(line, PolyLine3d)
        assert line.size() == 16
        assert line.get_last() == Point3d(10, 0, 10)

    @pytest.mark.unit
    def test_adaptive(self):
        """Test that the adaptive version stays close to the fixed count version."""
        start = Ray2d(0, 0, 0)
        end = Ray2d(100, 20, 0)
        reference = cubic_rays(start, end, 512)
        line = cubic_rays_adaptive(start, end, 0.01)
        assert line.get_first() == start.position
        assert line.get_last() == end.position
        assert deviation(reference, line) < 0.02
