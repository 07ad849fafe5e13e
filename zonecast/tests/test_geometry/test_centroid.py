"""Tests for the planar centroid reducer."""

import itertools

import pytest

from zonecast.errors import InvalidInput
from zonecast.geometry.centroid import centroid, polygon_centroid
from zonecast.models.geo import Coordinate, Polygon


class TestCentroid:
    def test_triangle(self):
        c = centroid([Coordinate(0.0, 0.0), Coordinate(3.0, 0.0), Coordinate(0.0, 6.0)])
        assert c.lat == pytest.approx(1.0)
        assert c.lng == pytest.approx(2.0)

    def test_mean_of_latitudes_independent_of_order(self):
        vertices = [
            Coordinate(22.5, 88.3),
            Coordinate(22.7, 88.4),
            Coordinate(22.6, 88.6),
            Coordinate(22.4, 88.5),
        ]
        expected_lat = sum(v.lat for v in vertices) / len(vertices)
        expected_lng = sum(v.lng for v in vertices) / len(vertices)
        for perm in itertools.permutations(vertices):
            c = centroid(list(perm))
            assert c.lat == pytest.approx(expected_lat)
            assert c.lng == pytest.approx(expected_lng)

    def test_concave_polygon_is_vertex_mean_not_area_centroid(self):
        # An arrowhead; the vertex mean is what the engine queries.
        vertices = [
            Coordinate(0.0, 0.0),
            Coordinate(4.0, 2.0),
            Coordinate(0.0, 4.0),
            Coordinate(1.0, 2.0),
        ]
        c = centroid(vertices)
        assert c.lat == pytest.approx(1.25)
        assert c.lng == pytest.approx(2.0)

    def test_single_point_not_special_cased(self):
        assert centroid([Coordinate(10.0, 20.0)]) == Coordinate(10.0, 20.0)

    def test_empty_raises(self):
        with pytest.raises(InvalidInput):
            centroid([])

    def test_polygon_centroid(self):
        p = Polygon(
            id="p1",
            vertices=(Coordinate(1.0, 1.0), Coordinate(3.0, 1.0), Coordinate(2.0, 4.0)),
            data_source="mock-tropical",
            label="Plot",
        )
        c = polygon_centroid(p)
        assert c.lat == pytest.approx(2.0)
        assert c.lng == pytest.approx(2.0)
