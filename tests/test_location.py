"""
Tests for coordinates, distances, grid squares, bands and jitter
"""

import pytest

from exercise_grader.location import (
    Coordinate,
    FALLBACK_ORIGIN,
    band_for_frequency,
    bearing,
    centroid,
    distance_meters,
    distance_miles,
    from_grid,
    jitter,
    parse_degrees_minutes,
    to_grid,
)


class TestCoordinate:
    """Validity and formatting"""

    def test_valid(self):
        assert Coordinate("47.6062", "-122.3321").is_valid()
        assert Coordinate(47.6062, -122.3321).is_valid()

    def test_invalid(self):
        assert not Coordinate(None, None).is_valid()
        assert not Coordinate("", "-122.3").is_valid()
        assert not Coordinate("north", "west").is_valid()
        assert not Coordinate("91.0", "0.5").is_valid()
        assert not Coordinate("0.0", "0.0").is_valid()

    def test_formatting(self):
        location = Coordinate(47.60621, -122.33207)
        assert location.format_latitude() == "47.6062"
        assert location.kml() == "-122.3321,47.6062"
        assert Coordinate(None, None).format_latitude() == ""


class TestDistance:
    """Great-circle math"""

    def test_one_degree_of_longitude_at_equator(self):
        meters = distance_meters(Coordinate(0.0, 0.0), Coordinate(0.0, 1.0))
        assert meters == pytest.approx(111195.08, abs=1.0)

    def test_one_degree_of_latitude_in_miles(self):
        assert distance_miles(Coordinate(46.0, -122.0), Coordinate(45.0, -122.0)) == 69

    def test_unusable_location(self):
        assert distance_meters(Coordinate(None, None), Coordinate(45.0, -122.0)) is None
        assert distance_miles(Coordinate("x", "y"), Coordinate(45.0, -122.0)) is None

    def test_bearing(self):
        assert bearing(Coordinate(0.0, 0.0), Coordinate(0.0, 1.0)) == 90
        assert bearing(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0)) == 0
        assert bearing(Coordinate(1.0, 0.0), Coordinate(0.0, 0.0)) == 180

    def test_centroid(self):
        middle = centroid([Coordinate(10.0, 20.0), Coordinate(-10.0, 20.0), Coordinate(None, None)])
        assert middle.lat == pytest.approx(0.0, abs=1e-4)
        assert middle.lon == pytest.approx(20.0, abs=1e-4)
        assert centroid([Coordinate(None, None)]) is None

    def test_degrees_minutes(self):
        assert parse_degrees_minutes("47-32.23N") == pytest.approx(47.5372)
        assert parse_degrees_minutes("122-20.5W") == pytest.approx(-122.3417)
        assert parse_degrees_minutes("47.5") is None


class TestGrid:
    """Maidenhead locators"""

    def test_four_character_center(self):
        location = from_grid("FN31")
        assert location.lat == pytest.approx(41.5)
        assert location.lon == pytest.approx(-73.0)

    def test_round_trip_six_character(self):
        assert to_grid(from_grid("FN31pr")) == "FN31pr"

    def test_malformed(self):
        assert from_grid("ZZ99") is None
        assert from_grid("") is None
        assert to_grid(Coordinate(None, None)) == ""


class TestBands:
    def test_band_lookup(self):
        assert band_for_frequency("7101.5") == "40m"
        assert band_for_frequency(3585) == "80m"
        assert band_for_frequency("146520") == "2m"

    def test_outside_any_band(self):
        assert band_for_frequency("9000") is None
        assert band_for_frequency("abc") is None
        assert band_for_frequency(None) is None


class TestJitter:
    """Synthetic coordinates never collide and stay inside the radius"""

    def test_five_points_around_fallback_origin(self):
        points = jitter(5, None, 10000)
        assert len(points) == 5
        assert len({(p.lat, p.lon) for p in points}) == 5
        for point in points:
            assert distance_meters(FALLBACK_ORIGIN, point) <= 10000

    def test_points_are_usable_locations(self):
        for point in jitter(10, None, 10000):
            assert point.is_valid()

    @pytest.mark.parametrize("n", [1, 2, 17, 50])
    def test_distinct_within_radius(self, n):
        center = Coordinate(47.6062, -122.3321)
        points = jitter(n, center, 1000)
        assert len(points) == n
        assert len({(p.lat, p.lon) for p in points}) == n
        for point in points:
            assert distance_meters(center, point) <= 1000

    def test_near_the_antimeridian(self):
        center = Coordinate(-17.7, 179.99)
        for point in jitter(20, center, 5000):
            assert -180.0 <= point.lon <= 180.0
            assert distance_meters(center, point) <= 5000

    def test_invalid_center_falls_back(self):
        points = jitter(3, Coordinate("bad", "data"), 10000)
        for point in points:
            assert distance_meters(FALLBACK_ORIGIN, point) <= 10000

    def test_crowded_request_terminates(self):
        points = jitter(2000, Coordinate(45.0, -122.0), 100)
        assert len(points) == 2000
        for point in points:
            assert distance_meters(Coordinate(45.0, -122.0), point) <= 100

    def test_deterministic(self):
        assert jitter(7, None, 5000) == jitter(7, None, 5000)

    def test_nothing_requested(self):
        assert jitter(0, None, 10000) == []
