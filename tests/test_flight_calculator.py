"""
Tests for the survey grid, facade scan and orbit generators.
"""

import math
import unittest

from drone_specs import CameraSpec
from flight_calculator import (
    generate_facade_scan,
    generate_orbit,
    generate_survey_grid,
    is_point_in_polygon,
    rotate_lat_lng,
)
from geodesy import R_EARTH, calculate_bearing, haversine_distance
from models import (
    POI,
    CameraAction,
    FacadeScanParams,
    HeadingControl,
    InvalidParameterError,
    OrbitParams,
    LatLng,
    SurveyGridParams,
    WaypointType,
)
from photogrammetry import calculate_footprint

SQUARE = [LatLng(45.000, 9.000), LatLng(45.000, 9.002), LatLng(45.002, 9.002), LatLng(45.002, 9.000)]
L_SHAPE = [
    LatLng(45.000, 9.000), LatLng(45.000, 9.002), LatLng(45.001, 9.002),
    LatLng(45.001, 9.001), LatLng(45.002, 9.001), LatLng(45.002, 9.000),
]


def line_spacing_deg(params, origin):
    width = calculate_footprint(params.altitude).width * (1 - params.sidelap / 100)
    return math.degrees(width / (R_EARTH * math.cos(math.radians(origin.lat))))


def photo_spacing_deg(params):
    height = calculate_footprint(params.altitude).height * (1 - params.frontlap / 100)
    return math.degrees(height / R_EARTH)


class TestPolygonHelpers(unittest.TestCase):
    """Test rotation and point-in-polygon."""

    def test_point_inside_and_outside(self):
        self.assertTrue(is_point_in_polygon(LatLng(45.001, 9.001), SQUARE))
        self.assertFalse(is_point_in_polygon(LatLng(45.003, 9.001), SQUARE))
        self.assertFalse(is_point_in_polygon(LatLng(45.001, 8.999), SQUARE))

    def test_degenerate_polygon(self):
        self.assertFalse(is_point_in_polygon(LatLng(0, 0), SQUARE[:2]))

    def test_rotation_round_trip(self):
        center = SQUARE[0]
        point = LatLng(45.0015, 9.0007)
        angle = math.radians(37)
        back = rotate_lat_lng(rotate_lat_lng(point, center, angle), center, -angle)
        self.assertAlmostEqual(back.lat, point.lat, places=10)
        self.assertAlmostEqual(back.lng, point.lng, places=10)

    def test_quarter_turn_preserves_ground_distance(self):
        center = LatLng(45.0, 9.0)
        east = LatLng(45.0, 9.001)
        turned = rotate_lat_lng(east, center, math.pi / 2)
        self.assertAlmostEqual(turned.lng, center.lng, places=9)
        self.assertAlmostEqual(haversine_distance(center, turned), haversine_distance(center, east), delta=0.05)


class TestSurveyGrid(unittest.TestCase):
    """Test lawnmower grid generation."""

    def setUp(self):
        self.params = SurveyGridParams(altitude=50, sidelap=70, frontlap=80, angle=0)

    def test_square_scenario(self):
        waypoints = generate_survey_grid(SQUARE, self.params)
        self.assertGreater(len(waypoints), 0)

        lat_tol = photo_spacing_deg(self.params)
        lng_tol = line_spacing_deg(self.params, SQUARE[0])
        lats = [wp.latlng.lat for wp in waypoints]
        lngs = [wp.latlng.lng for wp in waypoints]
        self.assertLessEqual(min(lats) - 45.000, lat_tol)
        self.assertLessEqual(45.002 - max(lats), lat_tol)
        self.assertLessEqual(min(lngs) - 9.000, lng_tol)
        self.assertLessEqual(9.002 - max(lngs), lng_tol)

    def test_every_point_inside_polygon(self):
        for angle in (0, 30, 90, 135):
            params = SurveyGridParams(altitude=40, sidelap=60, frontlap=70, angle=angle)
            for wp in generate_survey_grid(SQUARE, params):
                self.assertTrue(is_point_in_polygon(wp.latlng, SQUARE))

    def test_concave_polygon_skips_notch(self):
        for angle in (0, 17.3, 45, -30):
            params = SurveyGridParams(altitude=40, sidelap=60, frontlap=70, angle=angle)
            waypoints = generate_survey_grid(L_SHAPE, params)
            self.assertGreater(len(waypoints), 0)
            for wp in waypoints:
                self.assertTrue(is_point_in_polygon(wp.latlng, L_SHAPE))
                in_notch = wp.latlng.lat > 45.0011 and wp.latlng.lng > 9.0011
                self.assertFalse(in_notch)
            self.assertTrue(any(wp.latlng.lat > 45.0012 for wp in waypoints))
            self.assertTrue(any(wp.latlng.lng > 9.0012 for wp in waypoints))

    def test_boustrophedon_order(self):
        waypoints = generate_survey_grid(SQUARE, self.params)
        spacing = line_spacing_deg(self.params, SQUARE[0])
        lines = {}
        order = []
        for wp in waypoints:
            index = round((wp.latlng.lng - SQUARE[0].lng) / spacing)
            if index not in lines:
                lines[index] = []
                order.append(index)
            lines[index].append(wp.latlng.lat)

        self.assertEqual(order, sorted(order))
        self.assertGreater(len(order), 2)
        for index in order:
            lats = lines[index]
            if len(lats) < 2:
                continue
            if index % 2 == 0:
                self.assertEqual(lats, sorted(lats))
            else:
                self.assertEqual(lats, sorted(lats, reverse=True))

    def test_waypoint_options(self):
        for wp in generate_survey_grid(SQUARE, self.params):
            self.assertEqual(wp.altitude, 50)
            self.assertEqual(wp.camera_action, CameraAction.TAKE_PHOTO)
            self.assertEqual(wp.heading_control, HeadingControl.FIXED)
            self.assertEqual(wp.fixed_heading, 0)
            self.assertEqual(wp.gimbal_pitch, -90)
            self.assertEqual(wp.waypoint_type, WaypointType.GRID)

    def test_fixed_heading_follows_rounded_angle(self):
        params = SurveyGridParams(altitude=50, sidelap=70, frontlap=80, angle=29.5)
        waypoints = generate_survey_grid(SQUARE, params)
        self.assertGreater(len(waypoints), 0)
        self.assertTrue(all(wp.fixed_heading == 30 for wp in waypoints))

    def test_no_duplicate_positions(self):
        waypoints = generate_survey_grid(SQUARE, self.params)
        keys = [f"{wp.latlng.lat:.7f},{wp.latlng.lng:.7f}" for wp in waypoints]
        self.assertEqual(len(keys), len(set(keys)))

    def test_more_sidelap_never_fewer_waypoints(self):
        counts = []
        for sidelap in (40, 55, 70, 85):
            params = SurveyGridParams(altitude=50, sidelap=sidelap, frontlap=80, angle=0)
            counts.append(len(generate_survey_grid(SQUARE, params)))
        self.assertEqual(counts, sorted(counts))

    def test_degenerate_inputs_give_empty_list(self):
        self.assertEqual(generate_survey_grid(SQUARE[:2], self.params), [])
        self.assertEqual(generate_survey_grid([], self.params), [])
        zero_alt = SurveyGridParams(altitude=0, sidelap=70, frontlap=80)
        self.assertEqual(generate_survey_grid(SQUARE, zero_alt), [])
        no_lens = CameraSpec(sensor_width_mm=8, sensor_height_mm=6, focal_length_mm=0)
        self.assertEqual(generate_survey_grid(SQUARE, self.params, camera=no_lens), [])

    def test_full_overlap_gives_empty_list(self):
        params = SurveyGridParams(altitude=50, sidelap=100, frontlap=80)
        self.assertEqual(generate_survey_grid(SQUARE, params), [])

    def test_idempotent(self):
        first = generate_survey_grid(SQUARE, self.params)
        second = generate_survey_grid(SQUARE, self.params)
        self.assertEqual([wp.latlng for wp in first], [wp.latlng for wp in second])


class TestFacadeScan(unittest.TestCase):
    """Test facade raster generation."""

    def setUp(self):
        self.start = LatLng(45.0, 9.0)
        self.end = LatLng(45.0, 9.001)
        self.length = haversine_distance(self.start, self.end)

    def params(self, **overrides):
        values = dict(side="left", distance=20, min_height=5, max_height=5,
                      horizontal_overlap=70, vertical_overlap=50, gimbal_pitch=-10)
        values.update(overrides)
        return FacadeScanParams(**values)

    def test_single_row_when_heights_equal(self):
        for overlap in (0, 50, 90, 100):
            waypoints = generate_facade_scan(self.start, self.end, self.params(vertical_overlap=overlap))
            step = calculate_footprint(20).width * 0.3
            self.assertEqual(len(waypoints), math.floor(self.length / step) + 1)
            self.assertTrue(all(wp.altitude == 5 for wp in waypoints))

    def test_left_side_is_north_of_eastbound_line(self):
        waypoints = generate_facade_scan(self.start, self.end, self.params())
        for wp in waypoints:
            offset = (wp.latlng.lat - 45.0) * R_EARTH * math.pi / 180
            self.assertAlmostEqual(offset, 20, delta=0.5)
            self.assertAlmostEqual(wp.fixed_heading, 180, delta=0.01)

    def test_right_side_is_south_and_faces_north(self):
        waypoints = generate_facade_scan(self.start, self.end, self.params(side="right"))
        for wp in waypoints:
            self.assertLess(wp.latlng.lat, 45.0)
            heading = wp.fixed_heading
            self.assertLess(min(heading, 360 - heading), 0.01)

    def test_rows_and_heights(self):
        params = self.params(min_height=5, max_height=25)
        waypoints = generate_facade_scan(self.start, self.end, params)
        v_step = calculate_footprint(20).height * 0.5
        expected_rows = math.floor(20 / v_step) + 1
        heights = sorted(set(wp.altitude for wp in waypoints))
        self.assertEqual(len(heights), expected_rows)
        self.assertEqual(heights[0], 5)
        self.assertLessEqual(heights[-1], 25)
        self.assertEqual([wp.altitude for wp in waypoints], sorted(wp.altitude for wp in waypoints))

    def test_rows_alternate_direction(self):
        params = self.params(min_height=5, max_height=25)
        waypoints = generate_facade_scan(self.start, self.end, params)
        first_row = [wp.latlng.lng for wp in waypoints if wp.altitude == 5]
        second_height = sorted(set(wp.altitude for wp in waypoints))[1]
        second_row = [wp.latlng.lng for wp in waypoints if wp.altitude == second_height]
        self.assertEqual(first_row, sorted(first_row))
        self.assertEqual(second_row, sorted(second_row, reverse=True))
        self.assertAlmostEqual(first_row[0], 9.0, places=6)
        self.assertLessEqual(max(first_row), 9.001 + 1e-9)

    def test_max_below_min_gives_one_row_at_min(self):
        waypoints = generate_facade_scan(self.start, self.end, self.params(min_height=30, max_height=10))
        self.assertGreater(len(waypoints), 0)
        self.assertTrue(all(wp.altitude == 30 for wp in waypoints))

    def test_short_facade_gives_single_column(self):
        end = LatLng(45.0, 9.00001)
        waypoints = generate_facade_scan(self.start, end, self.params())
        self.assertEqual(len(waypoints), 1)
        self.assertAlmostEqual(waypoints[0].latlng.lng, 9.0, places=6)

    def test_waypoint_options(self):
        for wp in generate_facade_scan(self.start, self.end, self.params()):
            self.assertEqual(wp.camera_action, CameraAction.TAKE_PHOTO)
            self.assertEqual(wp.heading_control, HeadingControl.FIXED)
            self.assertEqual(wp.gimbal_pitch, -10)
            self.assertEqual(wp.waypoint_type, WaypointType.FACADE)

    def test_gimbal_pitch_clamped(self):
        waypoints = generate_facade_scan(self.start, self.end, self.params(gimbal_pitch=-120))
        self.assertTrue(all(wp.gimbal_pitch == -90 for wp in waypoints))

    def test_zero_length_line(self):
        self.assertEqual(generate_facade_scan(self.start, self.start, self.params()), [])

    def test_unknown_side(self):
        with self.assertRaises(InvalidParameterError):
            generate_facade_scan(self.start, self.end, self.params(side="up"))


class TestOrbit(unittest.TestCase):
    """Test orbit generation."""

    def setUp(self):
        self.poi = POI(id=7, name="Tower", latlng=LatLng(45.0, 9.0),
                       object_height_above_ground=20, terrain_elevation_msl=100)

    def test_point_count_and_radius(self):
        waypoints = generate_orbit(OrbitParams(self.poi, 50, 8), flight_altitude=60, home_elevation=100)
        self.assertEqual(len(waypoints), 8)
        for wp in waypoints:
            self.assertAlmostEqual(haversine_distance(self.poi.latlng, wp.latlng), 50, delta=0.5)

    def test_tracks_poi(self):
        for wp in generate_orbit(OrbitParams(self.poi, 50, 12), flight_altitude=60, home_elevation=100):
            self.assertEqual(wp.heading_control, HeadingControl.POI_TRACK)
            self.assertEqual(wp.target_poi_id, 7)
            self.assertEqual(wp.waypoint_type, WaypointType.ORBIT)
            self.assertEqual(wp.altitude, 60)

    def test_gimbal_pitch_from_absolute_altitudes(self):
        waypoints = generate_orbit(OrbitParams(self.poi, 50, 8), flight_altitude=60, home_elevation=100)
        self.assertTrue(all(wp.gimbal_pitch == -39 for wp in waypoints))

    def test_points_evenly_spaced_from_north(self):
        waypoints = generate_orbit(OrbitParams(self.poi, 80, 8), flight_altitude=40)
        for i, wp in enumerate(waypoints):
            bearing = calculate_bearing(self.poi.latlng, wp.latlng)
            diff = abs(bearing - i * 45) % 360
            self.assertLess(min(diff, 360 - diff), 0.01)

    def test_rejects_too_few_points(self):
        with self.assertRaises(InvalidParameterError):
            generate_orbit(OrbitParams(self.poi, 50, 2), flight_altitude=60)

    def test_rejects_non_positive_radius(self):
        for radius in (0, -5):
            with self.assertRaises(InvalidParameterError):
                generate_orbit(OrbitParams(self.poi, radius, 8), flight_altitude=60)


if __name__ == '__main__':
    unittest.main()
