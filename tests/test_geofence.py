import asyncio
from types import SimpleNamespace

import pytest

from tablepos.services.geofence import (
    CANNOT_VERIFY_MESSAGE,
    REASON_OUT_OF_RANGE,
    REASON_PERMISSION_DENIED,
    REASON_TIMEOUT,
    REASON_UNAVAILABLE,
    Position,
    PositionReport,
    acquire_position,
    check_geofence,
    distance_meters,
    is_within_range,
)
from tests.fixtures_data import FAR_POSITION, GPS_CONFIG, RESTAURANT_CENTER

CENTER = Position(**RESTAURANT_CENTER)
FAR = Position(**FAR_POSITION)


def _config(**overrides):
    return SimpleNamespace(**{**GPS_CONFIG, **overrides})


def test_same_point_is_within_range():
    assert distance_meters(CENTER.lat, CENTER.lng, CENTER.lat, CENTER.lng) == 0
    assert is_within_range(CENTER, CENTER, 100) is True


def test_point_two_hundred_meters_away_is_out_of_a_hundred_meter_radius():
    distance = distance_meters(FAR.lat, FAR.lng, CENTER.lat, CENTER.lng)

    assert 190 < distance < 210
    assert is_within_range(FAR, CENTER, 100) is False
    assert is_within_range(FAR, CENTER, 250) is True


def test_boundary_distance_counts_as_inside():
    distance = distance_meters(FAR.lat, FAR.lng, CENTER.lat, CENTER.lng)

    assert is_within_range(FAR, CENTER, distance) is True


def test_disabled_gps_always_allows_even_without_position():
    result = check_geofence(_config(is_gps_enabled=False), None)

    assert result.allowed is True


def test_missing_position_blocks_with_cannot_verify_message():
    result = check_geofence(_config(), None)

    assert result.allowed is False
    assert result.reason == REASON_UNAVAILABLE
    assert result.message == CANNOT_VERIFY_MESSAGE


def test_permission_denied_is_never_a_pass():
    result = check_geofence(_config(), PositionReport(error=REASON_PERMISSION_DENIED))

    assert result.allowed is False
    assert result.reason == REASON_PERMISSION_DENIED
    assert result.message == CANNOT_VERIFY_MESSAGE


def test_out_of_range_result_carries_measured_distance():
    result = check_geofence(_config(), PositionReport(position=FAR))

    assert result.allowed is False
    assert result.reason == REASON_OUT_OF_RANGE
    assert result.distance_m == pytest.approx(200, abs=10)
    assert f"{round(result.distance_m)}m" in result.message


def test_inside_range_allows_and_reports_distance():
    result = check_geofence(_config(), PositionReport(position=CENTER))

    assert result.allowed is True
    assert result.distance_m == 0


def test_acquire_position_times_out_instead_of_hanging():
    async def never_answers():
        await asyncio.sleep(10)

    report = asyncio.run(acquire_position(never_answers, timeout_seconds=0.01))

    assert report.ok is False
    assert report.error == REASON_TIMEOUT


def test_acquire_position_maps_permission_error():
    async def denied():
        raise PermissionError("user dismissed the prompt")

    report = asyncio.run(acquire_position(denied, timeout_seconds=1))

    assert report.error == REASON_PERMISSION_DENIED


def test_acquire_position_returns_position():
    async def located():
        return CENTER

    report = asyncio.run(acquire_position(located, timeout_seconds=1))

    assert report.ok is True
    assert report.position == CENTER
