"""Proximity check gating order submission.

A device that cannot report where it is never passes: missing positions,
denied permissions and timeouts all block with the same fixed message.
"""

from __future__ import annotations

import asyncio
import logging
import math
from dataclasses import dataclass
from typing import Awaitable, Callable, Optional

from tablepos.core.config import GEOLOCATION_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

EARTH_RADIUS_M = 6_371_000

REASON_OUT_OF_RANGE = "out_of_range"
REASON_PERMISSION_DENIED = "permission_denied"
REASON_UNAVAILABLE = "unavailable"
REASON_TIMEOUT = "timeout"

CANNOT_VERIFY_MESSAGE = "Cannot verify your location. Enable location access to order."


@dataclass(frozen=True)
class Position:
    lat: float
    lng: float


@dataclass(frozen=True)
class PositionReport:
    position: Optional[Position] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.position is not None and self.error is None


@dataclass(frozen=True)
class GeofenceResult:
    allowed: bool
    distance_m: Optional[float] = None
    reason: Optional[str] = None
    message: Optional[str] = None


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_M * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def is_within_range(point: Position, center: Position, radius_meters: float) -> bool:
    return distance_meters(point.lat, point.lng, center.lat, center.lng) <= radius_meters


def out_of_range_message(distance_m: float) -> str:
    return f"You are {round(distance_m)}m from the restaurant. Please order on site."


def check_geofence(config, report: Optional[PositionReport]) -> GeofenceResult:
    if not config.is_gps_enabled:
        return GeofenceResult(allowed=True)

    if report is None or not report.ok:
        reason = report.error if report is not None and report.error else REASON_UNAVAILABLE
        return GeofenceResult(allowed=False, reason=reason, message=CANNOT_VERIFY_MESSAGE)

    center = Position(lat=config.center_lat, lng=config.center_lng)
    point = report.position
    distance = distance_meters(point.lat, point.lng, center.lat, center.lng)
    if distance > config.gps_radius_m:
        return GeofenceResult(
            allowed=False,
            distance_m=distance,
            reason=REASON_OUT_OF_RANGE,
            message=out_of_range_message(distance),
        )
    return GeofenceResult(allowed=True, distance_m=distance)


async def acquire_position(
    fetch: Callable[[], Awaitable[Position]],
    timeout_seconds: Optional[float] = None,
) -> PositionReport:
    """Wait for a device position, bounded by ``timeout_seconds``.

    For callers that read a position source in-process, such as a kiosk
    with its own GPS reader. Browser clients resolve the position on the
    device and send either coordinates or the failure reason, which the
    submit endpoint turns into a ``PositionReport`` directly.
    """
    timeout = GEOLOCATION_TIMEOUT_SECONDS if timeout_seconds is None else timeout_seconds
    try:
        position = await asyncio.wait_for(fetch(), timeout=timeout)
    except asyncio.TimeoutError:
        logger.warning("position acquisition timed out after %ss", timeout)
        return PositionReport(error=REASON_TIMEOUT)
    except PermissionError:
        logger.warning("position acquisition denied")
        return PositionReport(error=REASON_PERMISSION_DENIED)
    except (OSError, LookupError) as exc:
        logger.warning("position unavailable: %s", exc)
        return PositionReport(error=REASON_UNAVAILABLE)
    return PositionReport(position=position)
