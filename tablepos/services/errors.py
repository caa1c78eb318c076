from __future__ import annotations

from typing import Any, Optional


class OrderingError(Exception):
    """Base class for errors reported back to the caller."""

    code = "ordering_error"

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def to_detail(self) -> dict[str, Any]:
        detail: dict[str, Any] = {"code": self.code, "message": self.message}
        detail.update({key: value for key, value in self.context.items() if value is not None})
        return detail


class ValidationFailure(OrderingError):
    code = "validation_failed"


class NotFound(OrderingError):
    code = "not_found"


class InvalidTransition(OrderingError):
    code = "invalid_transition"


class GeofenceBlocked(OrderingError):
    """Submission is blocked until the device is back within range."""

    code = "geofence_blocked"

    def __init__(
        self,
        message: str,
        *,
        reason: str,
        distance_m: Optional[float] = None,
        radius_m: Optional[float] = None,
    ) -> None:
        super().__init__(message, reason=reason, distance_m=distance_m, radius_m=radius_m)
        self.reason = reason
        self.distance_m = distance_m
        self.radius_m = radius_m
