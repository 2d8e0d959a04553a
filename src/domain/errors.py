"""
Error taxonomy for route computation and trip classification.

Every error that reaches a caller carries a stable machine-readable ``code``
plus a human-readable message. The API layer renders them as
``{"code": ..., "message": ...}`` with the matching HTTP status.
"""
from typing import Optional


class TripPlannerError(Exception):
    """Base class for errors surfaced to API callers."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message}


class NotFoundError(TripPlannerError):
    """Itinerary or route identifier could not be resolved."""

    code = "NOT_FOUND"
    status_code = 404


class UnauthorizedError(TripPlannerError):
    """The caller does not own the requested itinerary."""

    code = "UNAUTHORIZED"
    status_code = 403


class ItineraryValidationError(TripPlannerError):
    """Required itinerary fields are missing or malformed."""

    code = "VALIDATION_ERROR"
    status_code = 400


class RoutingUnavailableError(TripPlannerError):
    """
    Routing provider failed or returned no paths.
    Safe to retry the whole computation; nothing has been persisted.
    """

    code = "ROUTING_UNAVAILABLE"
    status_code = 502

    def __init__(
        self,
        message: str,
        provider_status: Optional[str] = None,
        provider_message: Optional[str] = None,
    ):
        super().__init__(message)
        self.provider_status = provider_status
        self.provider_message = provider_message


class PlacesUnavailableError(TripPlannerError):
    """Places provider request failed."""

    code = "PLACES_UNAVAILABLE"
    status_code = 502


# Not an exception: degraded enrichment is logged under this code and never raised.
ENRICHMENT_DEGRADED = "ENRICHMENT_DEGRADED"
