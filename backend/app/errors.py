"""Exception types shared by the pipeline, repositories and API."""


class ProviderError(Exception):
    """An external provider (AI or geocoding) failed."""

    pass


class GeocodingError(ProviderError):
    """Geocoding provider failed or returned no result."""

    pass


class DraftError(ProviderError):
    """AI provider failed, timed out, or returned an unusable itinerary."""

    pass


class NormalizationError(Exception):
    """Itinerary could not be brought into the canonical shape.

    Raised from the pure computation stages; the trip is not persisted.
    """

    pass


class NotFoundError(Exception):
    """Requested resource does not exist."""

    pass


class PermissionDeniedError(Exception):
    """Caller does not own the resource and is not an admin."""

    pass


class ConflictError(Exception):
    """Write would violate a uniqueness invariant."""

    pass


class InvalidOperationError(Exception):
    """Request is well-formed but not allowed in the current state."""

    pass
