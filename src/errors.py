"""
errors.py - Error taxonomy for the review hub

UpstreamUnavailable never leaves a provider adapter: it is raised while
talking to a provider and caught by the adapter, which then serves its
fallback dataset. The HTTP layer maps the remaining errors to status codes.
"""


class ReviewHubError(Exception):
    """Base class for all domain errors."""

    status_code = 500

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message


class ValidationError(ReviewHubError):
    """Missing or malformed caller input."""
    status_code = 400


class NotFoundError(ReviewHubError):
    """Unknown review, property, place or manager."""
    status_code = 404


class UpstreamUnavailable(ReviewHubError):
    """A provider could not be reached or refused the request."""
    status_code = 502


class PersistenceError(ReviewHubError):
    """The durable store could not be read or written."""


class AuthenticationError(ReviewHubError):
    """No credentials supplied, or credentials did not match."""
    status_code = 401


class AuthorizationError(ReviewHubError):
    """Credentials were valid but insufficient, or the token is bad."""
    status_code = 403


class ConflictError(ReviewHubError):
    """Resource already exists."""
    status_code = 409
