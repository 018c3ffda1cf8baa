"""
Domain errors raised by the ingestion pipeline and the bed assignment service.
Routers translate them to HTTP status codes via ``status_code``.
"""


class WardServiceError(Exception):
    """Base class for errors the API knows how to report."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(WardServiceError):
    """Missing or invalid request input (bed reference, status, patient id)."""
    status_code = 400


class NotFoundError(WardServiceError):
    """A referenced bed does not exist."""
    status_code = 404


class StoreError(WardServiceError):
    """Any database failure; the surrounding transaction has been rolled back."""
    status_code = 500


class UpstreamFetchError(WardServiceError):
    """The CSV object could not be fetched from object storage."""
    status_code = 500
