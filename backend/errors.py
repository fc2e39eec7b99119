# errors.py
from typing import Optional


class MarketplaceError(Exception):
    """Base class for errors the API translates into HTTP responses."""

    status_code = 500
    kind = "error"

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


class NotFound(MarketplaceError):
    status_code = 404
    kind = "not_found"


class ValidationError(MarketplaceError):
    status_code = 422
    kind = "validation_error"


class Unauthorized(MarketplaceError):
    status_code = 401
    kind = "unauthorized"


class Forbidden(MarketplaceError):
    status_code = 403
    kind = "forbidden"


class PreconditionFailed(MarketplaceError):
    status_code = 409
    kind = "precondition_failed"


class RemoteFailure(MarketplaceError):
    status_code = 503
    kind = "remote_failure"
