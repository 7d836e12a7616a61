"""
Portfolio API - Domain Errors
=============================

Errors raised by the service layer. The API layer maps each one to an HTTP
status in ``portfolio_api.api.main``.
"""


class PortfolioError(Exception):
    """Base class for all domain errors."""

    status_code: int = 500
    code: str = "INTERNAL_ERROR"
    error: str = "Internal Server Error"

    def __init__(self, detail: str = ""):
        super().__init__(detail or self.error)
        self.detail = detail or self.error


class NotFoundError(PortfolioError):
    status_code = 404
    code = "NOT_FOUND"
    error = "Not Found"


class ConflictError(PortfolioError):
    status_code = 409
    code = "CONFLICT"
    error = "Conflict"


class ValidationError(PortfolioError):
    status_code = 422
    code = "VALIDATION_ERROR"
    error = "Validation Error"


class UnauthorizedError(PortfolioError):
    status_code = 401
    code = "UNAUTHORIZED"
    error = "Unauthorized"
