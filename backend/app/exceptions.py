"""
Errors raised by the dashboard service.

Each carries the HTTP status and error code the API layer reports; the
handlers in main.py turn them into `{"error": ..., "message": ...}` bodies.
"""
from typing import Any, Dict, Optional


class DashboardError(Exception):
    """Base exception for all dashboard errors"""

    status_code = 500
    error = "dashboard_error"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.error, "message": self.message}


class InvalidRequestError(DashboardError):
    """Raised when a required request parameter is missing or malformed"""

    status_code = 400
    error = "invalid_request"


class InvalidRangeError(InvalidRequestError):
    """Raised when a custom date range is incomplete or inverted"""

    error = "invalid_range"

    def __init__(self, message: str, from_date: Optional[str] = None, to_date: Optional[str] = None):
        super().__init__(message, {"fromDate": from_date, "toDate": to_date})


class NotFoundError(DashboardError):
    """Raised when a looked-up entity does not exist"""

    status_code = 404
    error = "not_found"
