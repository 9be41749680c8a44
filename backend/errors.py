# backend/errors.py

from typing import Any, Dict, List, Optional


class DealTrackerError(Exception):
    """Base error for the deal tracker, with a display-friendly dict form."""

    error_code = "DEAL_TRACKER_ERROR"

    def __init__(self, message: str, details: Optional[str] = None):
        self.message = message
        self.details = details
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        response = {
            "status": "error",
            "error_code": self.error_code,
            "message": self.message,
        }
        if self.details:
            response["details"] = self.details
        return response


class ConfigError(DealTrackerError):
    """Store endpoint or access key is missing. Fatal for every data operation."""

    error_code = "CONFIG_ERROR"

    def __init__(self, message: str, details: Optional[str] = None, url: Optional[str] = None):
        super().__init__(message, details)
        self.url = url


class StoreError(DealTrackerError):
    """A remote store operation failed. The cached snapshot is left unchanged."""

    error_code = "STORE_ERROR"

    def __init__(
        self,
        message: str,
        details: Optional[str] = None,
        code: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message, details)
        self.code = code
        self.hint = hint

    def to_dict(self) -> Dict[str, Any]:
        response = super().to_dict()
        if self.code:
            response["code"] = self.code
        if self.hint:
            response["hint"] = self.hint
        return response


class ValidationError(DealTrackerError):
    """Required form fields are missing; the draft is kept for correction."""

    error_code = "VALIDATION_ERROR"

    def __init__(self, message: str, fields: Optional[List[str]] = None):
        super().__init__(message, details=", ".join(fields) if fields else None)
        self.fields = list(fields or [])


class RefreshError(StoreError):
    """The write was applied by the store but re-fetching the deals failed."""

    error_code = "REFRESH_ERROR"
