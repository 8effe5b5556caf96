"""
Error taxonomy for the IPMA District Safety service
"""

from typing import Optional

NETWORK_ERROR = "NetworkError"
DECODE_ERROR = "DecodeError"
NOT_FOUND = "NotFound"
NO_AREA_ID = "NoAreaId"


class SafetyServiceError(Exception):
    """
    Base exception for all service errors.
    Carries the HTTP status code the API layer answers with.
    """

    def __init__(self, message: str, status_code: int = 500, detail: Optional[str] = None):
        self.message = message
        self.status_code = status_code
        self.detail = detail or message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        data = {"status": "error", "message": self.message, "detail": self.detail}
        reason = getattr(self, "reason", None)
        if reason:
            data["reason"] = reason
        return data


class FetchError(SafetyServiceError):
    """
    A remote feed could not be fetched or decoded.

    reason is NetworkError (transport failure or non-success status)
    or DecodeError (body was not valid JSON). empty_body marks a
    response that decoded to JSON null.
    """

    def __init__(
        self, reason: str, message: str, url: Optional[str] = None, empty_body: bool = False
    ):
        self.reason = reason
        self.url = url
        self.empty_body = empty_body
        super().__init__(message=message, status_code=502, detail=f"{reason}: {message}")


class DistrictNotFoundError(SafetyServiceError):
    """Coordinates lie outside every known district"""

    def __init__(self, latitude: float, longitude: float):
        self.reason = NOT_FOUND
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(
            message=f"No district contains ({latitude}, {longitude})",
            status_code=404,
        )


class UnknownDistrictError(SafetyServiceError):
    """No district is registered under the given name"""

    def __init__(self, name: str):
        self.reason = NOT_FOUND
        self.name = name
        super().__init__(message=f"Unknown district: {name}", status_code=404)


class NoAreaIdError(SafetyServiceError):
    """The district has no resolvable warning-area code"""

    def __init__(self, district_name: Optional[str] = None):
        self.reason = NO_AREA_ID
        name = district_name or "Unknown"
        super().__init__(message=f"District '{name}' has no warning area code", status_code=404)


class ValidationError(SafetyServiceError):
    """Request validation failed"""

    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(message=message, status_code=400, detail=detail)
