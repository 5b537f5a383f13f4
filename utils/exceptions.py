"""
Error taxonomy for AeroSense API
Every error carries the HTTP status it is reported with
"""

from typing import Optional


class AeroSenseError(Exception):
    """Base class for errors converted into {"error": message} responses"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(AeroSenseError):
    """A required secret is missing; fails the request, not the process"""

    status_code = 500


class CityNotFoundError(AeroSenseError):
    status_code = 404

    def __init__(self, city: str):
        super().__init__("City not found")
        self.city = city


class UpstreamError(AeroSenseError):
    """Non-success status or transport failure from an upstream service"""

    status_code = 502

    def __init__(self, message: str, upstream_status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body


class ParseError(UpstreamError):
    """Upstream answered, but the body is not what we expected"""
