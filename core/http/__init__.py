"""
HTTP Client Module

Blocking HTTP client used by every network-facing component.
"""

from .client import HttpClient, HttpError, HttpResponse

__all__ = [
    "HttpClient",
    "HttpError",
    "HttpResponse",
]
