"""Internal machinery: HTTP session and retry policy."""

from .http import HttpClient, HttpError, QueryParams, TokenAuth
from .retry import on_status_code, retrying

__all__ = [
    "HttpClient",
    "HttpError",
    "QueryParams",
    "TokenAuth",
    "on_status_code",
    "retrying",
]
