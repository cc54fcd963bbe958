# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Subcodes and status-code tables used when building structured errors."""

from __future__ import annotations

HTTP_400 = "http_400"
HTTP_401 = "http_401"
HTTP_403 = "http_403"
HTTP_404 = "http_404"
HTTP_413 = "http_413"
HTTP_422 = "http_422"
HTTP_429 = "http_429"
HTTP_500 = "http_500"
HTTP_502 = "http_502"
HTTP_503 = "http_503"
HTTP_504 = "http_504"

_HTTP_SUBCODES = {
    400: HTTP_400,
    401: HTTP_401,
    403: HTTP_403,
    404: HTTP_404,
    413: HTTP_413,
    422: HTTP_422,
    429: HTTP_429,
    500: HTTP_500,
    502: HTTP_502,
    503: HTTP_503,
    504: HTTP_504,
}

# Rate limiting and gateway failures; safe for a caller to try again later.
TRANSIENT_STATUS = frozenset({429, 502, 503, 504})

# Client-side subcodes
MISSING_RECORD_ID = "missing_record_id"
INVALID_PAGE = "invalid_page"
INVALID_RECORD = "invalid_record"
INVALID_FIELD_VALUE = "invalid_field_value"
MISSING_FIELD = "missing_field"
FIELD_TYPE_MISMATCH = "field_type_mismatch"
CONNECTION_FAILED = "connection_failed"


def http_subcode(status: int) -> str:
    """Return the subcode for an HTTP status, falling back to ``http_<status>``."""
    return _HTTP_SUBCODES.get(status, f"http_{status}")


def is_transient_status(status: int) -> bool:
    return status in TRANSIENT_STATUS


__all__ = [
    "HTTP_400",
    "HTTP_401",
    "HTTP_403",
    "HTTP_404",
    "HTTP_413",
    "HTTP_422",
    "HTTP_429",
    "HTTP_500",
    "HTTP_502",
    "HTTP_503",
    "HTTP_504",
    "TRANSIENT_STATUS",
    "MISSING_RECORD_ID",
    "INVALID_PAGE",
    "INVALID_RECORD",
    "INVALID_FIELD_VALUE",
    "MISSING_FIELD",
    "FIELD_TYPE_MISMATCH",
    "CONNECTION_FAILED",
    "http_subcode",
    "is_transient_status",
]
