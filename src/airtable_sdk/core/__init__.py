# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Core infrastructure components for the Airtable SDK.

This package contains configuration, authentication, the HTTP client and
transport, telemetry, and error handling.
"""

from .config import AirtableConfig
from .errors import (
    AirtableError,
    MalformedPayloadError,
    MissingIdError,
    NotFoundError,
    RecordMappingError,
    RemoteRejectedError,
    TransportError,
    ValidationError,
)
from .transport import RequestsTransport, Transport, TransportResponse

__all__ = [
    "AirtableConfig",
    "AirtableError",
    "MalformedPayloadError",
    "MissingIdError",
    "NotFoundError",
    "RecordMappingError",
    "RemoteRejectedError",
    "TransportError",
    "ValidationError",
    "RequestsTransport",
    "Transport",
    "TransportResponse",
]
