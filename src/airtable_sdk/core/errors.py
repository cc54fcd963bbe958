# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Structured exceptions raised by the Airtable SDK.

Every failure a caller can see derives from :class:`AirtableError`:

- :class:`TransportError`: the request never produced an HTTP response.
- :class:`RemoteRejectedError`: the store answered with a 4xx/5xx status.
- :class:`NotFoundError`: a single-record lookup hit a 404.
- :class:`MalformedPayloadError`: a response did not have the expected shape.
- :class:`RecordMappingError`: a field set could not be mapped onto a record type.
- :class:`MissingIdError`: a write that needs a record id was given none.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Dict, Optional

from ._error_codes import (
    CONNECTION_FAILED,
    MISSING_RECORD_ID,
    http_subcode,
    is_transient_status,
)


class AirtableError(Exception):
    """Base structured error for the Airtable SDK."""

    def __init__(
        self,
        message: str,
        *,
        code: str,
        subcode: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
        is_transient: bool = False,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.subcode = subcode
        self.status_code = status_code
        self.details = details or {}
        self.source = source or "client"
        self.is_transient = is_transient
        self.timestamp = _dt.datetime.now(_dt.timezone.utc).isoformat().replace("+00:00", "Z")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "message": self.message,
            "code": self.code,
            "subcode": self.subcode,
            "status_code": self.status_code,
            "details": self.details,
            "source": self.source,
            "is_transient": self.is_transient,
            "timestamp": self.timestamp,
        }

    def __repr__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}(code={self.code!r}, subcode={self.subcode!r}, message={self.message!r})"


class ValidationError(AirtableError):
    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="validation_error", subcode=subcode, details=details, source="client")


class MissingIdError(ValidationError):
    """A write operation required a record id and the record carried none."""

    def __init__(self, message: str = "record has no id; create it before updating or deleting") -> None:
        super().__init__(message, subcode=MISSING_RECORD_ID)


class TransportError(AirtableError):
    """The transport failed before a response was received (DNS, TLS, timeout, ...)."""

    def __init__(
        self,
        message: str,
        *,
        subcode: Optional[str] = CONNECTION_FAILED,
        details: Optional[Dict[str, Any]] = None,
        is_transient: bool = True,
    ) -> None:
        super().__init__(
            message,
            code="transport_error",
            subcode=subcode,
            details=details,
            source="client",
            is_transient=is_transient,
        )


class RemoteRejectedError(AirtableError):
    """The remote store understood the request and declined it."""

    def __init__(
        self,
        message: str,
        status_code: int,
        *,
        error_type: Optional[str] = None,
        retry_after: Optional[int] = None,
        body_excerpt: Optional[str] = None,
        request_id: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        d = details or {}
        if error_type is not None:
            d["error_type"] = error_type
        if retry_after is not None:
            d["retry_after"] = retry_after
        if body_excerpt is not None:
            d["body_excerpt"] = body_excerpt
        if request_id is not None:
            d["request_id"] = request_id
        super().__init__(
            message,
            code="http_error",
            subcode=http_subcode(status_code),
            status_code=status_code,
            details=d,
            source="server",
            is_transient=is_transient_status(status_code),
        )

    @property
    def error_type(self) -> Optional[str]:
        return self.details.get("error_type")

    @property
    def retry_after(self) -> Optional[int]:
        return self.details.get("retry_after")


class NotFoundError(RemoteRejectedError):
    """A record lookup by id found nothing."""

    def __init__(self, message: str, *, record_id: Optional[str] = None, **kwargs: Any) -> None:
        details = kwargs.pop("details", None) or {}
        if record_id is not None:
            details["record_id"] = record_id
        super().__init__(message, 404, details=details, **kwargs)


class MalformedPayloadError(AirtableError):
    """A payload did not match the expected page or record shape."""

    def __init__(
        self,
        message: str,
        *,
        subcode: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        code: str = "malformed_payload",
    ) -> None:
        super().__init__(message, code=code, subcode=subcode, details=details, source="client")


class RecordMappingError(MalformedPayloadError):
    """A field set could not be converted into the caller's record type."""

    def __init__(self, message: str, *, subcode: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, subcode=subcode, details=details, code="record_mapping_error")


__all__ = [
    "AirtableError",
    "ValidationError",
    "MissingIdError",
    "TransportError",
    "RemoteRejectedError",
    "NotFoundError",
    "MalformedPayloadError",
    "RecordMappingError",
]
