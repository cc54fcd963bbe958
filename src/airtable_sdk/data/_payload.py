# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Response interpretation shared by the page fetcher and the table client."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Tuple, Type

from ..common.constants import HEADER_RETRY_AFTER, KEY_CREATED_TIME, KEY_ERROR, KEY_FIELDS, KEY_ID
from ..core._error_codes import INVALID_RECORD
from ..core.errors import MalformedPayloadError, RecordMappingError, RemoteRejectedError
from ..core.transport import TransportResponse
from ..models.fields import FieldSet, decode_fieldset
from ..models.page import PageEntry

_BODY_EXCERPT_LIMIT = 200


def _error_parts(payload: Any) -> Tuple[Optional[str], Optional[str]]:
    """Extract (type, message) from ``{"error": {...}}`` or ``{"error": "TYPE"}``."""
    if not isinstance(payload, Mapping):
        return None, None
    err = payload.get(KEY_ERROR)
    if isinstance(err, str):
        return err, None
    if isinstance(err, Mapping):
        etype = err.get("type")
        message = err.get("message")
        return (etype if isinstance(etype, str) else None, message if isinstance(message, str) else None)
    return None, None


def _retry_after(headers: Mapping[str, str]) -> Optional[int]:
    raw = headers.get(HEADER_RETRY_AFTER) if headers else None
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def check_status(
    response: TransportResponse,
    action: str,
    error_cls: Type[RemoteRejectedError] = RemoteRejectedError,
    **kwargs: Any,
) -> None:
    """
    Raise when ``response`` carries a 4xx/5xx status.

    :param response: Transport outcome to check.
    :param action: Short description used in the error message, e.g. ``"list records"``.
    :param error_cls: Exception class to raise; extra ``kwargs`` are passed to it.
    :raises RemoteRejectedError: With status, store error type and message.
    """
    if response.ok:
        return
    etype, message = _error_parts(response.payload)
    status = response.status_code
    text = message or etype or (response.text or "").strip() or "no error message"
    if error_cls is RemoteRejectedError:
        kwargs["status_code"] = status
    raise error_cls(
        f"{action} failed with HTTP {status}: {text}",
        error_type=etype,
        retry_after=_retry_after(response.headers),
        body_excerpt=(response.text or "")[:_BODY_EXCERPT_LIMIT] or None,
        **kwargs,
    )


def decode_record(item: Any) -> Tuple[str, FieldSet, Optional[str]]:
    """
    Split a record object into ``(id, fields, created_time)``.

    :raises MalformedPayloadError: If the object, its id or its fields are malformed.
    """
    if not isinstance(item, Mapping):
        raise MalformedPayloadError(f"record must be an object, got {type(item).__name__}", subcode=INVALID_RECORD)
    record_id = item.get(KEY_ID)
    if not isinstance(record_id, str) or not record_id:
        raise MalformedPayloadError("record is missing a string id", subcode=INVALID_RECORD, details={"id": record_id})
    if KEY_FIELDS not in item:
        raise MalformedPayloadError(
            f"record {record_id} has no fields object", subcode=INVALID_RECORD, details={"id": record_id}
        )
    try:
        fields = decode_fieldset(item[KEY_FIELDS])
    except MalformedPayloadError as exc:
        exc.details.setdefault("id", record_id)
        raise
    created = item.get(KEY_CREATED_TIME)
    return record_id, fields, created if isinstance(created, str) else None


def decode_entry(item: Any) -> PageEntry:
    """Decode one page element, keeping a decode failure inside the entry."""
    try:
        record_id, fields, created = decode_record(item)
    except MalformedPayloadError as exc:
        return PageEntry(error=exc)
    return PageEntry(record_id=record_id, fields=fields, created_time=created)


def map_record(record_type: Type[Any], record_id: str, fields: FieldSet) -> Any:
    """
    Build a ``record_type`` instance from a field set and attach its id.

    :raises RecordMappingError: If the record type rejects the field set.
    """
    try:
        record = record_type.from_fields(fields)
    except MalformedPayloadError as exc:
        exc.details.setdefault("id", record_id)
        raise
    except (TypeError, ValueError) as exc:
        raise RecordMappingError(
            f"cannot map record {record_id} to {record_type.__name__}: {exc}",
            details={"id": record_id},
        ) from exc
    record.assign_id(record_id)
    return record
