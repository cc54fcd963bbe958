# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Single-page retrieval for list-records queries."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..common.constants import (
    KEY_OFFSET,
    KEY_RECORDS,
    PARAM_FIELDS,
    PARAM_FORMULA,
    PARAM_OFFSET,
    PARAM_PAGE_SIZE,
    PARAM_SORT_DIRECTION,
    PARAM_SORT_FIELD,
    PARAM_VIEW,
)
from ..core._error_codes import INVALID_PAGE
from ..core.errors import MalformedPayloadError
from ..core.transport import Transport
from ..models.page import Page
from ..models.query_builder import QueryDescriptor
from ._payload import check_status, decode_entry

_log = logging.getLogger(__name__)


def serialize_query(descriptor: QueryDescriptor, cursor: Optional[str] = None) -> List[Tuple[str, str]]:
    """
    Translate a descriptor and cursor into ordered query parameters.

    Sort keys become ``sort[i][field]`` / ``sort[i][direction]`` pairs in
    precedence order; the formula is passed through unchanged.

    Example::

        serialize_query(QueryDescriptor(view="To Learn", sort=(SortKey("Next", SortDirection.DESCENDING),)))
        # [("view", "To Learn"), ("sort[0][field]", "Next"), ("sort[0][direction]", "desc")]
    """
    params: List[Tuple[str, str]] = []
    if descriptor.view is not None:
        params.append((PARAM_VIEW, descriptor.view))
    for i, key in enumerate(descriptor.sort):
        params.append((PARAM_SORT_FIELD.format(index=i), key.field))
        params.append((PARAM_SORT_DIRECTION.format(index=i), key.direction.value))
    if descriptor.formula is not None:
        params.append((PARAM_FORMULA, descriptor.formula))
    for name in descriptor.fields:
        params.append((PARAM_FIELDS, name))
    if descriptor.page_size is not None:
        params.append((PARAM_PAGE_SIZE, str(int(descriptor.page_size))))
    if cursor:
        params.append((PARAM_OFFSET, cursor))
    return params


class PageFetcher:
    """
    Issues exactly one list request per :meth:`fetch` call.

    No retries happen here; a throttled request surfaces as a
    :class:`~airtable_sdk.core.errors.RemoteRejectedError` with status 429.

    :param transport: Collaborator performing the HTTP round-trip.
    :param path: Quoted ``"{base}/{table}"`` path of the table.
    """

    def __init__(self, transport: Transport, path: str) -> None:
        self._transport = transport
        self._path = path

    def fetch(self, descriptor: QueryDescriptor, cursor: Optional[str] = None) -> Page:
        """
        Fetch one page.

        :param descriptor: Query to run.
        :param cursor: ``next_cursor`` of the previous page of the same query, if any.
        :return: Decoded page. Broken elements are kept as entries carrying an error.
        :raises TransportError: If the transport failed.
        :raises RemoteRejectedError: If the store answered with an error status.
        :raises MalformedPayloadError: If the page envelope is not as expected.
        """
        response = self._transport.send("GET", self._path, serialize_query(descriptor, cursor), None)
        check_status(response, "list records")

        payload = response.payload
        if not isinstance(payload, dict):
            raise MalformedPayloadError(
                f"list response must be an object, got {type(payload).__name__}", subcode=INVALID_PAGE
            )
        records = payload.get(KEY_RECORDS)
        if not isinstance(records, list):
            raise MalformedPayloadError("list response has no records array", subcode=INVALID_PAGE)
        next_cursor = payload.get(KEY_OFFSET)
        if next_cursor is not None and not isinstance(next_cursor, str):
            raise MalformedPayloadError(
                f"offset must be a string, got {type(next_cursor).__name__}", subcode=INVALID_PAGE
            )

        entries = [decode_entry(item) for item in records]
        _log.debug(
            "fetched %d records from %s (cursor=%r, next=%r)", len(entries), self._path, cursor, next_cursor
        )
        return Page(entries=entries, next_cursor=next_cursor or None)


__all__ = ["PageFetcher", "serialize_query"]
