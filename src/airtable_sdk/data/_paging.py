# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Lazy record iteration across cursor-paginated list responses.

:class:`PagingIterator` is an explicit state machine rather than a generator
so that one bad record can raise without ending the iteration:

- ``IDLE``: created, nothing fetched yet.
- ``FETCHING``: the next ``next()`` call requests a page with the stored cursor.
- ``DRAINING``: records of the current page are handed out one per call.
- ``EXHAUSTED``: terminal; after a fetch failure too.
"""

from __future__ import annotations

import logging
from collections import deque
from enum import Enum
from typing import Any, Deque, Generic, Optional, Type, TypeVar

from ..core._error_codes import INVALID_PAGE
from ..core.errors import MalformedPayloadError
from ..models.page import PageEntry
from ..models.query_builder import QueryDescriptor
from ..models.record import RecordProtocol
from ._fetcher import PageFetcher
from ._payload import map_record

_log = logging.getLogger(__name__)

R = TypeVar("R", bound=RecordProtocol)


class IteratorState(Enum):
    IDLE = "idle"
    FETCHING = "fetching"
    DRAINING = "draining"
    EXHAUSTED = "exhausted"


class PagingIterator(Generic[R]):
    """
    Forward-only iterator over the records of one query run.

    Pages are requested only when the previous page has been consumed and the
    caller asks for another element; nothing is fetched ahead. A fetch failure
    is raised from the ``next()`` call that triggered it and ends the
    iteration; build a new iterator from the same query to start over. A
    record that cannot be decoded or mapped raises
    :class:`~airtable_sdk.core.errors.MalformedPayloadError` (or its subclass
    :class:`~airtable_sdk.core.errors.RecordMappingError`) for that element
    only; calling ``next()`` again continues with the following record.

    :param fetcher: Page source for the table.
    :param descriptor: Query snapshot to run.
    :param record_type: Class implementing ``RecordProtocol`` used to map field sets.

    Example:
        Skip records that do not fit the schema::

            it = table.query().formula("{Status} = 'Open'").execute()
            while True:
                try:
                    record = next(it)
                except RecordMappingError as exc:
                    log.warning("skipping record: %s", exc)
                    continue
                except StopIteration:
                    break
                handle(record)
    """

    def __init__(self, fetcher: PageFetcher, descriptor: QueryDescriptor, record_type: Type[R]) -> None:
        self._fetcher = fetcher
        self._descriptor = descriptor
        self._record_type = record_type
        self._state = IteratorState.IDLE
        self._queue: Deque[PageEntry] = deque()
        self._cursor: Optional[str] = None
        self.fetch_count = 0
        self.error: Optional[Exception] = None

    @property
    def state(self) -> IteratorState:
        return self._state

    @property
    def descriptor(self) -> QueryDescriptor:
        return self._descriptor

    def __iter__(self) -> "PagingIterator[R]":
        return self

    def to_dataframe(self, id_column: str = "id") -> Any:
        """
        Drain the remaining records into a :class:`pandas.DataFrame`.

        Needs the ``pandas`` extra. Columns are the remote field names plus ``id_column``;
        read-only columns are included.

        A record that fails to decode or map raises out of this call and the rows
        collected so far are discarded. To skip such records instead, iterate with
        ``next()`` and build the frame from the records that succeeded.
        """
        from ..utils._pandas import records_to_dataframe

        return records_to_dataframe(self, id_column=id_column)

    def __next__(self) -> R:
        if self._state is IteratorState.IDLE:
            self._state = IteratorState.FETCHING
        while True:
            if self._state is IteratorState.EXHAUSTED:
                raise StopIteration
            if self._state is IteratorState.FETCHING:
                self._fetch_page()
                continue
            if not self._queue:
                self._state = IteratorState.FETCHING if self._cursor else IteratorState.EXHAUSTED
                continue
            entry = self._queue.popleft()
            if not self._queue:
                self._state = IteratorState.FETCHING if self._cursor else IteratorState.EXHAUSTED
            return self._map(entry)

    def _fetch_page(self) -> None:
        previous = self._cursor
        self.fetch_count += 1
        try:
            page = self._fetcher.fetch(self._descriptor, previous)
            if page.next_cursor is not None and page.next_cursor == previous:
                raise MalformedPayloadError(
                    f"store returned the same offset {previous!r} twice", subcode=INVALID_PAGE
                )
        except Exception as exc:
            self._state = IteratorState.EXHAUSTED
            self._queue.clear()
            self.error = exc
            _log.debug("pagination stopped after %d fetches: %s", self.fetch_count, exc)
            raise

        self._cursor = page.next_cursor
        if page.entries:
            self._queue.extend(page.entries)
            self._state = IteratorState.DRAINING
        elif self._cursor is None:
            self._state = IteratorState.EXHAUSTED
        # empty page with a cursor: stay in FETCHING

    def _map(self, entry: PageEntry) -> R:
        if entry.error is not None:
            raise entry.error
        return map_record(self._record_type, entry.record_id, entry.fields)


__all__ = ["IteratorState", "PagingIterator"]
