# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""One page of a list-records response."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from ..core.errors import MalformedPayloadError
from .fields import FieldSet
from .record import RecordId


@dataclass(frozen=True)
class PageEntry:
    """
    One element of a page.

    A structurally broken element keeps its position in the page and carries
    the error instead of an id and fields, so that it fails on its own when
    consumed.

    :param record_id: Store-assigned id.
    :param fields: Field values of the record.
    :param created_time: ISO timestamp of creation, when the store sent one.
    :param error: Decode failure for this element, if any.
    """

    record_id: RecordId = ""
    fields: FieldSet = field(default_factory=dict)
    created_time: Optional[str] = None
    error: Optional[MalformedPayloadError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Page:
    """
    Records from one round-trip plus the cursor to the next page.

    ``next_cursor`` is only valid together with the query that produced it.
    """

    entries: List[PageEntry] = field(default_factory=list)
    next_cursor: Optional[str] = None

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def has_more(self) -> bool:
        return bool(self.next_cursor)


__all__ = ["PageEntry", "Page"]
