# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Record, field set, page and query models."""

from .fields import FieldSet, FieldValue
from .page import Page, PageEntry
from .query_builder import QueryBuilder, QueryDescriptor, SortDirection, SortKey
from .record import DynamicRecord, RecordId, RecordProtocol, TableRecord, column

__all__ = [
    "FieldSet",
    "FieldValue",
    "Page",
    "PageEntry",
    "QueryBuilder",
    "QueryDescriptor",
    "SortDirection",
    "SortKey",
    "DynamicRecord",
    "RecordId",
    "RecordProtocol",
    "TableRecord",
    "column",
]
