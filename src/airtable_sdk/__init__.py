# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Typed client for the Airtable Web API.

Define a record type, open a table, and iterate queries without writing
pagination loops::

    from dataclasses import dataclass
    from airtable_sdk import AirtableClient, SortDirection, TableRecord, column

    @dataclass
    class Word(TableRecord):
        word: str = column("Word")
        google: int = column("Google", default=0)
        next: bool = column("Next", default=False)

    with AirtableClient(api_key) as client:
        words = client.table(base_id, "Words", Word)
        for word in words.query().view("To Learn").sort("Google", SortDirection.DESCENDING):
            print(word.word)
"""

from .client import AirtableClient, new
from .core.config import AirtableConfig
from .core.errors import (
    AirtableError,
    MalformedPayloadError,
    MissingIdError,
    NotFoundError,
    RecordMappingError,
    RemoteRejectedError,
    TransportError,
    ValidationError,
)
from .core.telemetry import TelemetryConfig
from .core.transport import RequestsTransport, Transport, TransportResponse
from .data import IteratorState, PagingIterator
from .models import (
    DynamicRecord,
    FieldSet,
    FieldValue,
    QueryBuilder,
    QueryDescriptor,
    RecordProtocol,
    SortDirection,
    SortKey,
    TableRecord,
    column,
)
from .operations import TableClient

__version__ = "0.1.0"

__all__ = [
    "AirtableClient",
    "new",
    "AirtableConfig",
    "TelemetryConfig",
    "Transport",
    "TransportResponse",
    "RequestsTransport",
    "TableClient",
    "QueryBuilder",
    "QueryDescriptor",
    "SortDirection",
    "SortKey",
    "PagingIterator",
    "IteratorState",
    "RecordProtocol",
    "TableRecord",
    "DynamicRecord",
    "column",
    "FieldSet",
    "FieldValue",
    "AirtableError",
    "TransportError",
    "RemoteRejectedError",
    "NotFoundError",
    "MalformedPayloadError",
    "RecordMappingError",
    "ValidationError",
    "MissingIdError",
]
