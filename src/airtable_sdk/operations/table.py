# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Record operations bound to one table."""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Generic, Optional, Type, TypeVar
from urllib.parse import quote

from ..common.constants import KEY_FIELDS
from ..core._error_codes import INVALID_FIELD_VALUE
from ..core.errors import MissingIdError, NotFoundError, ValidationError
from ..core.transport import Transport, TransportResponse
from ..data._fetcher import PageFetcher
from ..data._paging import PagingIterator
from ..data._payload import check_status, decode_record, map_record
from ..models.fields import FieldSet, encode_fieldset, is_field_value
from ..models.query_builder import QueryBuilder, QueryDescriptor
from ..models.record import DynamicRecord, RecordProtocol

_log = logging.getLogger(__name__)

R = TypeVar("R", bound=RecordProtocol)


class TableClient(Generic[R]):
    """
    Query and write records of one table.

    Accessed via ``client.table(base_id, table_name, record_type)``. Instances
    keep no record state; every call is one request (or, for queries, one
    request per page consumed). Not safe for concurrent use.

    :param transport: Collaborator performing HTTP round-trips.
    :type transport: ~airtable_sdk.core.transport.Transport
    :param base_id: Base id, e.g. ``"appXXXXXXXXXXXXXX"``.
    :type base_id: str
    :param table_name: Table name or id.
    :type table_name: str
    :param record_type: Class implementing
        :class:`~airtable_sdk.models.record.RecordProtocol`. Defaults to
        :class:`~airtable_sdk.models.record.DynamicRecord`.
    :param default_page_size: Page size used by queries that do not set one.
    :type default_page_size: int or None

    Example:
        Query, update and create::

            words = client.table("appXXXXXXXXXXXXXX", "Words", Word)

            for word in words.query().view("To Learn").sort("Google", "desc"):
                print(word.word, word.google)

            word = words.find("recXXXXXXXXXXXXXX")
            word.next = not word.next
            words.update(word)

            created = words.create(Word(word="lurid", google=6870000, next=True))
            print(created.record_id)
    """

    def __init__(
        self,
        transport: Transport,
        base_id: str,
        table_name: str,
        record_type: Type[R] = DynamicRecord,  # type: ignore[assignment]
        *,
        default_page_size: Optional[int] = None,
    ) -> None:
        if not base_id:
            raise ValueError("base_id is required.")
        if not table_name:
            raise ValueError("table_name is required.")
        self._transport = transport
        self.base_id = base_id
        self.table_name = table_name
        self.record_type = record_type
        self.default_page_size = default_page_size
        self._path = f"{quote(base_id, safe='')}/{quote(table_name, safe='')}"
        self._fetcher = PageFetcher(transport, self._path)

    # ------------------------------------------------------------------ query

    def query(self) -> QueryBuilder:
        """
        Start a query over all records of the table.

        :return: Builder bound to this table; iterate it to run the query.
        :rtype: ~airtable_sdk.models.query_builder.QueryBuilder
        """
        return QueryBuilder(self.table_name, _table_client=self)

    def iterate(self, descriptor: QueryDescriptor) -> PagingIterator[R]:
        """
        Run a query snapshot.

        :param descriptor: Query to run. Its page size falls back to ``default_page_size``.
        :return: New lazy iterator; no request is made until the first ``next()``.
        """
        if descriptor.page_size is None and self.default_page_size is not None:
            descriptor = dataclasses.replace(descriptor, page_size=self.default_page_size)
        return PagingIterator(self._fetcher, descriptor, self.record_type)

    # ------------------------------------------------------------------ records

    def find(self, record_id: str) -> R:
        """
        Fetch one record by id.

        :param record_id: Store-assigned record id.
        :type record_id: str
        :return: The mapped record.
        :raises NotFoundError: If the store has no such record.
        :raises MalformedPayloadError: If the response cannot be decoded or mapped.
        :raises RemoteRejectedError: For any other error status.
        """
        response = self._transport.send("GET", self._record_path(record_id), (), None)
        if response.status_code == 404:
            check_status(response, f"find {record_id}", NotFoundError, record_id=record_id)
        check_status(response, f"find {record_id}")
        return self._decode(response)

    def create(self, record: R) -> R:
        """
        Create a record from ``record``'s fields.

        Any id already on ``record`` is ignored and ``record`` is not modified.

        :param record: Record to send.
        :return: A new record carrying the id assigned by the store.
        :raises RemoteRejectedError: If the store refused the record.
        """
        response = self._transport.send("POST", self._path, (), {KEY_FIELDS: self._outgoing_fields(record)})
        check_status(response, "create record")
        created = self._decode(response)
        _log.debug("created record %s in %s", created.record_id, self._path)
        return created

    def update(self, record: R) -> R:
        """
        Send ``record``'s fields to the existing record with the same id.

        Only the fields present in ``record.to_fields()`` are changed.

        :param record: Record carrying a store-assigned id.
        :return: The store's view of the record after the update.
        :raises MissingIdError: If ``record`` has no id; nothing is sent.
        :raises RemoteRejectedError: If the store refused the update.
        """
        record_id = record.record_id
        if not record_id:
            raise MissingIdError()
        response = self._transport.send(
            "PATCH", self._record_path(record_id), (), {KEY_FIELDS: self._outgoing_fields(record)}
        )
        check_status(response, f"update {record_id}")
        return self._decode(response)

    def delete(self, record_id: str) -> None:
        """
        Delete a record by id.

        Deleting an id that no longer exists is reported by the store and
        raised unchanged.

        :param record_id: Store-assigned record id.
        :type record_id: str
        :raises MissingIdError: If ``record_id`` is empty; nothing is sent.
        :raises RemoteRejectedError: If the store refused the deletion.
        """
        response = self._transport.send("DELETE", self._record_path(record_id), (), None)
        check_status(response, f"delete {record_id}")
        _log.debug("deleted record %s from %s", record_id, self._path)

    # ------------------------------------------------------------------ helpers

    def _record_path(self, record_id: Any) -> str:
        if not isinstance(record_id, str):
            raise TypeError("record_id must be str")
        if not record_id:
            raise MissingIdError()
        return f"{self._path}/{quote(record_id, safe='')}"

    @staticmethod
    def _outgoing_fields(record: R) -> FieldSet:
        fields = encode_fieldset(record.to_fields())
        for name, value in fields.items():
            if not is_field_value(value):
                raise ValidationError(
                    f"field {name!r} has unsupported type {type(value).__name__}",
                    subcode=INVALID_FIELD_VALUE,
                    details={"field": name},
                )
        return fields

    def _decode(self, response: TransportResponse) -> R:
        record_id, fields, _ = decode_record(response.payload)
        return map_record(self.record_type, record_id, fields)


__all__ = ["TableClient"]
