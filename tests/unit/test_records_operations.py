# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import unittest

from airtable_sdk.core.errors import (
    MalformedPayloadError,
    MissingIdError,
    NotFoundError,
    RecordMappingError,
    RemoteRejectedError,
    ValidationError,
)
from airtable_sdk.data._paging import PagingIterator
from airtable_sdk.models.query_builder import QueryBuilder, QueryDescriptor
from airtable_sdk.models.record import DynamicRecord
from airtable_sdk.operations.table import TableClient
from tests.unit.test_helpers import FakeTransport, Word, error_json, page_json, record_json

BASE = "appTESTBASE000001"


class TestTableClient(unittest.TestCase):
    """Unit tests for record operations on a single table."""

    def _table(self, *responses, record_type=Word, **kwargs):
        self.transport = FakeTransport(responses)
        return TableClient(self.transport, BASE, "Words", record_type, **kwargs)

    # ---------------------------------------------------------------- construction

    def test_requires_base_and_table(self):
        with self.assertRaises(ValueError):
            TableClient(FakeTransport(), "", "Words")
        with self.assertRaises(ValueError):
            TableClient(FakeTransport(), BASE, "")

    def test_table_name_is_quoted(self):
        table = TableClient(FakeTransport([(200, page_json([]))]), BASE, "Word List/2024")
        list(table.query())
        self.assertEqual(table._transport.calls[0].path, f"{BASE}/Word%20List%2F2024")

    def test_default_record_type(self):
        self.assertIs(TableClient(FakeTransport(), BASE, "Words").record_type, DynamicRecord)

    # ---------------------------------------------------------------- query

    def test_query_returns_bound_builder(self):
        table = self._table()
        qb = table.query()
        self.assertIsInstance(qb, QueryBuilder)
        self.assertEqual(qb.table, "Words")
        self.assertEqual(self.transport.calls, [])

    def test_execute_is_lazy(self):
        table = self._table((200, page_json([record_json("rec1", Word="a")])))
        it = table.query().view("To Learn").execute()
        self.assertIsInstance(it, PagingIterator)
        self.assertEqual(self.transport.calls, [])
        self.assertEqual([w.word for w in it], ["a"])
        self.assertEqual(self.transport.calls[0].params, [("view", "To Learn")])

    def test_builder_reuse_after_execute_does_not_alias(self):
        table = self._table((200, page_json([])))
        qb = table.query().sort("Google")
        it = qb.execute()
        qb.sort("Next")
        list(it)
        self.assertEqual(
            self.transport.calls[0].params,
            [("sort[0][field]", "Google"), ("sort[0][direction]", "asc")],
        )

    def test_default_page_size_applied(self):
        table = self._table((200, page_json([])), default_page_size=25)
        list(table.query())
        self.assertEqual(self.transport.calls[0].params, [("pageSize", "25")])

    def test_explicit_page_size_wins(self):
        table = self._table((200, page_json([])), default_page_size=25)
        list(table.query().page_size(5))
        self.assertEqual(self.transport.calls[0].params, [("pageSize", "5")])

    def test_iterate_restarts_from_descriptor(self):
        table = self._table(
            (200, page_json([record_json("rec1", Word="a")])),
            (200, page_json([record_json("rec1", Word="a")])),
        )
        descriptor = QueryDescriptor(view="v")
        self.assertEqual(len(list(table.iterate(descriptor))), 1)
        self.assertEqual(len(list(table.iterate(descriptor))), 1)
        self.assertEqual(self.transport.calls[0].params, self.transport.calls[1].params)

    # ---------------------------------------------------------------- find

    def test_find(self):
        table = self._table((200, record_json("rec1", Word="lurid", Google=6870000, Next=True)))
        word = table.find("rec1")
        self.assertEqual(word, Word(word="lurid", google=6870000, next=True))
        self.assertEqual(word.record_id, "rec1")
        self.assertEqual(self.transport.calls[0].method, "GET")
        self.assertEqual(self.transport.calls[0].path, f"{BASE}/Words/rec1")

    def test_find_not_found(self):
        table = self._table((404, error_json("NOT_FOUND")))
        with self.assertRaises(NotFoundError) as ctx:
            table.find("recMISSING")
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.details["record_id"], "recMISSING")
        self.assertEqual(ctx.exception.error_type, "NOT_FOUND")

    def test_find_not_found_is_remote_rejected(self):
        self.assertTrue(issubclass(NotFoundError, RemoteRejectedError))

    def test_find_forbidden(self):
        table = self._table((403, error_json("INVALID_PERMISSIONS", "You are not permitted")))
        with self.assertRaises(RemoteRejectedError) as ctx:
            table.find("rec1")
        self.assertNotIsInstance(ctx.exception, NotFoundError)
        self.assertEqual(ctx.exception.status_code, 403)

    def test_find_malformed(self):
        table = self._table((200, {"fields": {"Word": "a"}}))
        with self.assertRaises(MalformedPayloadError):
            table.find("rec1")

    def test_find_mapping_failure(self):
        table = self._table((200, record_json("rec1", Word=42)))
        with self.assertRaises(RecordMappingError) as ctx:
            table.find("rec1")
        self.assertEqual(ctx.exception.details["id"], "rec1")

    def test_find_empty_id(self):
        table = self._table()
        with self.assertRaises(MissingIdError):
            table.find("")
        self.assertEqual(self.transport.calls, [])

    # ---------------------------------------------------------------- create

    def test_create_returns_new_record_with_id(self):
        table = self._table((200, record_json("recNEW", Word="lurid", Google=6870000, Next=True)))
        word = Word(word="lurid", google=6870000, next=True)

        created = table.create(word)

        call = self.transport.calls[0]
        self.assertEqual(call.method, "POST")
        self.assertEqual(call.path, f"{BASE}/Words")
        self.assertEqual(call.body, {"fields": {"Word": "lurid", "Google": 6870000, "Next": True}})
        self.assertEqual(created.record_id, "recNEW")
        self.assertEqual(word.record_id, "")
        self.assertIsNot(created, word)

    def test_create_ignores_existing_id(self):
        table = self._table((200, record_json("recNEW", Word="a")))
        word = Word(word="a")
        word.assign_id("recOLD")
        created = table.create(word)
        self.assertNotIn("id", self.transport.calls[0].body)
        self.assertEqual(created.record_id, "recNEW")
        self.assertEqual(word.record_id, "recOLD")

    def test_create_rejected(self):
        table = self._table((422, error_json("INVALID_VALUE_FOR_COLUMN", "Field Google cannot accept 'x'")))
        with self.assertRaises(RemoteRejectedError) as ctx:
            table.create(DynamicRecord(fields={"Google": "x"}))
        self.assertEqual(ctx.exception.error_type, "INVALID_VALUE_FOR_COLUMN")

    def test_create_unsupported_value(self):
        table = self._table()
        with self.assertRaises(ValidationError):
            table.create(DynamicRecord(fields={"Photo": {"url": "x"}}))
        self.assertEqual(self.transport.calls, [])

    # ---------------------------------------------------------------- update

    def test_update_without_id_sends_nothing(self):
        table = self._table()
        with self.assertRaises(MissingIdError):
            table.update(Word(word="a"))
        self.assertEqual(self.transport.calls, [])

    def test_update_sends_patch_with_fields(self):
        table = self._table((200, record_json("rec1", Word="a", Google=1, Next=False)))
        word = Word(word="a", google=1)
        word.assign_id("rec1")

        updated = table.update(word)

        call = self.transport.calls[0]
        self.assertEqual(call.method, "PATCH")
        self.assertEqual(call.path, f"{BASE}/Words/rec1")
        self.assertEqual(call.body, {"fields": {"Word": "a", "Google": 1, "Next": False}})
        self.assertEqual(updated.record_id, "rec1")

    def test_update_partial_fields(self):
        """Only the fields carried by the record are sent."""
        table = self._table((200, record_json("rec1", Name="Contoso", Status="Done")), record_type=DynamicRecord)
        record = DynamicRecord(fields={"Status": "Done"})
        record.assign_id("rec1")

        updated = table.update(record)

        self.assertEqual(self.transport.calls[0].body, {"fields": {"Status": "Done"}})
        self.assertEqual(updated["Name"], "Contoso")

    # ---------------------------------------------------------------- delete

    def test_delete(self):
        table = self._table((200, {"id": "rec1", "deleted": True}))
        self.assertIsNone(table.delete("rec1"))
        self.assertEqual(self.transport.calls[0].method, "DELETE")
        self.assertEqual(self.transport.calls[0].path, f"{BASE}/Words/rec1")

    def test_delete_twice(self):
        table = self._table(
            (200, {"id": "rec1", "deleted": True}),
            (404, error_json("NOT_FOUND")),
        )
        table.delete("rec1")
        with self.assertRaises(RemoteRejectedError) as ctx:
            table.delete("rec1")
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(len(self.transport.calls), 2)

    def test_delete_empty_id(self):
        table = self._table()
        with self.assertRaises(MissingIdError):
            table.delete("")
        self.assertEqual(self.transport.calls, [])

    def test_delete_non_str_id(self):
        with self.assertRaises(TypeError):
            self._table().delete(None)


if __name__ == "__main__":
    unittest.main()
