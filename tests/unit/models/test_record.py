# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Unit tests for record types and the record capability."""

import unittest
from dataclasses import dataclass
from typing import List, Optional

from airtable_sdk.core.errors import MalformedPayloadError, RecordMappingError
from airtable_sdk.models.record import DynamicRecord, RecordProtocol, TableRecord, column
from tests.unit.test_helpers import Book, Word


@dataclass(frozen=True)
class FrozenTag(TableRecord):
    name: str = column("Name")


class TestTableRecordRoundTrip(unittest.TestCase):
    """FieldSet round-trips for the supported field types."""

    def test_round_trip_str_int_bool(self):
        word = Word(word="lurid", google=6870000, next=True)
        again = Word.from_fields(word.to_fields())
        self.assertEqual(again, word)

    def test_round_trip_false_and_zero(self):
        word = Word(word="quiet", google=0, next=False)
        self.assertEqual(Word.from_fields(word.to_fields()), word)

    def test_round_trip_list_and_float(self):
        book = Book(title="Dune", tags=["scifi", "classic"], rating=4.5, pages=412)
        again = Book.from_fields(book.to_fields())
        self.assertEqual(again.title, "Dune")
        self.assertEqual(again.tags, ["scifi", "classic"])
        self.assertEqual(again.rating, 4.5)
        self.assertEqual(again.pages, 412)

    def test_to_fields_uses_remote_names(self):
        self.assertEqual(
            Word(word="lurid", google=6870000, next=True).to_fields(),
            {"Word": "lurid", "Google": 6870000, "Next": True},
        )

    def test_to_fields_excludes_id(self):
        word = Word(word="lurid")
        word.assign_id("rec1")
        self.assertNotIn("id", word.to_fields())
        self.assertEqual(set(word.to_fields()), {"Word", "Google", "Next"})

    def test_to_fields_skips_none_and_read_only(self):
        book = Book(title="Dune", rating=None, summary="computed")
        fields = book.to_fields()
        self.assertNotIn("Rating", fields)
        self.assertNotIn("Summary", fields)
        self.assertEqual(fields["Title"], "Dune")

    def test_read_only_column_is_decoded(self):
        book = Book.from_fields({"Title": "Dune", "Summary": "Sand."})
        self.assertEqual(book.summary, "Sand.")

    def test_field_values_include_read_only_and_none(self):
        book = Book.from_fields({"Title": "Dune", "Summary": "Sand."})
        self.assertEqual(
            book.field_values(),
            {"Title": "Dune", "Tags": [], "Rating": None, "Summary": "Sand.", "pages": 0},
        )
        self.assertNotIn("Summary", book.to_fields())


class TestTableRecordDecoding(unittest.TestCase):
    def test_missing_optional_fields_use_defaults(self):
        """The store omits empty fields; defaults fill them."""
        word = Word.from_fields({"Word": "lurid"})
        self.assertEqual(word.google, 0)
        self.assertFalse(word.next)

    def test_missing_required_field(self):
        with self.assertRaises(RecordMappingError) as ctx:
            Word.from_fields({"Google": 5})
        self.assertEqual(ctx.exception.details["field"], "Word")
        self.assertEqual(ctx.exception.subcode, "missing_field")

    def test_integral_float_becomes_int(self):
        self.assertEqual(Word.from_fields({"Word": "a", "Google": 12.0}).google, 12)

    def test_fractional_float_for_int_rejected(self):
        with self.assertRaises(RecordMappingError):
            Word.from_fields({"Word": "a", "Google": 1.5})

    def test_bool_for_int_rejected(self):
        with self.assertRaises(RecordMappingError):
            Word.from_fields({"Word": "a", "Google": True})

    def test_string_for_bool_rejected(self):
        with self.assertRaises(RecordMappingError) as ctx:
            Word.from_fields({"Word": "a", "Next": "yes"})
        self.assertEqual(ctx.exception.subcode, "field_type_mismatch")

    def test_int_for_float_accepted(self):
        self.assertEqual(Book.from_fields({"Title": "x", "Rating": 4}).rating, 4.0)

    def test_mapping_error_is_malformed(self):
        self.assertTrue(issubclass(RecordMappingError, MalformedPayloadError))

    def test_unknown_remote_fields_ignored(self):
        word = Word.from_fields({"Word": "a", "Source": "Harry Potter"})
        self.assertEqual(word.word, "a")

    def test_optional_without_default(self):
        @dataclass
        class Note(TableRecord):
            body: Optional[str] = column("Body")
            labels: Optional[List[str]] = column("Labels", default=None)

        note = Note.from_fields({})
        self.assertIsNone(note.body)
        self.assertIsNone(note.labels)

    def test_non_dataclass_rejected(self):
        class NotADataclass(TableRecord):
            pass

        with self.assertRaises(TypeError):
            NotADataclass.from_fields({})


class TestRecordIdentity(unittest.TestCase):
    def test_new_record_has_empty_id(self):
        self.assertEqual(Word(word="a").record_id, "")

    def test_assign_once(self):
        word = Word(word="a")
        word.assign_id("rec1")
        self.assertEqual(word.record_id, "rec1")

    def test_reassign_same_id_is_noop(self):
        word = Word(word="a")
        word.assign_id("rec1")
        word.assign_id("rec1")
        self.assertEqual(word.record_id, "rec1")

    def test_reassign_different_id_rejected(self):
        word = Word(word="a")
        word.assign_id("rec1")
        with self.assertRaises(ValueError):
            word.assign_id("rec2")
        self.assertEqual(word.record_id, "rec1")

    def test_id_not_part_of_equality(self):
        a = Word(word="a")
        b = Word(word="a")
        a.assign_id("rec1")
        self.assertEqual(a, b)

    def test_frozen_dataclass_accepts_id(self):
        tag = FrozenTag.from_fields({"Name": "urgent"})
        tag.assign_id("recTag")
        self.assertEqual(tag.record_id, "recTag")

    def test_non_str_id_rejected(self):
        with self.assertRaises(TypeError):
            Word(word="a").assign_id(123)

    def test_protocol_conformance(self):
        self.assertIsInstance(Word(word="a"), RecordProtocol)
        self.assertIsInstance(DynamicRecord(), RecordProtocol)


class TestDynamicRecord(unittest.TestCase):
    def test_dict_like_access(self):
        record = DynamicRecord.from_fields({"Name": "Contoso", "Count": 3})
        self.assertEqual(record["Name"], "Contoso")
        self.assertIn("Count", record)
        self.assertEqual(len(record), 2)
        self.assertEqual(sorted(record), ["Count", "Name"])
        record["Name"] = "Fabrikam"
        del record["Count"]
        self.assertEqual(dict(record.items()), {"Name": "Fabrikam"})
        self.assertIsNone(record.get("Missing"))

    def test_from_fields_copies(self):
        fields = {"Name": "Contoso"}
        record = DynamicRecord.from_fields(fields)
        fields["Name"] = "changed"
        self.assertEqual(record["Name"], "Contoso")

    def test_to_fields_drops_none(self):
        record = DynamicRecord(fields={"Name": "Contoso", "Notes": None})
        self.assertEqual(record.to_fields(), {"Name": "Contoso"})

    def test_to_full_dict(self):
        record = DynamicRecord.from_fields({"Name": "Contoso"})
        record.assign_id("rec9")
        self.assertEqual(record.to_full_dict(), {"id": "rec9", "fields": {"Name": "Contoso"}})


if __name__ == "__main__":
    unittest.main()
