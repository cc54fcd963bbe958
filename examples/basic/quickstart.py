# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

import os
import sys
from dataclasses import dataclass
from pathlib import Path

# Add src to PYTHONPATH for local runs
sys.path.append(str(Path(__file__).resolve().parents[2] / "src"))

from airtable_sdk import (
    AirtableClient,
    AirtableConfig,
    MalformedPayloadError,
    RemoteRejectedError,
    SortDirection,
    TableRecord,
    TelemetryConfig,
    column,
)


@dataclass
class Word(TableRecord):
    word: str = column("Word")
    google: int = column("Google", default=0)
    next: bool = column("Next", default=False)


api_key = os.environ.get("AIRTABLE_KEY") or input("Enter Airtable personal access token: ").strip()
base_id = os.environ.get("AIRTABLE_BASE") or input("Enter base id (e.g. appXXXXXXXXXXXXXX): ").strip()
if not api_key or not base_id:
    print("Token and base id are required; exiting.")
    sys.exit(1)

table_name = input("Table name [Words]: ").strip() or "Words"
view_name = input("View to list (blank for all records): ").strip() or None
delete_choice = input("Delete the sample record at end? (Y/n): ").strip() or "y"
delete_at_end = str(delete_choice).lower() in ("y", "yes", "true", "1")

config = AirtableConfig(telemetry=TelemetryConfig(enable_logging=True, log_level="INFO"))


def log_call(call: str) -> None:
    print({"call": call})


with AirtableClient(api_key, config) as client:
    words = client.table(base_id, table_name, Word)

    # 1) Query with view, sort and a filter formula
    print("Query:")
    query = words.query().sort("Next", SortDirection.DESCENDING).sort("Google", SortDirection.DESCENDING)
    if view_name:
        query = query.view(view_name)
    log_call(f"{table_name}.query()" + (f".view({view_name!r})" if view_name else "") + ".sort(...)")
    it = query.page_size(10).execute()
    count = 0
    while True:
        try:
            word = next(it)
        except MalformedPayloadError as exc:
            print({"skipped": str(exc)})
            continue
        except StopIteration:
            break
        count += 1
        print({"id": word.record_id, "word": word.word, "google": word.google, "next": word.next})
    print({"records": count, "pages": it.fetch_count})

    # 2) Create
    print("Create:")
    log_call(f"{table_name}.create(Word(word='lurid', ...))")
    created = words.create(Word(word="lurid", google=6870000, next=True))
    print({"created": created.record_id})

    # 3) Read back
    print("Find:")
    found = words.find(created.record_id)
    print({"found": found.record_id, "word": found.word})

    # 4) Update
    print("Update:")
    found.next = False
    updated = words.update(found)
    print({"updated": updated.record_id, "next": updated.next})

    # 5) Delete
    if delete_at_end:
        print("Delete:")
        words.delete(created.record_id)
        try:
            words.find(created.record_id)
        except RemoteRejectedError as exc:
            print({"deleted": created.record_id, "status": exc.status_code})
