# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Internal pandas helpers"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List

import pandas as pd

from ..models.record import RecordProtocol


def records_to_dataframe(records: Iterable[RecordProtocol], id_column: str = "id") -> pd.DataFrame:
    """Build a DataFrame with one row per record, keyed by remote field names.

    Rows hold the values as decoded, so read-only (computed) columns are kept.
    Record types without ``field_values()`` fall back to ``to_fields()``.

    :param records: Records to convert; consumed once.
    :param id_column: Name of the column holding the record id.
    :raises MalformedPayloadError: Propagated from ``records``; rows collected so far are discarded.
    """
    rows: List[Dict[str, Any]] = []
    for record in records:
        row: Dict[str, Any] = {id_column: record.record_id}
        values = getattr(record, "field_values", None)
        row.update(values() if callable(values) else record.to_fields())
        rows.append(row)
    return pd.DataFrame(rows)
