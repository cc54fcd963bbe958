# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Field set: the wire representation of one record's values.

A field set maps remote field names to values drawn from a closed union:
``str``, ``int``, ``float``, ``bool``, ``list[str]`` or ``None`` (absent).
The record id never appears inside a field set.
"""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Union

from ..core._error_codes import INVALID_FIELD_VALUE
from ..core.errors import MalformedPayloadError

FieldValue = Union[str, int, float, bool, List[str], None]
FieldSet = Dict[str, FieldValue]


def is_field_value(value: Any) -> bool:
    """Return True when ``value`` belongs to the :data:`FieldValue` union."""
    if value is None or isinstance(value, (str, bool, int, float)):
        return True
    if isinstance(value, list):
        return all(isinstance(item, str) for item in value)
    return False


def decode_fieldset(raw: Any) -> FieldSet:
    """
    Validate a decoded JSON object as a field set.

    :param raw: The ``fields`` object of a record payload.
    :return: A new dict holding the same keys and values.
    :raises MalformedPayloadError: If ``raw`` is not an object or a value is outside the union.
    """
    if not isinstance(raw, Mapping):
        raise MalformedPayloadError(
            f"record fields must be an object, got {type(raw).__name__}",
            subcode=INVALID_FIELD_VALUE,
        )
    fields: FieldSet = {}
    for name, value in raw.items():
        if not isinstance(name, str):
            raise MalformedPayloadError(f"field name must be a string, got {name!r}", subcode=INVALID_FIELD_VALUE)
        if not is_field_value(value):
            raise MalformedPayloadError(
                f"unsupported value for field {name!r}: {type(value).__name__}",
                subcode=INVALID_FIELD_VALUE,
                details={"field": name},
            )
        fields[name] = list(value) if isinstance(value, list) else value
    return fields


def encode_fieldset(fields: Mapping[str, FieldValue]) -> FieldSet:
    """Drop absent values and copy lists, producing the body of a write request."""
    return {name: (list(value) if isinstance(value, list) else value) for name, value in fields.items() if value is not None}


__all__ = ["FieldValue", "FieldSet", "is_field_value", "decode_fieldset", "encode_fieldset"]
