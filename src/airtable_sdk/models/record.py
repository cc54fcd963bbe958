# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Record capability and the record types shipped with the SDK.

Any class can be used as a table's record type as long as it satisfies
:class:`RecordProtocol`: it exposes its id, accepts an id once, and converts
to and from a :data:`~airtable_sdk.models.fields.FieldSet`. Two
implementations are provided:

- :class:`TableRecord`: a mixin for dataclasses whose attributes are mapped
  onto remote fields with :func:`column`.
- :class:`DynamicRecord`: a schema-less, dict-like record holding whatever
  fields the store returned.
"""

from __future__ import annotations

import dataclasses
from dataclasses import MISSING, dataclass, field
from typing import (
    Any,
    Dict,
    Iterator,
    List,
    Optional,
    Protocol,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
    runtime_checkable,
)

from ..core._error_codes import FIELD_TYPE_MISMATCH, MISSING_FIELD
from ..core.errors import RecordMappingError
from .fields import FieldSet, FieldValue, encode_fieldset

RecordId = str

R = TypeVar("R", bound="RecordProtocol")

_FIELD_NAME = "airtable_field"
_READ_ONLY = "airtable_read_only"


@runtime_checkable
class RecordProtocol(Protocol):
    """
    Contract every record type must satisfy.

    ``record_id`` is the empty string until the store assigns one.
    ``assign_id`` is called by the SDK when a record is decoded from a response;
    implementations must refuse to change an id that is already set.
    """

    @property
    def record_id(self) -> RecordId: ...

    def assign_id(self, record_id: RecordId) -> None: ...

    def to_fields(self) -> FieldSet: ...

    @classmethod
    def from_fields(cls: Type[R], fields: FieldSet) -> R: ...


class _RecordIdentity:
    """Write-once record id storage shared by the shipped record types."""

    _record_id: RecordId = ""

    @property
    def record_id(self) -> RecordId:
        return self._record_id

    def assign_id(self, record_id: RecordId) -> None:
        """
        Attach the store-assigned id.

        :raises ValueError: If the record already carries a different id.
        """
        if not isinstance(record_id, str):
            raise TypeError("record_id must be str")
        current = self._record_id
        if current and current != record_id:
            raise ValueError(f"record already has id {current!r}; ids are immutable")
        # object.__setattr__ so frozen dataclasses can still receive their id
        object.__setattr__(self, "_record_id", record_id)


def column(
    name: Optional[str] = None,
    *,
    default: Any = MISSING,
    default_factory: Any = MISSING,
    read_only: bool = False,
) -> Any:
    """
    Declare a dataclass attribute backed by a remote field.

    :param name: Remote field name; defaults to the attribute name.
    :type name: str or None
    :param default: Value used when the store omits the field.
    :param default_factory: Factory used when the store omits the field.
    :param read_only: Decode the field but never send it (formula, rollup and
        other computed fields).
    :type read_only: bool

    Example::

        @dataclass
        class Word(TableRecord):
            word: str = column("Word")
            google: int = column("Google", default=0)
            next: bool = column("Next", default=False)
            created: Optional[str] = column("Created", default=None, read_only=True)
    """
    return field(
        default=default,
        default_factory=default_factory,
        metadata={_FIELD_NAME: name, _READ_ONLY: read_only},
    )


def _remote_name(f: dataclasses.Field) -> str:
    return f.metadata.get(_FIELD_NAME) or f.name


def _unwrap_optional(annotation: Any) -> Any:
    if get_origin(annotation) is Union:
        args = [a for a in get_args(annotation) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_optional(annotation: Any) -> bool:
    return get_origin(annotation) is Union and type(None) in get_args(annotation)


def _coerce(value: FieldValue, annotation: Any, remote: str) -> Any:
    target = _unwrap_optional(annotation)
    origin = get_origin(target)

    def mismatch() -> RecordMappingError:
        return RecordMappingError(
            f"field {remote!r} holds {type(value).__name__}, expected {getattr(target, '__name__', target)}",
            subcode=FIELD_TYPE_MISMATCH,
            details={"field": remote},
        )

    if target is Any or origin is Union:
        return value
    if target is bool:
        if isinstance(value, bool):
            return value
        raise mismatch()
    if target is int:
        if isinstance(value, bool):
            raise mismatch()
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        raise mismatch()
    if target is float:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return float(value)
        raise mismatch()
    if target is str:
        if isinstance(value, str):
            return value
        raise mismatch()
    if target is list or origin in (list, List):
        if isinstance(value, list):
            return list(value)
        raise mismatch()
    if isinstance(target, type) and not isinstance(value, target):
        raise mismatch()
    return value


class TableRecord(_RecordIdentity):
    """
    Mixin implementing :class:`RecordProtocol` for dataclasses.

    Attributes are matched to remote fields by :func:`column` name (or by
    attribute name). Decoding coerces JSON numbers to the annotated ``int`` or
    ``float``, requires ``bool`` and ``str`` exactly, and fills fields the store
    omitted from their defaults; the store omits empty fields, so give optional
    columns a default. Encoding skips ``None`` values and read-only columns.

    Example::

        @dataclass
        class Word(TableRecord):
            word: str = column("Word")
            google: int = column("Google", default=0)

        word = Word.from_fields({"Word": "lurid", "Google": 6870000})
        word.to_fields()  # {"Word": "lurid", "Google": 6870000}
    """

    @classmethod
    def from_fields(cls, fields: FieldSet) -> Any:
        """
        Build an instance from a field set.

        :raises RecordMappingError: If a field without default is missing or a value
            does not match its annotation.
        """
        if not dataclasses.is_dataclass(cls):
            raise TypeError(f"{cls.__name__} must be a dataclass to use TableRecord")
        hints = get_type_hints(cls)
        kwargs: Dict[str, Any] = {}
        for f in dataclasses.fields(cls):
            if not f.init:
                continue
            remote = _remote_name(f)
            annotation = hints.get(f.name, Any)
            value = fields.get(remote)
            if value is None:
                if f.default is not MISSING or f.default_factory is not MISSING:
                    continue
                if _is_optional(annotation):
                    kwargs[f.name] = None
                    continue
                raise RecordMappingError(
                    f"{cls.__name__} requires field {remote!r}",
                    subcode=MISSING_FIELD,
                    details={"field": remote},
                )
            kwargs[f.name] = _coerce(value, annotation, remote)
        return cls(**kwargs)

    def to_fields(self) -> FieldSet:
        out: FieldSet = {}
        for f in dataclasses.fields(self):
            if f.metadata.get(_READ_ONLY):
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            out[_remote_name(f)] = list(value) if isinstance(value, (list, tuple)) else value
        return out

    def field_values(self) -> Dict[str, Any]:
        """
        All column values keyed by remote field name, read-only and empty ones included.

        Unlike :meth:`to_fields`, this is the record as decoded, not as it would be sent.
        """
        out: Dict[str, Any] = {}
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            out[_remote_name(f)] = list(value) if isinstance(value, (list, tuple)) else value
        return out


@dataclass
class DynamicRecord(_RecordIdentity):
    """
    Schema-less record with dict-like access to its fields.

    Used when a table is opened without a record type.

    Example::

        record = table.find("recXXXXXXXXXXXXXX")
        print(record.record_id)
        print(record["Name"])
        record["Status"] = "Done"
        table.update(record)
    """

    fields: FieldSet = field(default_factory=dict)

    def __getitem__(self, key: str) -> FieldValue:
        return self.fields[key]

    def __setitem__(self, key: str, value: FieldValue) -> None:
        self.fields[key] = value

    def __delitem__(self, key: str) -> None:
        del self.fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self.fields

    def __iter__(self) -> Iterator[str]:
        return iter(self.fields)

    def __len__(self) -> int:
        return len(self.fields)

    def get(self, key: str, default: Any = None) -> Any:
        return self.fields.get(key, default)

    def keys(self):
        return self.fields.keys()

    def values(self):
        return self.fields.values()

    def items(self):
        return self.fields.items()

    def to_fields(self) -> FieldSet:
        return encode_fieldset(self.fields)

    def field_values(self) -> Dict[str, Any]:
        return dict(self.fields)

    def to_full_dict(self) -> Dict[str, Any]:
        """
        Convert to the store's record shape.

        :return: Dictionary with ``id`` and ``fields``.
        :rtype: dict[str, Any]
        """
        return {"id": self.record_id, "fields": dict(self.fields)}

    @classmethod
    def from_fields(cls, fields: FieldSet) -> "DynamicRecord":
        return cls(fields=dict(fields))


__all__ = ["RecordId", "RecordProtocol", "TableRecord", "DynamicRecord", "column"]
