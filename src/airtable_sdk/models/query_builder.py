# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Fluent query builder for list-records requests.

Accumulates view, sort, formula, field selection and page size, and snapshots
them into an immutable :class:`QueryDescriptor` when iteration starts.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Tuple, Union

if TYPE_CHECKING:
    from ..data._paging import PagingIterator


class SortDirection(str, Enum):
    """Sort direction; the value is the label sent on the wire."""

    ASCENDING = "asc"
    DESCENDING = "desc"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SortKey:
    """One sort criterion. Earlier keys take precedence over later ones."""

    field: str
    direction: SortDirection = SortDirection.ASCENDING


@dataclass(frozen=True)
class QueryDescriptor:
    """
    Immutable snapshot of a query.

    Iterating the same descriptor twice runs the query twice; a cursor from
    one run is never reused by another.

    :param view: Name or id of a view whose filters and order apply first.
    :param sort: Sort keys in precedence order.
    :param formula: Filter formula, passed to the store untouched.
    :param page_size: Records per page; ``None`` lets the store decide.
    :param fields: Field names to return; empty means all fields.
    """

    view: Optional[str] = None
    sort: Tuple[SortKey, ...] = ()
    formula: Optional[str] = None
    page_size: Optional[int] = None
    fields: Tuple[str, ...] = ()


@dataclass
class QueryBuilder:
    """
    Fluent interface for building list-records queries.

    Every option method returns the builder for chaining and performs no I/O.
    Iterating the builder (or calling :meth:`execute`) snapshots the options
    into a :class:`QueryDescriptor` and returns a fresh lazy iterator over
    mapped records; changing the builder afterwards does not affect iterators
    already created.

    :param table: Table name or id the query targets.
    :type table: str

    Example:
        Query through a table client::

            words = (table.query()
                     .view("To Learn")
                     .sort("Next", SortDirection.DESCENDING)
                     .sort("Google", SortDirection.DESCENDING)
                     .formula('FIND("Harry Potter", Source)'))
            for word in itertools.islice(words, 200):
                print(word.word)

        Build a standalone descriptor::

            descriptor = QueryBuilder("Words").view("To Learn").page_size(50).build()
    """

    table: str = ""
    _view: Optional[str] = None
    _sort: List[SortKey] = field(default_factory=list)
    _formula: Optional[str] = None
    _page_size: Optional[int] = None
    _fields: List[str] = field(default_factory=list)
    _table_client: Any = field(default=None, compare=False, repr=False)

    def view(self, name: str) -> "QueryBuilder":
        """
        Restrict the query to a view. Replaces any previously set view.

        :param name: View name or id.
        :type name: str
        :return: Self for method chaining.
        :rtype: QueryBuilder
        """
        self._view = name
        return self

    def sort(self, field_name: str, direction: Union[SortDirection, str] = SortDirection.ASCENDING) -> "QueryBuilder":
        """
        Append a sort key.

        Can be called multiple times; keys apply in call order, the first one
        being primary. Repeating a field is allowed and every entry is sent.

        :param field_name: Field to sort by.
        :type field_name: str
        :param direction: :class:`SortDirection` or its label (``"asc"`` / ``"desc"``).
        :return: Self for method chaining.
        :rtype: QueryBuilder

        Example::

            query = (QueryBuilder("Words")
                     .sort("Next", SortDirection.DESCENDING)
                     .sort("Google", "desc"))
        """
        self._sort.append(SortKey(field_name, SortDirection(direction)))
        return self

    def formula(self, expression: str) -> "QueryBuilder":
        """
        Filter with a formula. Replaces any previously set formula.

        The expression is sent as-is; syntax errors are reported by the store
        when the first page is fetched.

        :param expression: Formula such as ``'FIND("Harry Potter", Source)'``.
        :type expression: str
        :return: Self for method chaining.
        :rtype: QueryBuilder
        """
        self._formula = expression
        return self

    def page_size(self, size: int) -> "QueryBuilder":
        """
        Set the number of records per page.

        :param size: Number of records per page (the store caps it at 100).
        :type size: int
        :return: Self for method chaining.
        :rtype: QueryBuilder
        :raises ValueError: If ``size`` is less than 1.
        """
        if size < 1:
            raise ValueError("page_size must be at least 1")
        self._page_size = size
        return self

    def fields(self, *names: str) -> "QueryBuilder":
        """
        Only return the given fields. Can be called multiple times.

        :param names: Field names to include.
        :type names: str
        :return: Self for method chaining.
        :rtype: QueryBuilder
        """
        self._fields.extend(names)
        return self

    def build(self) -> QueryDescriptor:
        """
        Snapshot the current options.

        :return: A new immutable descriptor.
        :rtype: QueryDescriptor

        Example::

            descriptor = QueryBuilder("Words").sort("Google", "desc").build()
            descriptor.sort[0].direction  # SortDirection.DESCENDING
        """
        return QueryDescriptor(
            view=self._view,
            sort=tuple(self._sort),
            formula=self._formula,
            page_size=self._page_size,
            fields=tuple(self._fields),
        )

    def execute(self) -> "PagingIterator":
        """
        Start a new lazy iteration over the query's records.

        :return: Forward-only iterator of mapped records.
        :raises RuntimeError: If the builder was not created via ``table.query()``.
        """
        if self._table_client is None:
            raise RuntimeError(
                "Cannot execute: query was not created via table.query(). "
                "Use table.iterate(query.build()) instead."
            )
        return self._table_client.iterate(self.build())

    def __iter__(self) -> "PagingIterator":
        return self.execute()

    def to_dataframe(self, id_column: str = "id") -> Any:
        """
        Run the query and collect every record into a :class:`pandas.DataFrame`.

        Needs the ``pandas`` extra. The first record that fails to decode or map
        raises :class:`~airtable_sdk.core.errors.MalformedPayloadError` and no
        frame is returned.

        Example::

            df = table.query().view("To Learn").to_dataframe()
        """
        return self.execute().to_dataframe(id_column=id_column)


__all__ = ["SortDirection", "SortKey", "QueryDescriptor", "QueryBuilder"]
