# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from typing import Optional, Type, TypeVar, Union

import requests

from azure.core.credentials import AzureKeyCredential

from .core._auth import _AuthManager
from .core.config import AirtableConfig
from .core.transport import RequestsTransport, Transport
from .models.record import DynamicRecord, RecordProtocol
from .operations.table import TableClient

R = TypeVar("R", bound=RecordProtocol)


class AirtableClient:
    """
    High-level client for the Airtable Web API.

    Holds the credential, configuration and HTTP transport, and hands out
    :class:`~airtable_sdk.operations.table.TableClient` instances bound to one
    base and table.

    **Context Manager Support (Recommended)**:
        Using the client as a context manager pools connections across requests
        and releases them on exit::

            with AirtableClient(api_key) as client:
                words = client.table("appXXXXXXXXXXXXXX", "Words", Word)
                for word in words.query().view("To Learn"):
                    print(word.word)

    **Without Context Manager**:
        Each request opens its own connection. Call ``close()`` when done::

            client = AirtableClient(api_key)
            try:
                client.table(base_id, "Words").find(record_id)
            finally:
                client.close()

    :param api_key: Personal access token, as a string or an
        :class:`~azure.core.credentials.AzureKeyCredential` (supports rotation via ``update()``).
    :type api_key: str or ~azure.core.credentials.AzureKeyCredential
    :param config: Optional configuration for API root, timeouts, retries and telemetry.
        If not provided, defaults are loaded from :meth:`~airtable_sdk.core.config.AirtableConfig.from_env`.
    :type config: ~airtable_sdk.core.config.AirtableConfig or None
    :param transport: Replace the HTTP transport entirely (tests, proxies, recorders).
    :type transport: ~airtable_sdk.core.transport.Transport or None

    :raises ValueError: If ``api_key`` is empty.
    """

    def __init__(
        self,
        api_key: Union[str, AzureKeyCredential],
        config: Optional[AirtableConfig] = None,
        *,
        transport: Optional[Transport] = None,
    ) -> None:
        self.auth = _AuthManager(api_key)
        self._config = config or AirtableConfig.from_env()
        self._session: Optional[requests.Session] = None
        self._custom_transport = transport
        self._transport: Optional[Transport] = transport

    def __enter__(self) -> "AirtableClient":
        """
        Enter the context manager.

        Creates an HTTP session for connection pooling, used by every table
        client handed out afterwards.

        :return: The client instance.
        :rtype: AirtableClient
        """
        if self._custom_transport is None and self._session is None:
            self._session = requests.Session()
            self._reset_transport()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """
        Exit the context manager with cleanup.

        Closes the HTTP session. Safe to call even if an exception occurred
        within the context.
        """
        self.close()

    def close(self) -> None:
        """
        Release the pooled HTTP session, if any. Safe to call multiple times.

        Table clients created earlier keep working with one connection per request.
        """
        if isinstance(self._transport, RequestsTransport):
            self._transport.close()
        self._session = None
        if self._custom_transport is None:
            self._transport = None

    def _reset_transport(self) -> None:
        if isinstance(self._transport, RequestsTransport):
            self._transport.close()
        self._transport = RequestsTransport(self.auth, self._config, session=self._session)

    def _get_transport(self) -> Transport:
        if self._transport is None:
            self._transport = RequestsTransport(self.auth, self._config, session=self._session)
        return self._transport

    def table(
        self,
        base_id: str,
        table_name: str,
        record_type: Type[R] = DynamicRecord,  # type: ignore[assignment]
    ) -> TableClient[R]:
        """
        Open a table.

        :param base_id: Base id, e.g. ``"appXXXXXXXXXXXXXX"``.
        :type base_id: str
        :param table_name: Table name or id.
        :type table_name: str
        :param record_type: Record class used to map rows; defaults to
            :class:`~airtable_sdk.models.record.DynamicRecord`.
        :return: Table client bound to this client's transport.
        :rtype: ~airtable_sdk.operations.table.TableClient

        Example::

            words = client.table("appXXXXXXXXXXXXXX", "Words", Word)
        """
        return TableClient(
            self._get_transport(),
            base_id,
            table_name,
            record_type,
            default_page_size=self._config.default_page_size,
        )


def new(
    api_key: Union[str, AzureKeyCredential],
    base_id: str,
    table_name: str,
    record_type: Type[R] = DynamicRecord,  # type: ignore[assignment]
    config: Optional[AirtableConfig] = None,
) -> TableClient[R]:
    """
    Shortcut for ``AirtableClient(api_key, config).table(base_id, table_name, record_type)``.

    Example::

        words = airtable_sdk.new(os.environ["AIRTABLE_KEY"], os.environ["AIRTABLE_BASE"], "Words", Word)
    """
    return AirtableClient(api_key, config).table(base_id, table_name, record_type)


__all__ = ["AirtableClient", "new"]
