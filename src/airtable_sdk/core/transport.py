# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Transport boundary between the record engine and the network.

The query and write code only talks to a :class:`Transport`: one ``send`` call
per HTTP round-trip, returning a :class:`TransportResponse` whatever the status
code, or raising :class:`~airtable_sdk.core.errors.TransportError` when no
response was received. :class:`RequestsTransport` is the default implementation.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

import requests

from ..common.constants import HEADER_CLIENT_REQUEST_ID
from ._auth import _AuthManager
from ._http import _HttpClient
from .config import AirtableConfig
from .errors import TransportError
from .telemetry import NoOpTelemetryManager, TelemetryManager, create_telemetry_manager

QueryParams = Sequence[Tuple[str, str]]

_METHODS = ("GET", "POST", "PATCH", "DELETE")

# GET on "{base}/{table}" lists, GET on "{base}/{table}/{id}" reads one record
_OPERATIONS = {
    "GET": "records.get",
    "POST": "records.create",
    "PATCH": "records.update",
    "DELETE": "records.delete",
}


@dataclass(frozen=True)
class TransportResponse:
    """
    Raw outcome of one HTTP round-trip.

    :param status_code: HTTP status code.
    :type status_code: int
    :param payload: Decoded JSON body, or ``None`` when the body is empty or not JSON.
    :param headers: Response headers.
    :type headers: Mapping[str, str]
    :param text: Raw body text, kept for error excerpts.
    :type text: str
    """

    status_code: int
    payload: Any = None
    headers: Mapping[str, str] = field(default_factory=dict)
    text: str = ""

    @property
    def ok(self) -> bool:
        return self.status_code < 400


@runtime_checkable
class Transport(Protocol):
    """Anything able to perform one request against the Web API.

    ``path`` is relative to the API root (``"{base}/{table}"`` or
    ``"{base}/{table}/{record_id}"``) with segments already URL-quoted.
    ``query_params`` is an ordered sequence of ``(key, value)`` pairs; repeated
    keys are allowed and order is preserved on the wire.
    """

    def send(
        self,
        method: str,
        path: str,
        query_params: QueryParams = (),
        body: Optional[Dict[str, Any]] = None,
    ) -> TransportResponse: ...


class RequestsTransport:
    """
    :class:`Transport` over ``requests`` with retries, bearer auth and telemetry.

    :param auth: Credential holder producing the ``Authorization`` header.
    :type auth: ~airtable_sdk.core._auth._AuthManager
    :param config: Client configuration; defaults to :meth:`AirtableConfig.from_env`.
    :type config: ~airtable_sdk.core.config.AirtableConfig or None
    :param session: Optional pooled session shared across requests.
    :type session: :class:`requests.Session` or None
    """

    def __init__(
        self,
        auth: _AuthManager,
        config: Optional[AirtableConfig] = None,
        *,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.auth = auth
        self.config = config or AirtableConfig.from_env()
        self.api = self.config.api_url.rstrip("/")
        self._http = _HttpClient(
            retries=self.config.http_retries,
            backoff=self.config.http_backoff,
            timeout=self.config.http_timeout,
            max_backoff=self.config.http_max_backoff,
            jitter=self.config.http_jitter,
            retry_transient_errors=self.config.http_retry_transient_errors,
            session=session,
        )
        self._telemetry: Union[TelemetryManager, NoOpTelemetryManager] = create_telemetry_manager(
            self.config.telemetry
        )

    def _headers(self, client_request_id: str) -> Dict[str, str]:
        headers = self.auth._auth_headers()
        headers["Accept"] = "application/json"
        headers["Content-Type"] = "application/json"
        headers[HEADER_CLIENT_REQUEST_ID] = client_request_id
        return headers

    def send(
        self,
        method: str,
        path: str,
        query_params: QueryParams = (),
        body: Optional[Dict[str, Any]] = None,
    ) -> TransportResponse:
        method = method.upper()
        if method not in _METHODS:
            raise ValueError(f"Unsupported method: {method}")
        url = f"{self.api}/{path.lstrip('/')}"
        request_id = str(uuid.uuid4())
        segments = path.strip("/").split("/")
        table_name = segments[1] if len(segments) > 1 else None
        operation = "records.list" if method == "GET" and len(segments) < 3 else _OPERATIONS[method]
        kwargs: Dict[str, Any] = {"headers": self._headers(request_id)}
        if query_params:
            kwargs["params"] = list(query_params)
        if body is not None:
            kwargs["json"] = body

        with self._telemetry.trace_request(operation, method, url, request_id, table_name) as ctx:
            try:
                r = self._http._request(method, url, **kwargs)
            except requests.exceptions.RequestException as exc:
                raise TransportError(
                    f"{method} {url} failed: {exc}",
                    details={"client_request_id": request_id, "exception": type(exc).__name__},
                ) from exc
            self._telemetry.record_response(ctx, r.status_code)

        try:
            payload = r.json() if r.content else None
        except ValueError:
            payload = None
        return TransportResponse(status_code=r.status_code, payload=payload, headers=r.headers, text=r.text or "")

    def close(self) -> None:
        self._http.close()


__all__ = ["QueryParams", "Transport", "TransportResponse", "RequestsTransport"]
