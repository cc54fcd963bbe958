# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""Tests for the requests-based transport."""

from unittest.mock import MagicMock, Mock

import pytest
import requests

from airtable_sdk.core._auth import _AuthManager
from airtable_sdk.core.config import AirtableConfig
from airtable_sdk.core.errors import TransportError
from airtable_sdk.core.telemetry import TelemetryConfig
from airtable_sdk.core.transport import RequestsTransport, Transport, TransportResponse


def _raw_response(status=200, body=b'{"records": []}', json_value=None, headers=None):
    r = Mock()
    r.status_code = status
    r.content = body
    r.text = body.decode() if body else ""
    r.headers = headers or {}
    if json_value is not None:
        r.json.return_value = json_value
    else:
        r.json.side_effect = ValueError("not json")
    return r


@pytest.fixture
def transport(test_config):
    t = RequestsTransport(_AuthManager("patKEY"), test_config)
    t._http = MagicMock()
    return t


def test_implements_protocol(transport):
    assert isinstance(transport, Transport)


def test_send_builds_request(transport):
    transport._http._request.return_value = _raw_response(json_value={"records": []})

    response = transport.send("GET", "appBASE/Words", [("view", "To Learn"), ("fields[]", "Word")])

    method, url = transport._http._request.call_args.args
    kwargs = transport._http._request.call_args.kwargs
    assert method == "GET"
    assert url == "https://api.example.com/v0/appBASE/Words"
    assert kwargs["params"] == [("view", "To Learn"), ("fields[]", "Word")]
    assert "json" not in kwargs
    assert kwargs["headers"]["Authorization"] == "Bearer patKEY"
    assert kwargs["headers"]["Content-Type"] == "application/json"
    assert kwargs["headers"]["X-Client-Request-Id"]
    assert response == TransportResponse(200, {"records": []}, {}, '{"records": []}')


def test_send_body_as_json(transport):
    transport._http._request.return_value = _raw_response(json_value={"id": "rec1", "fields": {}})
    transport.send("post", "appBASE/Words", (), {"fields": {"Word": "a"}})
    assert transport._http._request.call_args.args[0] == "POST"
    assert transport._http._request.call_args.kwargs["json"] == {"fields": {"Word": "a"}}
    assert "params" not in transport._http._request.call_args.kwargs


def test_error_status_returned_not_raised(transport):
    transport._http._request.return_value = _raw_response(
        422, b'{"error": {"type": "X"}}', json_value={"error": {"type": "X"}}
    )
    response = transport.send("GET", "appBASE/Words")
    assert response.status_code == 422
    assert not response.ok
    assert response.payload == {"error": {"type": "X"}}


def test_non_json_body(transport):
    transport._http._request.return_value = _raw_response(502, b"<html>Bad Gateway</html>")
    response = transport.send("GET", "appBASE/Words")
    assert response.payload is None
    assert response.text == "<html>Bad Gateway</html>"


def test_empty_body(transport):
    transport._http._request.return_value = _raw_response(200, b"")
    assert transport.send("DELETE", "appBASE/Words/rec1").payload is None


def test_network_failure_raises_transport_error(transport):
    transport._http._request.side_effect = requests.exceptions.ConnectionError("refused")
    with pytest.raises(TransportError) as ei:
        transport.send("GET", "appBASE/Words")
    assert isinstance(ei.value.__cause__, requests.exceptions.ConnectionError)
    assert ei.value.details["exception"] == "ConnectionError"


def test_unsupported_method(transport):
    with pytest.raises(ValueError):
        transport.send("PUT", "appBASE/Words")


def _hooked_transport(test_config):
    hook = MagicMock()
    config = AirtableConfig(
        api_url=test_config.api_url,
        http_retries=1,
        telemetry=TelemetryConfig(hooks=[hook]),
    )
    t = RequestsTransport(_AuthManager("patKEY"), config)
    t._http = MagicMock()
    t._http._request.return_value = _raw_response(json_value={"records": []})
    return t, hook


def test_hooks_see_table_and_status(test_config):
    t, hook = _hooked_transport(test_config)

    t.send("GET", "appBASE/Words")

    request_ctx = hook.on_request_start.call_args.args[0]
    assert request_ctx.operation == "records.list"
    assert request_ctx.table_name == "Words"
    _, response_ctx = hook.on_request_end.call_args.args
    assert response_ctx.status_code == 200


@pytest.mark.parametrize(
    "method, path, operation",
    [
        ("GET", "appBASE/Words", "records.list"),
        ("GET", "appBASE/Words/rec1", "records.get"),
        ("POST", "appBASE/Words", "records.create"),
        ("PATCH", "appBASE/Words/rec1", "records.update"),
        ("DELETE", "appBASE/Words/rec1", "records.delete"),
    ],
)
def test_operation_names(test_config, method, path, operation):
    t, hook = _hooked_transport(test_config)
    t.send(method, path)
    assert hook.on_request_start.call_args.args[0].operation == operation


def test_close_delegates(transport):
    transport.close()
    transport._http.close.assert_called_once()


def test_auth_rejects_empty_key():
    with pytest.raises(ValueError):
        _AuthManager("")
