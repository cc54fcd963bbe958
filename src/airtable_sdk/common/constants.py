# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Constants for the Airtable Web API wire format and telemetry attributes.
"""

DEFAULT_API_URL = "https://api.airtable.com/v0"

# List-records query parameter names
PARAM_VIEW = "view"
PARAM_FORMULA = "filterByFormula"
PARAM_PAGE_SIZE = "pageSize"
PARAM_OFFSET = "offset"
PARAM_FIELDS = "fields[]"
PARAM_SORT_FIELD = "sort[{index}][field]"
PARAM_SORT_DIRECTION = "sort[{index}][direction]"

# Record payload keys
KEY_RECORDS = "records"
KEY_OFFSET = "offset"
KEY_ID = "id"
KEY_FIELDS = "fields"
KEY_CREATED_TIME = "createdTime"
KEY_ERROR = "error"

HEADER_CLIENT_REQUEST_ID = "X-Client-Request-Id"
HEADER_RETRY_AFTER = "Retry-After"

# OpenTelemetry semantic convention attribute names
OTEL_ATTR_DB_SYSTEM = "db.system"
OTEL_ATTR_DB_OPERATION = "db.operation"
OTEL_ATTR_HTTP_METHOD = "http.request.method"
OTEL_ATTR_HTTP_URL = "url.full"
OTEL_ATTR_HTTP_STATUS_CODE = "http.response.status_code"
OTEL_ATTR_AIRTABLE_TABLE = "airtable.table"
OTEL_ATTR_AIRTABLE_REQUEST_ID = "airtable.client_request_id"
