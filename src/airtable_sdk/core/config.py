# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..common.constants import DEFAULT_API_URL
from .telemetry import TelemetryConfig


@dataclass(frozen=True)
class AirtableConfig:
    """
    Configuration settings for Airtable client operations.

    :param api_url: Root of the Web API. Default is ``https://api.airtable.com/v0``.
    :type api_url: str
    :param http_retries: Maximum number of attempts for HTTP requests (default: 5).
    :type http_retries: int or None
    :param http_backoff: Base delay in seconds for exponential backoff (default: 0.5).
    :type http_backoff: float or None
    :param http_max_backoff: Maximum delay between retry attempts in seconds (default: 60.0).
    :type http_max_backoff: float or None
    :param http_timeout: Request timeout in seconds (default: method-dependent).
    :type http_timeout: float or None
    :param http_jitter: Whether to add jitter to retry delays (default: True).
    :type http_jitter: bool or None
    :param http_retry_transient_errors: Whether to retry 429, 502, 503 and 504 responses (default: True).
    :type http_retry_transient_errors: bool or None
    :param default_page_size: Page size sent when a query does not set one. ``None`` lets the
        store choose.
    :type default_page_size: int or None
    :param telemetry: Optional tracing, metrics and logging settings.
    :type telemetry: ~airtable_sdk.core.telemetry.TelemetryConfig or None
    """

    api_url: str = DEFAULT_API_URL

    # HTTP retry and resilience configuration
    http_retries: Optional[int] = None
    http_backoff: Optional[float] = None
    http_max_backoff: Optional[float] = None
    http_timeout: Optional[float] = None
    http_jitter: Optional[bool] = None
    http_retry_transient_errors: Optional[bool] = None

    default_page_size: Optional[int] = None
    telemetry: Optional[TelemetryConfig] = None

    @classmethod
    def from_env(cls) -> "AirtableConfig":
        """
        Create a configuration instance with default settings.

        :return: Configuration instance with default values.
        :rtype: ~airtable_sdk.core.config.AirtableConfig
        """
        # Environment-free defaults
        return cls(
            api_url=DEFAULT_API_URL,
            http_retries=None,  # Will default to 5 in _HttpClient
            http_backoff=None,  # Will default to 0.5 in _HttpClient
            http_max_backoff=None,  # Will default to 60.0 in _HttpClient
            http_timeout=None,  # Will use method-dependent defaults in _HttpClient
            http_jitter=None,  # Will default to True in _HttpClient
            http_retry_transient_errors=None,  # Will default to True in _HttpClient
            default_page_size=None,
            telemetry=None,
        )
