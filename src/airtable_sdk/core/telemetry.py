# Copyright (c) Microsoft Corporation.
# Licensed under the MIT license.

"""
Telemetry infrastructure for the Airtable SDK.

Provides OpenTelemetry-based tracing and metrics, standard-library request
logging, and a hook system for custom telemetry providers.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    Generator,
    List,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

from ..common.constants import (
    OTEL_ATTR_AIRTABLE_REQUEST_ID,
    OTEL_ATTR_AIRTABLE_TABLE,
    OTEL_ATTR_DB_OPERATION,
    OTEL_ATTR_DB_SYSTEM,
    OTEL_ATTR_HTTP_METHOD,
    OTEL_ATTR_HTTP_STATUS_CODE,
    OTEL_ATTR_HTTP_URL,
)

# Optional OpenTelemetry imports
try:
    from opentelemetry import metrics, trace
    from opentelemetry.trace import Status, StatusCode

    _OTEL_AVAILABLE = True
except ImportError:
    _OTEL_AVAILABLE = False
    trace = None  # type: ignore
    metrics = None  # type: ignore
    Status = None  # type: ignore
    StatusCode = None  # type: ignore

_log = logging.getLogger(__name__)


# ============================================================================
# Configuration
# ============================================================================


@dataclass(frozen=True)
class TelemetryConfig:
    """Configuration for SDK telemetry and observability.

    Telemetry is opt-in. Tracing and metrics need ``opentelemetry-api`` to be
    installed; logging only needs the standard library.

    Example:
        Request logging at DEBUG level::

            config = AirtableConfig(
                telemetry=TelemetryConfig(enable_logging=True, log_level="DEBUG")
            )

        Custom hook::

            config = AirtableConfig(
                telemetry=TelemetryConfig(hooks=[MyRateLimitHook()])
            )
    """

    # Signal toggles
    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False

    # Logging configuration
    log_level: str = "WARNING"
    logger_name: str = "airtable_sdk"

    # Custom hooks
    hooks: List["TelemetryHook"] = field(default_factory=list)


# ============================================================================
# Context Objects
# ============================================================================


@dataclass
class RequestContext:
    """Context passed to telemetry hooks for each HTTP request."""

    client_request_id: str
    method: str  # GET, POST, PATCH, DELETE
    url: str
    operation: str  # e.g. "records.list", "records.create"
    table_name: Optional[str] = None

    start_time: float = field(default_factory=time.perf_counter)

    # Custom data bag for hooks to share state
    custom_data: Dict[str, Any] = field(default_factory=dict)

    # Internal: span reference for adding response attributes
    _span: Any = field(default=None, repr=False)


@dataclass
class ResponseContext:
    """Response information passed to telemetry hooks."""

    status_code: int
    duration_ms: float
    error: Optional[Exception] = None


# ============================================================================
# Hook Protocol
# ============================================================================


@runtime_checkable
class TelemetryHook(Protocol):
    """Protocol for custom telemetry hooks.

    All methods are optional - implement only what you need.

    Example:
        class ThrottleCounter:
            def __init__(self):
                self.throttled = 0

            def on_request_end(self, request, response):
                if response.status_code == 429:
                    self.throttled += 1
    """

    def on_request_start(self, context: RequestContext) -> None:
        """Called before each HTTP request is sent."""
        ...

    def on_request_end(self, request: RequestContext, response: ResponseContext) -> None:
        """Called after each HTTP request completes."""
        ...

    def on_request_error(self, request: RequestContext, error: Exception) -> None:
        """Called when the request raised instead of producing a response."""
        ...


# ============================================================================
# Telemetry Manager
# ============================================================================


class TelemetryManager:
    """Manages telemetry instrumentation for the Airtable SDK.

    This class is internal and not part of the public API.
    """

    def __init__(self, config: Optional[TelemetryConfig] = None) -> None:
        self._config = config or TelemetryConfig()
        self._tracer: Optional[Any] = None
        self._meter: Optional[Any] = None
        self._logger: Optional[logging.Logger] = None
        self._hooks = list(self._config.hooks)

        self._request_duration: Optional[Any] = None
        self._request_count: Optional[Any] = None
        self._error_count: Optional[Any] = None

        self._initialize()

    @property
    def is_tracing_enabled(self) -> bool:
        return self._config.enable_tracing and _OTEL_AVAILABLE

    @property
    def is_metrics_enabled(self) -> bool:
        return self._config.enable_metrics and _OTEL_AVAILABLE

    def _initialize(self) -> None:
        if self.is_tracing_enabled:
            self._tracer = trace.get_tracer("airtable_sdk")

        if self.is_metrics_enabled:
            self._meter = metrics.get_meter("airtable_sdk")
            self._request_duration = self._meter.create_histogram(
                name="airtable.client.request.duration",
                description="Duration of Airtable API requests",
                unit="ms",
            )
            self._request_count = self._meter.create_counter(
                name="airtable.client.request.count",
                description="Number of Airtable API requests",
                unit="1",
            )
            self._error_count = self._meter.create_counter(
                name="airtable.client.error.count",
                description="Number of Airtable API errors",
                unit="1",
            )

        if self._config.enable_logging:
            self._logger = logging.getLogger(self._config.logger_name)
            self._logger.setLevel(getattr(logging, self._config.log_level.upper()))

    @contextmanager
    def trace_request(
        self,
        operation: str,
        method: str,
        url: str,
        client_request_id: str,
        table_name: Optional[str] = None,
    ) -> Generator[RequestContext, None, None]:
        """Create a traced request context.

        Usage:
            with telemetry.trace_request("records.list", "GET", url, req_id) as ctx:
                response = self._http._request(...)
                telemetry.record_response(ctx, response.status_code)
        """
        ctx = RequestContext(
            client_request_id=client_request_id,
            method=method,
            url=url,
            operation=operation,
            table_name=table_name,
        )
        self._dispatch("on_request_start", ctx)

        span = None
        if self._tracer:
            span_name = f"Airtable {operation}"
            if table_name:
                span_name = f"{span_name} {table_name}"
            attributes = {
                OTEL_ATTR_DB_SYSTEM: "airtable",
                OTEL_ATTR_DB_OPERATION: operation,
                OTEL_ATTR_HTTP_METHOD: method,
                OTEL_ATTR_HTTP_URL: url,
                OTEL_ATTR_AIRTABLE_REQUEST_ID: client_request_id,
            }
            if table_name:
                attributes[OTEL_ATTR_AIRTABLE_TABLE] = table_name
            span = self._tracer.start_span(span_name, kind=trace.SpanKind.CLIENT, attributes=attributes)
            ctx._span = span

        try:
            yield ctx
        except Exception as e:
            if span:
                span.set_status(Status(StatusCode.ERROR, str(e)))
                span.record_exception(e)
            if self._logger:
                self._logger.warning(f"{operation} {method} failed: {e}")
            self._dispatch("on_request_error", ctx, e)
            raise
        finally:
            if span:
                span.end()

    def record_response(
        self,
        ctx: RequestContext,
        status_code: int,
        error: Optional[Exception] = None,
    ) -> None:
        """Record response metrics, log the request and dispatch to hooks."""
        duration_ms = (time.perf_counter() - ctx.start_time) * 1000
        response = ResponseContext(status_code=status_code, duration_ms=duration_ms, error=error)

        if ctx._span:
            ctx._span.set_attribute(OTEL_ATTR_HTTP_STATUS_CODE, status_code)

        if self._request_duration:
            attributes: Dict[str, Any] = {
                "operation": ctx.operation,
                "method": ctx.method,
                "status_code": status_code,
            }
            if ctx.table_name:
                attributes["table"] = ctx.table_name
            self._request_duration.record(duration_ms, attributes)
            self._request_count.add(1, attributes)
            if status_code >= 400:
                self._error_count.add(1, attributes)

        if self._logger:
            level = logging.WARNING if status_code >= 400 else logging.DEBUG
            self._logger.log(
                level,
                f"{ctx.operation} {ctx.method} {status_code} {duration_ms:.1f}ms",
                extra={"client_request_id": ctx.client_request_id},
            )

        self._dispatch("on_request_end", ctx, response)

    def _dispatch(self, name: str, *args: Any) -> None:
        """Call ``name`` on every hook that defines it; hook failures never break a request."""
        for hook in self._hooks:
            method = getattr(hook, name, None)
            if method is None:
                continue
            try:
                method(*args)
            except Exception:
                _log.debug("telemetry hook %r raised in %s", hook, name, exc_info=True)


# ============================================================================
# No-op Manager for when telemetry is disabled
# ============================================================================


class NoOpTelemetryManager:
    """No-op telemetry manager when telemetry is disabled."""

    @contextmanager
    def trace_request(
        self,
        operation: str,
        method: str,
        url: str,
        client_request_id: str,
        table_name: Optional[str] = None,
    ) -> Generator[RequestContext, None, None]:
        yield RequestContext(
            client_request_id=client_request_id,
            method=method,
            url=url,
            operation=operation,
            table_name=table_name,
        )

    def record_response(self, *args: Any, **kwargs: Any) -> None:
        pass


def create_telemetry_manager(
    config: Optional[TelemetryConfig],
) -> Union[TelemetryManager, NoOpTelemetryManager]:
    """Factory to create appropriate telemetry manager."""
    if config is None:
        return NoOpTelemetryManager()

    has_any_enabled = config.enable_tracing or config.enable_metrics or config.enable_logging or config.hooks
    if not has_any_enabled:
        return NoOpTelemetryManager()

    return TelemetryManager(config)


__all__ = [
    "TelemetryConfig",
    "TelemetryHook",
    "TelemetryManager",
    "NoOpTelemetryManager",
    "RequestContext",
    "ResponseContext",
    "create_telemetry_manager",
]
