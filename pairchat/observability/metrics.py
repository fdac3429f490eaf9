"""
Prometheus Metrics for the chat service.

DATA FLOW:
    This file                  presentation/api/metrics.py         Scraper
    ─────────                  ────────────────────────────         ───────
    Define metrics ──────────► /metrics endpoint ──────────────►   Prometheus / Alloy

METRIC TYPES:
    - Gauge: Value goes up/down (open sessions)
    - Counter: Value only goes up (messages, joins, errors)
    - Histogram: Distribution (store latency percentiles)
"""

from prometheus_client import (
    Gauge,
    Histogram,
    Counter,
    generate_latest,
    CONTENT_TYPE_LATEST,
)


# =============================================================================
# METRICS DEFINITIONS
# =============================================================================
ACTIVE_SESSIONS = Gauge(
    "chat_active_sessions", "Number of authenticated sessions currently connected"
)

MESSAGES_TOTAL = Counter(
    "chat_messages_total",
    "Total number of messages durably stored",
)

ROOM_JOINS_TOTAL = Counter(
    "chat_room_joins_total",
    "Total number of successful room joins",
)

STORE_LATENCY = Histogram(
    "chat_store_latency_seconds",
    "Latency of room directory and message store operations in seconds",
    ["operation"],
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5, 10],
)

ERRORS_TOTAL = Counter(
    "chat_errors_total",
    "Total number of errors by type",
    ["error_type"],
)


# =============================================================================
# LABEL CONSTANTS
# =============================================================================
class MetricsErrorType:
    """Error type labels for chat_errors_total metric."""

    AUTH_FAILED = "auth_failed"
    UNAUTHORIZED = "unauthorized"
    PERSISTENCE_FAILED = "persistence_failed"
    PROTOCOL_ERROR = "protocol_error"
    DELIVERY_FAILED = "delivery_failed"


# =============================================================================
# RECORDING FUNCTIONS
# =============================================================================
def session_opened():
    """Call when a session authenticates. Integration point: ChatHub.connect()"""
    ACTIVE_SESSIONS.inc()


def session_closed():
    """Call once per authenticated session teardown. Integration point: ChatHub.disconnect()"""
    ACTIVE_SESSIONS.dec()


def increment_messages():
    MESSAGES_TOTAL.inc()


def increment_room_joins():
    ROOM_JOINS_TOTAL.inc()


def observe_store_latency(operation: str, duration: float):
    """Call to record store latency. Integration point: ChatHub._store_call()"""
    STORE_LATENCY.labels(operation=operation).observe(duration)


def increment_error(error_type: str):
    """
    Call to record an error occurrence.

    Args:
        error_type: One of MetricsErrorType
    """
    ERRORS_TOTAL.labels(error_type=error_type).inc()


# =============================================================================
# HELPER FOR /metrics ENDPOINT
# =============================================================================
def get_metrics_content():
    """
    Generate Prometheus metrics output.

    Returns:
        Tuple of (content_bytes, content_type_string)
    """
    return generate_latest(), CONTENT_TYPE_LATEST
