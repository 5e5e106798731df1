"""Prometheus metrics for monitoring with exemplar support."""

from __future__ import annotations

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram

# Custom registry for better control and exemplar support
REGISTRY = CollectorRegistry()

# Covers response times from 1ms to 10s
DEFAULT_LATENCY_BUCKETS = (
    0.001,
    0.005,
    0.01,
    0.025,
    0.05,
    0.1,
    0.25,
    0.5,
    1.0,
    2.5,
    5.0,
    10.0,
)

# HTTP metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"],
    registry=REGISTRY,
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

# Database metrics
database_connections_active = Gauge(
    "database_connections_active",
    "Number of open database connections",
    registry=REGISTRY,
)

database_query_duration_seconds = Histogram(
    "database_query_duration_seconds",
    "Database query duration in seconds",
    ["operation"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

# List pagination metrics
list_pagination_duration_seconds = Histogram(
    "list_pagination_duration_seconds",
    "Time to serve one page of saved items, including temp table setup and cleanup",
    ["direction", "cursor"],
    buckets=DEFAULT_LATENCY_BUCKETS,
    registry=REGISTRY,
)

list_pagination_temp_tables_total = Counter(
    "list_pagination_temp_tables_total",
    "Temporary tables created by the pagination engine",
    ["table"],
    registry=REGISTRY,
)

list_pagination_cursor_not_found_total = Counter(
    "list_pagination_cursor_not_found_total",
    "Page requests whose cursor did not resolve to a row",
    registry=REGISTRY,
)

list_pagination_collision_rows = Histogram(
    "list_pagination_collision_rows",
    "Rows sharing the cursor's sort value staged when resuming from a cursor",
    buckets=(1, 2, 5, 10, 50, 100, 500, 1000, 5000),
    registry=REGISTRY,
)
