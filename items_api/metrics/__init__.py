# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Prometheus metrics — single source of truth for all metric objects.
Imported by services and middleware. Never instantiated in controllers.
"""
from prometheus_client import Counter, Gauge, Histogram

# ── HTTP Metrics (used by middleware) ──
REQUEST_COUNT = Counter(
    "items_api_requests_total",
    "Total HTTP requests to the items API",
    ["method", "endpoint", "status"],
)
REQUEST_LATENCY = Histogram(
    "items_api_request_duration_seconds",
    "Request latency in seconds",
    ["method", "endpoint"],
)
HTTP_ERRORS = Counter(
    "items_api_http_errors_total",
    "Total HTTP error responses",
    ["method", "endpoint", "status"],
)

# ── Business Metrics (updated by service layer only) ──
ITEMS_CREATED = Counter("items_created_total", "Total items created")
ITEMS_UPDATED = Counter("items_updated_total", "Total items updated")
ITEMS_DELETED = Counter("items_deleted_total", "Total items deleted")
DATA_ACCESS_ERRORS = Counter(
    "items_data_access_errors_total",
    "Failed data-access operations",
    ["operation"],
)

# ── Connection monitor ──
DB_CONNECTED = Gauge(
    "items_db_connected",
    "1 while the last database check succeeded, else 0",
)
DB_CHECK_FAILURES = Counter(
    "items_db_check_failures_total",
    "Total failed database checks",
)
DB_CHECK_LATENCY = Histogram(
    "items_db_check_latency_seconds",
    "Round-trip latency of successful database checks",
    buckets=[0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)
