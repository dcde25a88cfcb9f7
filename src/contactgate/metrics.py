import prometheus_client
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest

# Guard against duplicated metric registration when the module is imported
# multiple times (for example, when running uvicorn with the reloader).
REQUEST_COUNT = getattr(prometheus_client, "contactgate_REQUEST_COUNT", None)
REQUEST_LATENCY = getattr(prometheus_client, "contactgate_REQUEST_LATENCY", None)
RATE_LIMIT_HITS = getattr(prometheus_client, "contactgate_RATE_LIMIT_HITS", None)
TOKEN_OPERATIONS = getattr(prometheus_client, "contactgate_TOKEN_OPERATIONS", None)
ACTIVE_TOKENS = getattr(prometheus_client, "contactgate_ACTIVE_TOKENS", None)
SUBMISSIONS = getattr(prometheus_client, "contactgate_SUBMISSIONS", None)
DELIVERY_DURATION = getattr(prometheus_client, "contactgate_DELIVERY_DURATION", None)

if REQUEST_COUNT is None:
    # HTTP Metrics
    REQUEST_COUNT = Counter(
        "http_requests_total", "Total HTTP requests", ["method", "endpoint", "http_status"]
    )
    REQUEST_LATENCY = Histogram(
        "http_request_latency_seconds", "HTTP request latency in seconds", ["method", "endpoint"]
    )

    # Gate Metrics
    RATE_LIMIT_HITS = Counter(
        "rate_limit_hits_total", "Total rate limit hits (blocked submissions)"
    )
    TOKEN_OPERATIONS = Counter(
        "token_operations_total",
        "Total anti-forgery token operations",
        ["operation"],  # operation: issue/consume/not_found/expired/owner_mismatch/purge
    )
    ACTIVE_TOKENS = Gauge("active_tokens", "Number of unconsumed tokens held in memory")

    # Submission Metrics
    SUBMISSIONS = Counter(
        "submissions_total",
        "Total contact submissions by terminal outcome",
        ["outcome"],  # outcome: delivered/rate_limited/token_invalid/validation_failed/delivery_failed
    )
    DELIVERY_DURATION = Histogram(
        "delivery_duration_seconds", "Time spent in the delivery transport in seconds"
    )

    prometheus_client.contactgate_REQUEST_COUNT = REQUEST_COUNT  # type: ignore[attr-defined]
    prometheus_client.contactgate_REQUEST_LATENCY = REQUEST_LATENCY  # type: ignore[attr-defined]
    prometheus_client.contactgate_RATE_LIMIT_HITS = RATE_LIMIT_HITS  # type: ignore[attr-defined]
    prometheus_client.contactgate_TOKEN_OPERATIONS = TOKEN_OPERATIONS  # type: ignore[attr-defined]
    prometheus_client.contactgate_ACTIVE_TOKENS = ACTIVE_TOKENS  # type: ignore[attr-defined]
    prometheus_client.contactgate_SUBMISSIONS = SUBMISSIONS  # type: ignore[attr-defined]
    prometheus_client.contactgate_DELIVERY_DURATION = DELIVERY_DURATION  # type: ignore[attr-defined]


def record_token_operation(operation: str) -> None:
    try:
        if TOKEN_OPERATIONS is not None:
            TOKEN_OPERATIONS.labels(operation=operation).inc()
    except Exception:
        pass  # Don't fail requests on metrics errors


def metrics_response():
    data = generate_latest()
    return data, CONTENT_TYPE_LATEST
