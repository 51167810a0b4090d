import time

from prometheus_client import Counter, Histogram, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        # If it already exists, retrieve it from the registry
        return REGISTRY._names_to_collectors[name]


REQUESTS_TOTAL = get_or_create_metric(
    "taskbuckets_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "taskbuckets_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

TASKS_ORGANIZED_TOTAL = get_or_create_metric(
    "taskbuckets_tasks_organized_total", "Tasks classified and stored", Counter
)

CLASSIFICATION_FAILURES_TOTAL = get_or_create_metric(
    "taskbuckets_classification_failures_total",
    "Assign requests where the model gave no usable suggestion",
    Counter,
)

BUCKETS_CREATED_TOTAL = get_or_create_metric(
    "taskbuckets_buckets_created_total", "Buckets created", Counter
)


def record_request(endpoint: str, status: str, started: float) -> None:
    """`started` is a time.time() value taken when the request began."""
    REQUESTS_TOTAL.labels(endpoint=endpoint, status=status).inc()
    REQUEST_LATENCY_SECONDS.labels(endpoint=endpoint).observe(time.time() - started)
