from prometheus_client import Counter, Histogram

# Registered on the default registry, exported by django_prometheus at /metrics.
HTTP_REQUEST_DURATION = Histogram(
    "clinic_records_http_request_duration_seconds",
    "Latency of the entity API views",
    ["view", "method", "status"],
)

ENTITY_OPERATIONS = Counter(
    "clinic_records_entity_operations_total",
    "Entity writes committed, by entity and operation",
    ["entity", "operation"],
)
