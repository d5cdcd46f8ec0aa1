"""Prometheus metrics for the Foo Operator."""

from prometheus_client import Counter, Histogram

# Reconciliation metrics
reconcile_total = Counter(
    "foo_operator_reconcile_total",
    "Total number of reconciliations",
    ["kind", "result"],
)

reconcile_duration_seconds = Histogram(
    "foo_operator_reconcile_duration_seconds",
    "Duration of reconciliations in seconds",
    ["kind"],
    buckets=[0.1, 0.5, 1.0, 2.5, 5.0, 10.0],
)

# Workload operation metrics
workload_operations_total = Counter(
    "foo_operator_workload_operations_total",
    "Total number of managed workload writes",
    ["operation", "result"],
)

# Replica drift detection metrics
drift_detected_total = Counter(
    "foo_operator_drift_detected_total",
    "Total number of replica drift detections",
    ["kind", "resource_type"],
)

# Linked resource event metrics
linked_events_total = Counter(
    "foo_operator_linked_events_total",
    "Total number of linked pod events mapped to owners",
    ["lookup", "result"],
)

# API call metrics
api_call_total = Counter(
    "foo_operator_api_call_total",
    "Total number of API calls",
    ["api_type", "operation", "result"],
)

api_call_duration_seconds = Histogram(
    "foo_operator_api_call_duration_seconds",
    "Duration of API calls in seconds",
    ["api_type", "operation"],
    buckets=[0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0],
)

# Error metrics
error_total = Counter(
    "foo_operator_error_total",
    "Total number of errors",
    ["kind", "error_type"],
)
