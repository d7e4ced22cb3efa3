"""Prometheus metrics for monitoring recomputation, pooled flows and snapshot activity"""

from prometheus_client import Counter, Histogram

from treasury_pooling.domain.models import DerivedState

# Engine metrics
recompute_counter = Counter(
    "treasury_recompute_total",
    "Total derived-state recomputation passes",
)

recompute_duration_histogram = Histogram(
    "treasury_recompute_duration_seconds",
    "Time spent recomputing derived state",
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0],
)

skipped_entries_counter = Counter(
    "treasury_skipped_entries_total",
    "Incomplete client entries skipped during aggregation",
)

pooled_links_counter = Counter(
    "treasury_pooling_links_total",
    "Pooling links emitted by sink",
    ["target"],  # RTC | Restricted
)

# Snapshot metrics
snapshot_operation_counter = Counter(
    "treasury_snapshot_operations_total",
    "Snapshot store operations",
    ["operation"],  # save | load | delete | save_current | load_current
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_recompute(state: DerivedState, duration_seconds: float) -> None:
    """Record metrics for one recomputation pass"""
    recompute_counter.inc()
    recompute_duration_histogram.observe(duration_seconds)

    if state.skipped_entries:
        skipped_entries_counter.inc(state.skipped_entries)

    for link in state.pooling_graph.links:
        pooled_links_counter.labels(target=link.target).inc()
