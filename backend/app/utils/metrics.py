"""Prometheus metrics for request routing and submission."""

from prometheus_client import Counter, Histogram

submissions_total = Counter(
    "foia_submissions_total",
    "Total FOIA submission attempts",
    ["outcome"],
)

submission_latency_ms = Histogram(
    "foia_submission_latency_ms",
    "Submission attempt latency in milliseconds",
    ["outcome"],
    buckets=[10, 50, 100, 250, 500, 1000, 2500, 5000, 10000],
)

classification_fallback_total = Counter(
    "foia_classification_fallback_total",
    "Record types routed to the fallback office",
)

directory_fetch_total = Counter(
    "foia_directory_fetch_total",
    "Agency directory fetches",
    ["outcome"],
)

quota_denials_total = Counter(
    "foia_quota_denials_total",
    "Requests rejected by the monthly quota",
)


class PrometheusSubmissionMetrics:
    """Prometheus-based submission metrics implementation."""

    def record_attempt(self, outcome: str, latency_ms: float) -> None:
        """Record a submission attempt and its latency."""
        submissions_total.labels(outcome=outcome).inc()
        submission_latency_ms.labels(outcome=outcome).observe(latency_ms)

    def inc_fallback(self) -> None:
        """Increment classification fallback counter."""
        classification_fallback_total.inc()

    def inc_directory_fetch(self, outcome: str) -> None:
        """Increment directory fetch counter."""
        directory_fetch_total.labels(outcome=outcome).inc()

    def inc_quota_denial(self) -> None:
        """Increment quota denial counter."""
        quota_denials_total.inc()
