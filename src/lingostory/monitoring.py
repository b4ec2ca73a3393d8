"""Monitoring configuration for story generation."""
from prometheus_client import Counter, Histogram, start_http_server

# Generation metrics
stories_generated = Counter(
    "lingostory_stories_generated_total",
    "Total number of stories generated successfully",
    ["story_type", "length"],
)

generation_failures = Counter(
    "lingostory_generation_failures_total",
    "Total number of failed story generations",
    ["error_type"],
)

quota_rejections = Counter(
    "lingostory_quota_rejections_total",
    "Total number of generations rejected because the quota was used up",
)

generation_duration = Histogram(
    "lingostory_generation_duration_seconds",
    "Duration of provider calls in seconds",
    ["provider"],
    buckets=[1.0, 2.5, 5.0, 10.0, 20.0, 30.0],
)

# Story history metrics
favorite_toggles = Counter(
    "lingostory_favorite_toggles_total",
    "Total number of favorite toggles",
)

stories_deleted = Counter(
    "lingostory_stories_deleted_total",
    "Total number of deleted stories",
)

# Database metrics
db_errors = Counter(
    "lingostory_db_errors_total",
    "Total number of database errors",
    ["operation_type"],
)


def start_monitoring(port: int = 9090) -> None:
    """Start the Prometheus metrics server."""
    start_http_server(port)
