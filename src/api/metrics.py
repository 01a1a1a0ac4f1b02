from prometheus_client import Counter, Histogram, Gauge, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        # Counters register under several names; the base name may not be the key
        existing = REGISTRY._names_to_collectors
        return existing.get(name) or existing[f"{name}_total"]


REQUESTS_TOTAL = get_or_create_metric(
    "timeline_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "timeline_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

REMINDERS_SCHEDULED_TOTAL = get_or_create_metric(
    "timeline_reminders_scheduled_total", "Reminder instances handed to the notification facility", Counter
)

REMINDERS_CANCELLED_TOTAL = get_or_create_metric(
    "timeline_reminders_cancelled_total", "Reminder identifiers cancelled", Counter
)

REMINDER_FAILURES_TOTAL = get_or_create_metric(
    "timeline_reminder_failures_total", "Per-task reminder failures", Counter, labelnames=["kind"]
)

TASKS_EXTRACTED_TOTAL = get_or_create_metric(
    "timeline_tasks_extracted_total", "Candidates returned by extraction collaborators", Counter
)

CANDIDATES_DEDUPLICATED_TOTAL = get_or_create_metric(
    "timeline_candidates_deduplicated_total", "Extracted candidates dropped as duplicates", Counter
)

TASKS_GAUGE = get_or_create_metric(
    "timeline_tasks", "Tasks in the current collection", Gauge
)
