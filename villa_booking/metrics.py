"""
Prometheus metrics for quotes, holds, reservation transitions and notifications.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from villa_booking.metrics import quote_duration, quotes_total
    >>> with quote_duration.time():
    ...     result = quote(engine, check_in, check_out)
    >>> quotes_total.labels(status="success").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Quote Metrics
# =============================================================================

quotes_total = Counter(
    "villa_quotes_total",
    "Total number of quote requests",
    ["status"],
)
"""
Counter for quote requests.

Labels:
    status: success, validation_error, invalid_coupon, date_conflict, not_found
"""

quote_duration = Histogram(
    "villa_quote_duration_seconds",
    "Duration of quote computation in seconds",
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, float("inf")),
)
"""Histogram for quote latency, database reads included."""

# =============================================================================
# Reservation Metrics
# =============================================================================

holds_total = Counter(
    "villa_holds_total",
    "Total number of hold creation attempts",
    ["status"],
)
"""
Counter for hold creation.

Labels:
    status: created or date_conflict
"""

reservation_transitions = Counter(
    "villa_reservation_transitions_total",
    "Total reservation lifecycle transitions attempted",
    ["transition", "status"],
)
"""
Counter for lifecycle transitions.

Labels:
    transition: submit, approve, decline, cancel, reschedule, mark_paid, expire
    status: success or rejected
"""

blocked_periods_total = Counter(
    "villa_blocked_periods_total",
    "Total number of block-dates attempts",
    ["status"],
)
"""Counter for admin block-dates requests (created or date_conflict)."""

# =============================================================================
# Notification Metrics
# =============================================================================

notifications_total = Counter(
    "villa_notifications_total",
    "Total notifications handed to the notification collaborator",
    ["kind", "status"],
)
"""
Counter for notifications.

Labels:
    kind: confirmation, approval_required, approved, declined, cancelled,
        rescheduled, reminder
    status: sent or failed
"""
