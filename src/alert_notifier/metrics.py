"""
Prometheus metrics for alert-notifier.

Counters are labelled by channel type only; notifier names are user
supplied and would make label cardinality unbounded.
"""

from __future__ import annotations

from prometheus_client import Counter

notifier_deliveries_total = Counter(
    "notifier_deliveries_total",
    "Total notification delivery attempts by outcome",
    ["channel", "result"],
)
notifier_render_errors_total = Counter(
    "notifier_render_errors_total",
    "Total notifications rendered with a template error",
    ["channel"],
)
