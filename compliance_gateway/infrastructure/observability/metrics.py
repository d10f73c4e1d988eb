"""Prometheus metrics for monitoring BAS syncs, vendor API health and risk distribution"""

from prometheus_client import Counter, Histogram

# BAS sync metrics
bas_sync_counter = Counter(
    "bas_sync_total",
    "BAS syncs attempted",
    ["source", "outcome"],  # xero | myob ; success | malformed | vendor_error | error
)

refund_counter = Counter(
    "bas_refund_total",
    "BAS syncs that resulted in a refund position",
    ["source"],
)

# Vendor API metrics
vendor_fetch_failures_counter = Counter(
    "vendor_fetch_failures_total",
    "Failed accounting platform API calls",
    ["source"],
)

# Risk scoring metrics
risk_score_counter = Counter(
    "risk_scores_total",
    "Client risk scores computed by level",
    ["level"],  # low | medium | high
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_bas_sync(source: str, outcome: str, refund: bool = False) -> None:
    """Record the outcome of one BAS sync"""
    bas_sync_counter.labels(source=source, outcome=outcome).inc()
    if outcome == "success" and refund:
        refund_counter.labels(source=source).inc()


def record_risk_levels(levels) -> None:
    """Record one count per scored client"""
    for level in levels:
        risk_score_counter.labels(level=level).inc()
