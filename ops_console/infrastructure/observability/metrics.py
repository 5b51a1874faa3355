"""Prometheus metrics for payroll runs, roster locks and store health"""

from prometheus_client import Counter, Histogram

# Payroll metrics
payroll_records_counter = Counter(
    "ops_payroll_records_total",
    "Payroll records computed",
    ["pricing", "persisted"],  # payable_amount | hourly_rate ; yes | no
)

payroll_negative_net_counter = Counter(
    "ops_payroll_negative_net_total",
    "Payroll records where deductions exceeded gross pay",
)

# Roster metrics
roster_edit_rejected_counter = Counter(
    "ops_roster_edit_rejected_total",
    "Roster edits rejected because the entry was locked or approved against",
)

# Store metrics
store_failure_counter = Counter(
    "ops_store_failures_total",
    "Failed calls to the persistence store",
    ["kind"],  # connectivity | constraint
)

store_latency_histogram = Histogram(
    "ops_store_latency_seconds",
    "Remote store response time",
    ["method"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

# Service health
request_duration_histogram = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint", "status"],
)


def record_payroll(pricing: str, net_pay, persisted: bool) -> None:
    """Count one computed payroll and flag owed-back results"""
    payroll_records_counter.labels(pricing=pricing, persisted="yes" if persisted else "no").inc()
    if net_pay < 0:
        payroll_negative_net_counter.inc()
