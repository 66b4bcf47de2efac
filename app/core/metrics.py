"""
Prometheus metrics for the basketball stats API.

HTTP request metrics come from prometheus-fastapi-instrumentator (see
``app.main``); this module holds the domain counters:

- Box-score mutations by kind (upsert, increment, update, delete)
- Match lifecycle transitions
- NBA API (balldontlie) request outcomes and circuit breaker state
- NBA sync step results
"""
from prometheus_client import Counter, Gauge

from app.core.database import engine

# Box score metrics
stat_mutations_total = Counter(
    "stat_mutations_total",
    "Total box-score mutations",
    ["kind"]
)

match_transitions_total = Counter(
    "match_transitions_total",
    "Total match status transitions",
    ["from_status", "to_status"]
)

# NBA API metrics
nba_api_requests_success_total = Counter(
    "nba_api_requests_success_total",
    "Total successful balldontlie API requests",
    ["endpoint"]
)

nba_api_requests_failure_total = Counter(
    "nba_api_requests_failure_total",
    "Total failed balldontlie API requests",
    ["endpoint", "error_type"]
)

nba_sync_records_total = Counter(
    "nba_sync_records_total",
    "Total records merged by the NBA sync",
    ["entity"]
)

nba_sync_steps_total = Counter(
    "nba_sync_steps_total",
    "Total NBA sync steps by outcome",
    ["step", "outcome"]
)

circuit_breaker_state = Gauge(
    "circuit_breaker_state",
    "Circuit breaker state (0=closed, 1=open, 2=half_open)",
    ["service"]
)

# Database metrics
db_pool_connections_checked_out = Gauge(
    "db_pool_connections_checked_out",
    "Number of checked out database connections"
)

_BREAKER_STATE_VALUES = {"closed": 0, "open": 1, "half-open": 2}


def record_stat_mutation(kind: str):
    """Record a box-score mutation (upsert, increment, update, delete)."""
    stat_mutations_total.labels(kind=kind).inc()


def record_match_transition(from_status: str, to_status: str):
    match_transitions_total.labels(from_status=from_status, to_status=to_status).inc()


def record_nba_api_request_success(endpoint: str):
    nba_api_requests_success_total.labels(endpoint=endpoint).inc()


def record_nba_api_request_failure(endpoint: str, error_type: str = "unknown"):
    nba_api_requests_failure_total.labels(endpoint=endpoint, error_type=error_type).inc()


def record_sync_records(entity: str, count: int):
    if count:
        nba_sync_records_total.labels(entity=entity).inc(count)


def record_sync_step(step: str, success: bool):
    nba_sync_steps_total.labels(step=step, outcome="success" if success else "failure").inc()


def update_breaker_state(service: str, state: str):
    """Mirror a pybreaker state name into the gauge."""
    circuit_breaker_state.labels(service=service).set(_BREAKER_STATE_VALUES.get(state, 0))


def update_db_pool_metrics():
    """Update connection pool metrics; pools without checkout tracking are skipped."""
    checkedout = getattr(engine.pool, "checkedout", None)
    if checkedout is not None:
        db_pool_connections_checked_out.set(checkedout())
