"""
Circuit breaker for the balldontlie NBA API.

Uses pybreaker. Once ``fail_max`` consecutive calls fail the breaker opens and
every further call fails immediately with the fallback until ``reset_timeout``
elapses, so a sync run against a dead upstream skips its remaining steps
quickly instead of timing out on each one.

States:
- CLOSED: Requests pass through normally
- OPEN: Requests fail immediately with fallback
- HALF_OPEN: One request allowed to test if the service has recovered
"""
from typing import Any, Callable

from pybreaker import CircuitBreaker, CircuitBreakerError, CircuitBreakerListener

from app.core import metrics
from app.core.logging import get_logger

logger = get_logger(__name__)

DEFAULT_FAIL_MAX = 5  # Number of failures before opening circuit
DEFAULT_RESET_TIMEOUT = 60  # Seconds before attempting to close circuit


class MetricsListener(CircuitBreakerListener):
    """Publishes breaker state changes to Prometheus and the log."""

    def state_change(self, cb, old_state, new_state):
        old_name = old_state.name if old_state else "none"
        logger.warning(f"Circuit breaker '{cb.name}' changed state: {old_name} -> {new_state.name}")
        metrics.update_breaker_state(cb.name, new_state.name)


def create_breaker(
    name: str,
    fail_max: int = DEFAULT_FAIL_MAX,
    reset_timeout: int = DEFAULT_RESET_TIMEOUT,
) -> CircuitBreaker:
    return CircuitBreaker(
        fail_max=fail_max,
        reset_timeout=reset_timeout,
        name=name,
        listeners=[MetricsListener()],
    )


nba_api_breaker = create_breaker("nba_api")


def get_breaker_state(breaker: CircuitBreaker) -> str:
    """Current state name: 'closed', 'open' or 'half-open'."""
    return breaker.current_state


def reset_breaker(breaker: CircuitBreaker) -> None:
    """
    Manually reset a circuit breaker to closed state.

    Only reset if the service is known to have recovered.
    """
    breaker.close()
    logger.warning(f"Circuit breaker '{breaker.name}' manually reset to CLOSED state")


def call_with_breaker(
    breaker: CircuitBreaker,
    func: Callable,
    *args,
    fallback: Any = None,
    **kwargs,
):
    """
    Call ``func`` through ``breaker``.

    Exceptions raised by ``func`` still propagate (and count as failures);
    only an open circuit is turned into ``fallback``.

    Example:
        payload = call_with_breaker(nba_api_breaker, session.get, "/teams")
    """
    try:
        return breaker.call(func, *args, **kwargs)
    except CircuitBreakerError:
        logger.warning(
            f"Circuit breaker '{breaker.name}' is OPEN - using fallback for {getattr(func, '__name__', func)}"
        )
        return fallback
