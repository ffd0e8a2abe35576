"""Exponential backoff schedule for Redis reconnection."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ReconnectPolicy:
    """Bounded reconnection budget.

    Attempt *i* (0-indexed) waits ``min(base_delay * 2**i, max_delay)``
    seconds before connecting. No attempt is made past ``max_retries``.
    """

    max_retries: int = 5
    base_delay: float = 1.0
    max_delay: float = 30.0


def compute_delay(attempt: int, policy: ReconnectPolicy) -> float:
    """Compute the delay in seconds before reconnection *attempt*."""
    delay: float = policy.base_delay * (2**attempt)
    return min(delay, policy.max_delay)


def delay_schedule(policy: ReconnectPolicy) -> list[float]:
    """Return every delay the policy will ever wait, in order."""
    return [compute_delay(attempt, policy) for attempt in range(policy.max_retries)]
