"""
Start Now vs. Wait Projections

Builds two parallel balance series over the same horizon, one contributing
from the first month and one delayed, plus a low-return pass used to grade
how likely each is to reach a goal.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

from fincalc.calculations.rates import periodic_rate

# Percentage points knocked off the expected return for the pessimistic pass.
DEFAULT_LOW_RETURN_BUFFER = 3.0
DEFAULT_DELAY_MONTHS = 12
DEFAULT_MAX_POINTS = 160

PROBABILITY_HIGH = "high"
PROBABILITY_MEDIUM = "medium"
PROBABILITY_LOW = "low"


@dataclass
class StartNowVsWait:
    """Both projections and the comparison between them."""

    start_now_series: List[float]
    wait_series: List[float]
    cost_of_waiting: float
    target: Optional[float] = None
    start_now_low_final: Optional[float] = None
    wait_low_final: Optional[float] = None
    probability: Optional[Dict[str, str]] = None

    @property
    def start_now_final(self) -> float:
        return self.start_now_series[-1]

    @property
    def wait_final(self) -> float:
        return self.wait_series[-1]


def project_contributions(
    contribution: float,
    rate: float,
    months_total: int,
    delay_months: int = 0,
) -> List[float]:
    """
    Running balance of a monthly contribution that starts after a delay.

    series[0] is 0; entry m is the balance after month m. Contributions are
    made at the start of a month once m exceeds delay_months, then the month
    compounds.

    Args:
        contribution: Amount added each contributing month
        rate: Monthly rate as decimal
        months_total: Horizon in months
        delay_months: Months skipped before contributing

    Returns:
        Series of months_total + 1 balances
    """
    series = [0.0]
    balance = 0.0
    for month in range(1, months_total + 1):
        if month > delay_months:
            balance += contribution
        balance *= 1 + rate
        series.append(balance)
    return series


def cost_of_waiting(start_now: Sequence[float], wait: Sequence[float]) -> float:
    """Final-balance gap between starting now and waiting, never negative."""
    return max(start_now[-1] - wait[-1], 0.0)


def cost_of_waiting_against_target(wait_final: float, target: float) -> float:
    """How far the delayed projection falls short of a fixed target."""
    return max(target - wait_final, 0.0)


def classify_probability(base_final: float, low_final: float, target: float) -> str:
    """
    Grade how likely a projection is to reach target.

    high: even the low-return projection gets there
    medium: only the expected-return projection gets there
    low: neither does
    """
    if low_final >= target:
        return PROBABILITY_HIGH
    if base_final >= target:
        return PROBABILITY_MEDIUM
    return PROBABILITY_LOW


def compare_start_now_vs_wait(
    contribution: float,
    annual_return_percent: float,
    months_total: int,
    delay_months: int = DEFAULT_DELAY_MONTHS,
    target: Optional[float] = None,
    low_return_buffer: float = DEFAULT_LOW_RETURN_BUFFER,
) -> StartNowVsWait:
    """
    Compare investing from month 0 against investing after delay_months.

    When a target is given, a second pass at a return reduced by
    low_return_buffer percentage points feeds classify_probability for both
    scenarios.
    """
    rate = periodic_rate(annual_return_percent)
    start_now = project_contributions(contribution, rate, months_total)
    wait = project_contributions(contribution, rate, months_total, delay_months)

    result = StartNowVsWait(
        start_now_series=start_now,
        wait_series=wait,
        cost_of_waiting=cost_of_waiting(start_now, wait),
        target=target,
    )

    if target is None:
        return result

    low_rate = periodic_rate(max(annual_return_percent - low_return_buffer, 0.0))
    start_now_low = project_contributions(contribution, low_rate, months_total)
    wait_low = project_contributions(contribution, low_rate, months_total, delay_months)

    result.start_now_low_final = start_now_low[-1]
    result.wait_low_final = wait_low[-1]
    result.probability = {
        "start_now": classify_probability(start_now[-1], start_now_low[-1], target),
        "wait": classify_probability(wait[-1], wait_low[-1], target),
    }
    return result


def sample_series(
    series: Sequence[float], max_points: int = DEFAULT_MAX_POINTS
) -> List[Tuple[int, float]]:
    """
    Thin a series down for charting.

    Keeps every step-th point (step = len // max_points, at least 1) and
    always the last one.

    Returns:
        List of (index, value) pairs
    """
    if not series:
        return []

    step = max(len(series) // max_points, 1)
    indices = np.arange(0, len(series), step)
    if indices[-1] != len(series) - 1:
        indices = np.append(indices, len(series) - 1)

    return [(int(i), float(series[i])) for i in indices]
