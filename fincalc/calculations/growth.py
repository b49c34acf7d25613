"""
Compound and Annuity Growth Calculations

Future value of lump sums and periodic contributions under fixed periodic
compounding. Rates passed to these functions are already periodic decimals;
use fincalc.calculations.rates to convert from annual percentages.

Zero rates fall back to linear growth instead of dividing by zero.
"""

import math
from typing import Tuple

DEFAULT_PERIODS_PER_STEP = 12


def future_value_lump_sum(
    principal: float, periodic_rate: float, num_periods: float
) -> float:
    """
    Calculate future value of a single deposit.

    Args:
        principal: Amount invested at period 0
        periodic_rate: Rate per period as decimal
        num_periods: Number of periods (may be fractional)

    Returns:
        principal * (1 + r) ** n
    """
    if periodic_rate == 0:
        return principal
    return principal * (1 + periodic_rate) ** num_periods


def future_value_annuity_due(
    payment: float, periodic_rate: float, num_periods: float
) -> float:
    """
    Calculate future value of level payments made at the start of each period.

    Args:
        payment: Payment per period
        periodic_rate: Rate per period as decimal
        num_periods: Number of payments

    Returns:
        Future value at the end of the last period
    """
    if periodic_rate == 0:
        return payment * num_periods

    growth = (1 + periodic_rate) ** num_periods
    return payment * (growth - 1) / periodic_rate * (1 + periodic_rate)


def future_value_ordinary_annuity(
    payment: float, periodic_rate: float, num_periods: float
) -> float:
    """Future value of level payments made at the end of each period."""
    if periodic_rate == 0:
        return payment * num_periods
    return payment * ((1 + periodic_rate) ** num_periods - 1) / periodic_rate


def present_value_ordinary_annuity(
    payment: float, periodic_rate: float, num_periods: float
) -> float:
    """
    Present value of level end-of-period payments.

    This is the loan amount a fixed payment can service over num_periods.
    """
    if num_periods <= 0:
        return 0.0
    if periodic_rate == 0:
        return payment * num_periods
    return payment * (1 - (1 + periodic_rate) ** -num_periods) / periodic_rate


def required_payment(
    target_amount: float, periodic_rate: float, num_periods: float
) -> float:
    """
    Calculate the start-of-period payment that grows to target_amount.

    Inverse of future_value_annuity_due.

    Returns:
        Payment per period, or math.inf when num_periods <= 0
        (target unreachable in zero time)
    """
    if num_periods <= 0:
        return math.inf
    if periodic_rate == 0:
        return target_amount / num_periods

    factor = ((1 + periodic_rate) ** num_periods - 1) / periodic_rate * (1 + periodic_rate)
    return target_amount / factor


def simulate_step_up(
    payment: float,
    periodic_rate: float,
    num_periods: int,
    step_up_rate: float,
    periods_per_step: int = DEFAULT_PERIODS_PER_STEP,
) -> Tuple[float, float]:
    """
    Accumulate a contribution that increases every periods_per_step periods.

    No closed form exists for an arbitrary step-up schedule, so this walks
    period by period with start-of-period deposits.

    Args:
        payment: Starting payment per period
        periodic_rate: Rate per period as decimal
        num_periods: Number of periods
        step_up_rate: Fractional increase per step (e.g., 0.10 for 10%)
        periods_per_step: Periods between increases (12 = yearly on monthly data)

    Returns:
        Tuple of (future_value, total_invested)
    """
    future_value = 0.0
    total_invested = 0.0
    current_payment = payment

    for period in range(1, int(num_periods) + 1):
        total_invested += current_payment
        future_value = (future_value + current_payment) * (1 + periodic_rate)

        if step_up_rate > 0 and period % periods_per_step == 0:
            current_payment = current_payment * (1 + step_up_rate)

    return future_value, total_invested


def contribution_future_value(
    payment: float,
    periodic_rate: float,
    num_periods: int,
    step_up_rate: float = 0.0,
    periods_per_step: int = DEFAULT_PERIODS_PER_STEP,
) -> Tuple[float, float]:
    """
    Future value of a contribution stream, closed form when it is level.

    Constant contributions use the annuity-due formula; step-up schedules
    fall back to simulate_step_up.

    Returns:
        Tuple of (future_value, total_invested)
    """
    if step_up_rate == 0:
        return (
            future_value_annuity_due(payment, periodic_rate, num_periods),
            payment * num_periods,
        )
    return simulate_step_up(
        payment, periodic_rate, num_periods, step_up_rate, periods_per_step
    )


def cagr(initial_value: float, final_value: float, years: float) -> float:
    """
    Compound annual growth rate as decimal.

    Returns 0 when initial_value or years is not positive, and -1 (total
    loss) when final_value is not positive.
    """
    if initial_value <= 0 or years <= 0:
        return 0.0
    if final_value <= 0:
        return -1.0
    return (final_value / initial_value) ** (1 / years) - 1
