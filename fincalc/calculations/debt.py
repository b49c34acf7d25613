"""
Debt Payoff Simulation

Month-by-month avalanche / snowball payoff of several debts under one fixed
monthly budget.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from fincalc.calculations.rates import periodic_rate, MONTHS_PER_YEAR

# Safety bound for budgets that never outrun accruing interest.
MAX_PAYOFF_MONTHS = 600

# Balances at or below this are treated as paid off.
PAYOFF_EPSILON = 0.01

AVALANCHE = "avalanche"
SNOWBALL = "snowball"
STRATEGIES = (AVALANCHE, SNOWBALL)


@dataclass
class Debt:
    """A single debt in the payoff plan."""

    name: str
    balance: float
    interest_rate: float  # Annual percent
    min_payment: float


@dataclass
class DebtOutcome:
    """How one debt fared over the simulation."""

    name: str
    payoff_month: Optional[int]
    interest_paid: float
    remaining_balance: float


@dataclass
class PayoffResult:
    """Result of a payoff simulation."""

    months: int
    total_interest: float
    capped: bool
    outcomes: List[DebtOutcome] = field(default_factory=list)
    schedule: List[Dict] = field(default_factory=list)
    balance_series: List[float] = field(default_factory=list)

    @property
    def years(self) -> float:
        return self.months / MONTHS_PER_YEAR


@dataclass
class _WorkingDebt:
    index: int
    debt: Debt
    balance: float
    interest_paid: float = 0.0


def _priority_order(working: List[_WorkingDebt], strategy: str) -> List[_WorkingDebt]:
    """Order remaining debts by strategy, ties kept in input order."""
    if strategy == AVALANCHE:
        return sorted(working, key=lambda w: (-w.debt.interest_rate, w.index))
    return sorted(working, key=lambda w: (w.balance, w.index))


def simulate_payoff(
    debts: Sequence[Debt],
    extra_payment: float = 0.0,
    strategy: str = AVALANCHE,
    max_months: int = MAX_PAYOFF_MONTHS,
) -> PayoffResult:
    """
    Simulate paying off debts with a fixed monthly budget.

    The budget is sum(min_payment) + extra_payment, fixed up front, so
    minimums freed by closed debts roll into the surplus. Each month:
    order by strategy, accrue a month of interest on everything, pay
    minimums, then send the remaining budget down the priority order.

    Args:
        debts: Debts to pay off (not mutated)
        extra_payment: Monthly amount on top of all minimums
        strategy: "avalanche" (highest rate first) or "snowball"
            (smallest balance first)
        max_months: Hard stop for divergent inputs

    Returns:
        PayoffResult; capped is True when max_months was reached with
        debt remaining

    Raises:
        ValueError: If strategy is unknown
    """
    if strategy not in STRATEGIES:
        raise ValueError(f"Unknown payoff strategy: {strategy}")

    working = [
        _WorkingDebt(index=i, debt=d, balance=d.balance) for i, d in enumerate(debts)
    ]
    balances = [d.balance for d in debts]
    payoff_months: List[Optional[int]] = [None] * len(debts)
    interest_paid = [0.0] * len(debts)

    monthly_budget = max(sum(d.min_payment for d in debts) + extra_payment, 0.0)
    total_interest = 0.0
    months = 0
    schedule = []
    balance_series = [sum(balances)]

    while working and months < max_months:
        months += 1
        working = _priority_order(working, strategy)

        month_interest = 0.0
        for item in working:
            interest = item.balance * periodic_rate(item.debt.interest_rate)
            item.balance += interest
            item.interest_paid += interest
            month_interest += interest
        total_interest += month_interest

        remaining = monthly_budget

        # Minimums first
        for item in working:
            if remaining <= 0:
                break
            pay = min(item.debt.min_payment, item.balance, remaining)
            item.balance -= pay
            remaining -= pay

        # Surplus cascades down the priority order
        for item in working:
            if remaining <= 0:
                break
            if item.balance <= 0:
                continue
            pay = min(item.balance, remaining)
            item.balance -= pay
            remaining -= pay

        for item in working:
            balances[item.index] = max(item.balance, 0.0)
            interest_paid[item.index] = item.interest_paid
            if item.balance <= PAYOFF_EPSILON:
                payoff_months[item.index] = months

        working = [item for item in working if item.balance > PAYOFF_EPSILON]

        total_balance = sum(balances[item.index] for item in working)
        schedule.append(
            {
                "month": months,
                "interest": round(month_interest, 2),
                "payment": round(monthly_budget - remaining, 2),
                "remaining_balance": round(total_balance, 2),
                "balances": [round(b, 2) for b in balances],
            }
        )
        balance_series.append(total_balance)

    outcomes = [
        DebtOutcome(
            name=debt.name,
            payoff_month=payoff_months[i],
            interest_paid=interest_paid[i],
            remaining_balance=balances[i],
        )
        for i, debt in enumerate(debts)
    ]

    return PayoffResult(
        months=months,
        total_interest=total_interest,
        capped=bool(working),
        outcomes=outcomes,
        schedule=schedule,
        balance_series=balance_series,
    )


def total_balance(debts: Sequence[Debt]) -> float:
    """Sum of all starting balances."""
    return sum(d.balance for d in debts)


def total_min_payment(debts: Sequence[Debt]) -> float:
    """Sum of all contractual minimum payments."""
    return sum(d.min_payment for d in debts)
