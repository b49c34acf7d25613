"""
Planning Calculators

FIRE, HRA exemption, emergency fund, net worth projection, savings runway
and affordability.
"""

import math
from datetime import date
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta

from fincalc.calculations.growth import (
    future_value_annuity_due,
    future_value_lump_sum,
    present_value_ordinary_annuity,
    required_payment,
)
from fincalc.calculations.rates import (
    MONTHS_PER_YEAR,
    annual_rate,
    periodic_rate,
    real_return_percent,
)

LEAN_FIRE_MULTIPLIER = 0.75
FAT_FIRE_MULTIPLIER = 1.5

RISK_MULTIPLIERS = {
    "low": 3,  # Stable job, dual income
    "medium": 6,
    "high": 12,  # Freelance, single income, health issues
}
DEPENDENT_MULTIPLIER = 0.5

HOUSING_INCOME_SHARE = 0.28
DEBT_INCOME_SHARE = 0.36
CAR_LOAN_YEARS = 5
ESSENTIALS_INCOME_SHARE = 0.5
PURCHASE_SAVINGS_SHARE = 0.2
PURCHASE_SAVINGS_MONTHS = 6


def _savings_at(current_savings: float, contribution: float, rate: float, months: int) -> float:
    """Existing savings plus start-of-month contributions after months."""
    return future_value_lump_sum(current_savings, rate, months) + future_value_annuity_due(
        contribution, rate, months
    )


def fire(
    monthly_expense: float,
    current_age: int,
    retirement_age: int,
    coast_age: int,
    inflation_rate: float,
    expected_return: float,
    withdrawal_rate: float,
    current_savings: float,
    monthly_contribution: float,
) -> Dict:
    """
    FIRE number, projected savings and the monthly contribution to close
    the gap.

    Expenses are inflated to the retirement age and divided by the safe
    withdrawal rate. The coast projection stops contributing at coast_age
    and lets the balance compound until retirement.
    """
    years_to_retirement = max(retirement_age - current_age, 0)
    months_to_retirement = years_to_retirement * MONTHS_PER_YEAR
    monthly_rate = periodic_rate(expected_return)

    future_annual_expense = future_value_lump_sum(
        monthly_expense * MONTHS_PER_YEAR, annual_rate(inflation_rate), years_to_retirement
    )
    if withdrawal_rate > 0:
        fire_number = future_annual_expense / annual_rate(withdrawal_rate)
    else:
        fire_number = math.inf

    total_at_retirement = _savings_at(
        current_savings, monthly_contribution, monthly_rate, months_to_retirement
    )
    shortfall = fire_number - total_at_retirement

    if months_to_retirement == 0:
        required_contribution = max(shortfall, 0.0)
    else:
        gap = fire_number - future_value_lump_sum(
            current_savings, monthly_rate, months_to_retirement
        )
        required_contribution = (
            required_payment(gap, monthly_rate, months_to_retirement) if gap > 0 else 0.0
        )

    months_to_coast = max((coast_age - current_age) * MONTHS_PER_YEAR, 0)
    months_after_coast = max((retirement_age - coast_age) * MONTHS_PER_YEAR, 0)
    at_coast = _savings_at(current_savings, monthly_contribution, monthly_rate, months_to_coast)
    at_retire = future_value_lump_sum(at_coast, monthly_rate, months_after_coast)

    projection: List[Dict] = []
    balance = current_savings
    for year in range(years_to_retirement + 1):
        projection.append({"age": current_age + year, "value": balance})
        balance = _savings_at(balance, monthly_contribution, monthly_rate, MONTHS_PER_YEAR)

    return {
        "fire_number": fire_number,
        "lean_fire": fire_number * LEAN_FIRE_MULTIPLIER,
        "fat_fire": fire_number * FAT_FIRE_MULTIPLIER,
        "future_annual_expense": future_annual_expense,
        "total_at_retirement": total_at_retirement,
        "shortfall": shortfall,
        "required_monthly_contribution": required_contribution,
        "coast": {
            "at_coast": at_coast,
            "at_retire": at_retire,
            "gap": fire_number - at_retire,
        },
        "projection": projection,
    }


def hra(
    basic: float,
    hra_received: float,
    annual_rent: float,
    is_metro: bool = True,
    da: float = 0.0,
    commission: float = 0.0,
) -> Dict:
    """
    House rent allowance exemption.

    The exemption is the least of HRA received, rent paid above 10% of
    salary, and 50% (metro) or 40% (non-metro) of salary.
    """
    salary_base = basic + da + commission
    rent_excess = max(annual_rent - 0.1 * salary_base, 0.0)
    metro_limit = (0.5 if is_metro else 0.4) * salary_base
    exemption = max(min(hra_received, rent_excess, metro_limit), 0.0)

    return {
        "salary_base": salary_base,
        "rent_excess": rent_excess,
        "metro_limit": metro_limit,
        "exemption": exemption,
        "taxable": max(hra_received - exemption, 0.0),
    }


def _emergency_status(progress: float) -> str:
    if progress >= 100:
        return "Fully Funded!"
    if progress >= 75:
        return "Almost There!"
    if progress >= 50:
        return "Good Progress"
    if progress >= 25:
        return "Getting Started"
    return "Needs Attention"


def emergency_fund(
    monthly_expenses: float,
    current_savings: float,
    monthly_savings: float,
    risk_level: str = "medium",
    dependents: int = 0,
) -> Dict:
    """
    Emergency fund target and time to reach it.

    months_to_target is math.inf when nothing is being saved and there is
    still a shortfall.
    """
    multiplier = RISK_MULTIPLIERS[risk_level] + dependents * DEPENDENT_MULTIPLIER
    target = monthly_expenses * multiplier
    shortfall = max(target - current_savings, 0.0)

    if shortfall == 0:
        months_to_target = 0
    elif monthly_savings > 0:
        months_to_target = math.ceil(shortfall / monthly_savings)
    else:
        months_to_target = math.inf

    progress = min(current_savings / target * 100, 100.0) if target > 0 else 100.0

    return {
        "multiplier": multiplier,
        "target_amount": target,
        "shortfall": shortfall,
        "months_to_target": months_to_target,
        "progress": progress,
        "status": _emergency_status(progress),
    }


def net_worth_projection(
    current_age: int,
    current_net_worth: float,
    annual_contribution: float,
    expected_return: float,
    inflation_rate: float,
    projection_years: int,
) -> Dict:
    """Year-by-year net worth in today's money, contributions at year end."""
    real_return = real_return_percent(expected_return, inflation_rate)
    growth = 1 + annual_rate(real_return)

    points = []
    net_worth = current_net_worth
    for year in range(projection_years + 1):
        points.append(
            {
                "year": current_age + year,
                "net_worth": net_worth,
                "contribution": year * annual_contribution,
            }
        )
        net_worth = net_worth * growth + annual_contribution

    final_net_worth = points[-1]["net_worth"]
    total_contributions = annual_contribution * projection_years

    return {
        "real_return": real_return,
        "projection": points,
        "final_net_worth": final_net_worth,
        "total_contributions": total_contributions,
        "total_growth": final_net_worth - current_net_worth - total_contributions,
        "max_net_worth": max(p["net_worth"] for p in points),
    }


def months_after(start: date, months: float) -> Optional[date]:
    """
    Date that lies a whole number of months after start.

    Returns None when the result falls outside the range datetime.date can
    represent (runways of thousands of years, start dates near 9999).
    """
    try:
        return start + relativedelta(months=int(months))
    except (ValueError, OverflowError):
        return None


def savings_runway(
    current_savings: float,
    monthly_income: float,
    monthly_expenses: float,
    emergency_fund_reserve: float = 0.0,
    as_of: Optional[date] = None,
) -> Dict:
    """
    How long savings above the emergency reserve last at the current burn.

    A non-negative cash flow never runs out: runway_months is math.inf and
    runout_date is None. runout_date is also None when the run-out lies
    beyond the last representable date.
    """
    if as_of is None:
        as_of = date.today()

    burn_rate = monthly_expenses - monthly_income
    positive_cashflow = burn_rate <= 0
    available = max(current_savings - emergency_fund_reserve, 0.0)

    if positive_cashflow:
        runway_months = math.inf
        runout_date = None
    else:
        runway_months = available / burn_rate
        runout_date = months_after(as_of, runway_months)

    return {
        "monthly_burn_rate": burn_rate,
        "positive_cashflow": positive_cashflow,
        "available_funds": available,
        "runway_months": runway_months,
        "runway_years": runway_months / MONTHS_PER_YEAR,
        "runout_date": runout_date,
    }


def affordability(
    category: str,
    monthly_income: float,
    monthly_debts: float,
    down_payment: float,
    interest_rate: float,
    loan_term_years: int = 30,
) -> Dict:
    """
    What price fits the 28/36 rule.

    Homes and cars are priced as the loan the spare debt budget can service
    plus the down payment; cars use a fixed five year term. Other purchases
    get six months of saving 20% of what is left after debts and essentials.
    """
    max_monthly_housing = monthly_income * HOUSING_INCOME_SHARE
    max_total_debt = monthly_income * DEBT_INCOME_SHARE
    max_monthly_payment = max_total_debt - monthly_debts

    if category in ("home", "car"):
        years = loan_term_years if category == "home" else CAR_LOAN_YEARS
        loan_amount = present_value_ordinary_annuity(
            max_monthly_payment, periodic_rate(interest_rate), years * MONTHS_PER_YEAR
        )
        affordable = max(loan_amount + down_payment, 0.0)
        monthly_payment = max_monthly_payment
    else:
        discretionary = monthly_income - monthly_debts - monthly_income * ESSENTIALS_INCOME_SHARE
        affordable = max(discretionary * PURCHASE_SAVINGS_SHARE * PURCHASE_SAVINGS_MONTHS, 0.0)
        monthly_payment = 0.0

    return {
        "max_monthly_housing": max_monthly_housing,
        "max_total_debt": max_total_debt,
        "max_monthly_payment": max_monthly_payment,
        "affordable_amount": affordable,
        "monthly_payment": monthly_payment,
        "total_loan_amount": affordable - down_payment,
    }
