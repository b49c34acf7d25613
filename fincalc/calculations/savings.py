"""
Savings and Investment Calculators

SIP, goal SIP, FD, RD, CAGR, mutual fund, NSC, SSY and NPS projections.
Each takes annual percentages and returns a dict of results.
"""

from typing import Dict

from fincalc.calculations.growth import (
    cagr,
    contribution_future_value,
    future_value_annuity_due,
    future_value_lump_sum,
    future_value_ordinary_annuity,
    required_payment,
)
from fincalc.calculations.rates import (
    COMPOUNDING_FREQUENCIES,
    MONTHS_PER_YEAR,
    annual_rate,
    periodic_rate,
)

SSY_DEPOSIT_YEARS = 15
SSY_MATURITY_YEARS = 21


def sip(
    monthly_investment: float,
    expected_return: float,
    years: int,
    inflation_rate: float = 0.0,
    step_up_percent: float = 0.0,
) -> Dict:
    """
    Project a monthly SIP, optionally stepped up once a year.

    Args:
        monthly_investment: Starting monthly contribution
        expected_return: Annual return in percent
        years: Investment horizon in years
        inflation_rate: Annual inflation in percent, used for real value
        step_up_percent: Yearly increase of the contribution in percent

    Returns:
        Dict with invested, future_value, returns and real_value
    """
    months = years * MONTHS_PER_YEAR
    monthly_rate = periodic_rate(expected_return)

    future_value, invested = contribution_future_value(
        monthly_investment,
        monthly_rate,
        months,
        step_up_rate=step_up_percent / 100,
    )

    # Deflate at the monthly inflation rate over the same horizon
    real_value = future_value / (1 + periodic_rate(inflation_rate)) ** months

    return {
        "invested": invested,
        "future_value": future_value,
        "returns": future_value - invested,
        "real_value": real_value,
    }


def goal_sip(
    goal_today: float,
    annual_return: float,
    inflation: float,
    years: int,
) -> Dict:
    """Monthly SIP needed to reach an inflation-adjusted goal."""
    months = years * MONTHS_PER_YEAR
    future_cost = future_value_lump_sum(goal_today, annual_rate(inflation), years)
    monthly_sip = required_payment(future_cost, periodic_rate(annual_return), months)
    invested = monthly_sip * months

    return {
        "future_cost": future_cost,
        "required_sip": monthly_sip,
        "invested": invested,
        "returns": future_cost - invested,
    }


def fixed_deposit(
    principal: float,
    interest_rate: float,
    years: float,
    compounding: str = "quarterly",
    tax_rate: float = 0.0,
) -> Dict:
    """
    Fixed deposit maturity with tax on interest.

    Uses A = P(1 + r/n)^(nt). Effective returns are simple annual averages
    of the total gain.
    """
    n = COMPOUNDING_FREQUENCIES[compounding]
    maturity = future_value_lump_sum(principal, periodic_rate(interest_rate, n), n * years)
    interest = maturity - principal
    tax = interest * tax_rate / 100
    post_tax_maturity = maturity - tax

    if principal > 0 and years > 0:
        effective_return = (maturity / principal - 1) / years * 100
        post_tax_effective_return = (post_tax_maturity / principal - 1) / years * 100
    else:
        effective_return = 0.0
        post_tax_effective_return = 0.0

    return {
        "maturity_amount": maturity,
        "total_interest": interest,
        "tax_on_interest": tax,
        "post_tax_maturity_amount": post_tax_maturity,
        "post_tax_returns": post_tax_maturity - principal,
        "effective_return": effective_return,
        "post_tax_effective_return": post_tax_effective_return,
    }


def recurring_deposit(monthly_investment: float, annual_rate_percent: float, years: int) -> Dict:
    """Recurring deposit with monthly start-of-period deposits."""
    months = years * MONTHS_PER_YEAR
    maturity = future_value_annuity_due(
        monthly_investment, periodic_rate(annual_rate_percent), months
    )
    invested = monthly_investment * months
    return {
        "maturity_value": maturity,
        "invested": invested,
        "interest": maturity - invested,
    }


def cagr_summary(initial: float, final_value: float, years: float) -> Dict:
    """CAGR and absolute return in percent, plus the absolute gain."""
    if initial <= 0 or years <= 0:
        return {"cagr": 0.0, "absolute_return": 0.0, "gains": 0.0}

    gains = final_value - initial
    return {
        "cagr": cagr(initial, final_value, years) * 100,
        "absolute_return": gains / initial * 100,
        "gains": gains,
    }


def mutual_fund(
    method: str,
    rate: float,
    years: int,
    lump_sum: float = 0.0,
    monthly_sip: float = 0.0,
) -> Dict:
    """
    Mutual fund projection for a lump sum or a monthly SIP.

    Lump sums compound annually; SIPs compound monthly with start-of-month
    deposits.
    """
    if method == "lumpsum":
        total = future_value_lump_sum(lump_sum, annual_rate(rate), years)
        invested = lump_sum
    else:
        months = years * MONTHS_PER_YEAR
        total = future_value_annuity_due(monthly_sip, periodic_rate(rate), months)
        invested = monthly_sip * months

    return {"invested": invested, "total": total, "gains": total - invested}


def nsc(investment: float, rate: float, years: int = 5) -> Dict:
    """National Savings Certificate, compounded annually."""
    maturity = future_value_lump_sum(investment, annual_rate(rate), years)
    return {"maturity": maturity, "interest": maturity - investment}


def ssy(yearly_investment: float, rate: float, start_year: int) -> Dict:
    """
    Sukanya Samriddhi Yojana maturity.

    Deposits are made at the end of each of the first 15 years and the
    balance keeps compounding until year 21.
    """
    r = annual_rate(rate)
    deposits = future_value_ordinary_annuity(yearly_investment, r, SSY_DEPOSIT_YEARS)
    maturity = future_value_lump_sum(deposits, r, SSY_MATURITY_YEARS - SSY_DEPOSIT_YEARS)
    invested = yearly_investment * SSY_DEPOSIT_YEARS

    return {
        "maturity_year": start_year + SSY_MATURITY_YEARS,
        "maturity_value": maturity,
        "total_investment": invested,
        "total_interest": maturity - invested,
    }


def nps(
    monthly_contribution: float,
    expected_return: float,
    current_age: int,
    retirement_age: int,
    pension_allocation: float = 40.0,
    annuity_rate: float = 6.0,
) -> Dict:
    """
    National Pension System corpus split into annuity and lump sum.

    pension_years is how long the annuity payout takes to return the
    pension corpus, None when the annuity rate is 0.
    """
    months = max((retirement_age - current_age) * MONTHS_PER_YEAR, 0)
    corpus = future_value_annuity_due(
        monthly_contribution, periodic_rate(expected_return), months
    )
    invested = monthly_contribution * months
    pension_corpus = corpus * pension_allocation / 100

    return {
        "corpus": corpus,
        "invested": invested,
        "interest": corpus - invested,
        "pension_corpus": pension_corpus,
        "lump_sum": corpus - pension_corpus,
        "monthly_pension": pension_corpus * annual_rate(annuity_rate) / MONTHS_PER_YEAR,
        "pension_years": 1 / annual_rate(annuity_rate) if annuity_rate > 0 else None,
    }
