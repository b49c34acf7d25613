"""
Rate Conversions

Every calculator accepts annual percentages and converts them here, so all
of them round the same way.
"""

MONTHS_PER_YEAR = 12

COMPOUNDING_FREQUENCIES = {
    "yearly": 1,
    "quarterly": 4,
    "monthly": 12,
}


def periodic_rate(annual_percent: float, periods_per_year: int = MONTHS_PER_YEAR) -> float:
    """
    Convert an annual percentage into a periodic decimal rate.

    Args:
        annual_percent: Annual rate in percent (e.g., 12 for 12%)
        periods_per_year: Compounding periods per year (12 = monthly)

    Returns:
        Periodic rate as decimal (e.g., 0.01 for 12% monthly)
    """
    return annual_percent / 100 / periods_per_year


def annual_rate(annual_percent: float) -> float:
    """Convert an annual percentage into an annual decimal rate."""
    return periodic_rate(annual_percent, 1)


def real_return_percent(nominal_percent: float, inflation_percent: float) -> float:
    """Inflation-adjusted (Fisher) return, in percent."""
    return ((1 + annual_rate(nominal_percent)) / (1 + annual_rate(inflation_percent)) - 1) * 100
