"""
Financial Calculation Engine

Pure calculation modules behind the calculators. Nothing here performs
I/O; out-of-domain inputs produce sentinel values (0, math.inf) rather
than exceptions.
"""

from fincalc.calculations import (
    debt,
    growth,
    irr,
    planning,
    projections,
    rates,
    savings,
)

__all__ = ["debt", "growth", "irr", "planning", "projections", "rates", "savings"]
