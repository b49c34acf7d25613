"""
Financial calculation API endpoints.

These endpoints accept calculator inputs and return calculated results.
Rates are annual percentages throughout (e.g., 12 for 12%).
"""

import logging
import math
from datetime import date
from typing import Annotated, Any, Dict, List, Literal, Optional, Tuple

from fastapi import APIRouter
from pydantic import BaseModel, Field

from fincalc.calculations import debt, irr, planning, projections, savings

logger = logging.getLogger(__name__)

router = APIRouter()

Percent = Annotated[float, Field(ge=0, le=100)]


def _finite(value: Any) -> Any:
    """Replace non-finite floats with None, recursing into containers."""
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if isinstance(value, dict):
        return {k: _finite(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_finite(v) for v in value]
    return value


# === Savings calculators ===

class SIPInput(BaseModel):
    """Input for SIP calculation."""

    monthly_investment: float = Field(ge=0)
    expected_return: Percent
    years: int = Field(ge=0, le=100)
    inflation_rate: float = Field(default=0.0, ge=0, le=100)
    step_up_percent: float = Field(default=0.0, ge=0, le=100)


@router.post("/sip")
async def calculate_sip(inputs: SIPInput):
    """Project a monthly SIP with an optional yearly step-up."""
    return _finite(savings.sip(**inputs.model_dump()))


class GoalSIPInput(BaseModel):
    """Input for goal SIP calculation."""

    goal_today: float = Field(ge=0)
    annual_return: Percent
    inflation: Percent
    years: int = Field(ge=0, le=100)


@router.post("/goal-sip")
async def calculate_goal_sip(inputs: GoalSIPInput):
    """Monthly SIP required for an inflation-adjusted goal."""
    return _finite(savings.goal_sip(**inputs.model_dump()))


class FDInput(BaseModel):
    """Input for fixed deposit calculation."""

    principal: float = Field(ge=0)
    interest_rate: Percent
    years: float = Field(ge=0, le=100)
    compounding: Literal["yearly", "quarterly", "monthly"] = "quarterly"
    tax_rate: float = Field(default=0.0, ge=0, le=100)


@router.post("/fd")
async def calculate_fd(inputs: FDInput):
    """Fixed deposit maturity, pre and post tax."""
    return _finite(savings.fixed_deposit(**inputs.model_dump()))


class RDInput(BaseModel):
    """Input for recurring deposit calculation."""

    monthly_investment: float = Field(ge=0)
    annual_rate: Percent
    years: int = Field(ge=0, le=100)


@router.post("/rd")
async def calculate_rd(inputs: RDInput):
    """Recurring deposit maturity."""
    return _finite(
        savings.recurring_deposit(
            inputs.monthly_investment, inputs.annual_rate, inputs.years
        )
    )


class CAGRInput(BaseModel):
    """Input for CAGR calculation."""

    initial: float
    final_value: float
    years: float


@router.post("/cagr")
async def calculate_cagr(inputs: CAGRInput):
    """Compound annual growth rate and absolute return, in percent."""
    return _finite(savings.cagr_summary(inputs.initial, inputs.final_value, inputs.years))


class MutualFundInput(BaseModel):
    """Input for mutual fund calculation."""

    method: Literal["lumpsum", "sip"] = "lumpsum"
    lump_sum: float = Field(default=0.0, ge=0)
    monthly_sip: float = Field(default=0.0, ge=0)
    rate: Percent
    years: int = Field(ge=0, le=100)


@router.post("/mf")
async def calculate_mutual_fund(inputs: MutualFundInput):
    """Mutual fund projection for a lump sum or SIP."""
    return _finite(savings.mutual_fund(**inputs.model_dump()))


class NSCInput(BaseModel):
    """Input for NSC calculation."""

    investment: float = Field(ge=0)
    rate: Percent
    years: int = Field(default=5, ge=0, le=100)


@router.post("/nsc")
async def calculate_nsc(inputs: NSCInput):
    """National Savings Certificate maturity."""
    return _finite(savings.nsc(**inputs.model_dump()))


class SSYInput(BaseModel):
    """Input for SSY calculation."""

    yearly_investment: float = Field(ge=0)
    rate: Percent
    start_year: int = Field(ge=1900, le=2200)


@router.post("/ssy")
async def calculate_ssy(inputs: SSYInput):
    """Sukanya Samriddhi Yojana maturity."""
    return _finite(savings.ssy(**inputs.model_dump()))


class NPSInput(BaseModel):
    """Input for NPS calculation."""

    monthly_contribution: float = Field(ge=0)
    expected_return: Percent
    current_age: int = Field(ge=0, le=120)
    retirement_age: int = Field(ge=0, le=120)
    pension_allocation: float = Field(default=40.0, ge=0, le=100)
    annuity_rate: float = Field(default=6.0, ge=0, le=100)


@router.post("/nps")
async def calculate_nps(inputs: NPSInput):
    """NPS corpus, lump sum and pension."""
    return _finite(savings.nps(**inputs.model_dump()))


# === Planning calculators ===

class FIREInput(BaseModel):
    """Input for FIRE calculation."""

    monthly_expense: float = Field(ge=0)
    current_age: int = Field(ge=0, le=120)
    retirement_age: int = Field(ge=0, le=120)
    coast_age: int = Field(ge=0, le=120)
    inflation_rate: Percent
    expected_return: Percent
    withdrawal_rate: float = Field(gt=0, le=100)
    current_savings: float = Field(default=0.0, ge=0)
    monthly_contribution: float = Field(default=0.0, ge=0)


@router.post("/fire")
async def calculate_fire(inputs: FIREInput):
    """FIRE number, projection and required contribution."""
    return _finite(planning.fire(**inputs.model_dump()))


class HRAInput(BaseModel):
    """Input for HRA exemption calculation."""

    basic: float = Field(ge=0)
    da: float = Field(default=0.0, ge=0)
    commission: float = Field(default=0.0, ge=0)
    hra_received: float = Field(ge=0)
    annual_rent: float = Field(ge=0)
    is_metro: bool = True


@router.post("/hra")
async def calculate_hra(inputs: HRAInput):
    """HRA exemption and taxable HRA."""
    return _finite(planning.hra(**inputs.model_dump()))


class EmergencyFundInput(BaseModel):
    """Input for emergency fund calculation."""

    monthly_expenses: float = Field(ge=0)
    current_savings: float = Field(default=0.0, ge=0)
    monthly_savings: float = Field(default=0.0, ge=0)
    risk_level: Literal["low", "medium", "high"] = "medium"
    dependents: int = Field(default=0, ge=0, le=20)


@router.post("/emergency-fund")
async def calculate_emergency_fund(inputs: EmergencyFundInput):
    """Emergency fund target and months to reach it."""
    return _finite(planning.emergency_fund(**inputs.model_dump()))


class NetWorthInput(BaseModel):
    """Input for net worth projection."""

    current_age: int = Field(ge=0, le=120)
    current_net_worth: float
    annual_contribution: float = 0.0
    expected_return: float = Field(ge=-100, le=100)
    inflation_rate: float = Field(default=0.0, ge=0, le=100)
    projection_years: int = Field(ge=0, le=100)


@router.post("/net-worth")
async def calculate_net_worth(inputs: NetWorthInput):
    """Inflation-adjusted net worth projection."""
    return _finite(planning.net_worth_projection(**inputs.model_dump()))


class SavingsRunwayInput(BaseModel):
    """Input for savings runway calculation."""

    current_savings: float = Field(ge=0)
    monthly_income: float = Field(default=0.0, ge=0)
    monthly_expenses: float = Field(ge=0)
    emergency_fund: float = Field(default=0.0, ge=0)
    as_of: Optional[date] = None


@router.post("/savings-runway")
async def calculate_savings_runway(inputs: SavingsRunwayInput):
    """Burn rate and how long savings last."""
    return _finite(
        planning.savings_runway(
            current_savings=inputs.current_savings,
            monthly_income=inputs.monthly_income,
            monthly_expenses=inputs.monthly_expenses,
            emergency_fund_reserve=inputs.emergency_fund,
            as_of=inputs.as_of,
        )
    )


class AffordabilityInput(BaseModel):
    """Input for affordability calculation."""

    category: Literal["home", "car", "purchase"] = "home"
    monthly_income: float = Field(ge=0)
    monthly_debts: float = Field(default=0.0, ge=0)
    down_payment: float = Field(default=0.0, ge=0)
    interest_rate: Percent
    loan_term: int = Field(default=30, gt=0, le=50)


@router.post("/affordability")
async def calculate_affordability(inputs: AffordabilityInput):
    """Affordable price under the 28/36 rule."""
    return _finite(
        planning.affordability(
            category=inputs.category,
            monthly_income=inputs.monthly_income,
            monthly_debts=inputs.monthly_debts,
            down_payment=inputs.down_payment,
            interest_rate=inputs.interest_rate,
            loan_term_years=inputs.loan_term,
        )
    )


# === IRR ===

class IRRInput(BaseModel):
    """Input for IRR calculation."""

    cash_flows: List[float]
    tolerance: float = Field(default=irr.DEFAULT_TOLERANCE, gt=0)


class IRRResponse(BaseModel):
    """Response with IRR calculation."""

    irr: float
    irr_percent: float
    iterations: int
    converged: bool
    bracketed: bool
    npv_at_irr: Optional[float]
    multiple: float
    profit: float


@router.post("/irr", response_model=IRRResponse)
async def calculate_irr_endpoint(inputs: IRRInput):
    """Calculate periodic IRR for given cash flows."""
    result = irr.solve_irr(inputs.cash_flows, inputs.tolerance)

    if len(inputs.cash_flows) >= 2 and not result.bracketed:
        logger.info(
            f"IRR outside [{irr.IRR_LOWER_BOUND}, {irr.IRR_UPPER_BOUND}] "
            f"for {len(inputs.cash_flows)} cash flows, returning bracket edge"
        )

    return IRRResponse(
        irr=result.rate,
        irr_percent=result.rate * 100,
        iterations=result.iterations,
        converged=result.converged,
        bracketed=result.bracketed,
        npv_at_irr=_finite(irr.calculate_npv(inputs.cash_flows, result.rate)),
        multiple=irr.calculate_multiple(inputs.cash_flows),
        profit=irr.calculate_profit(inputs.cash_flows),
    )


# === Debt payoff ===

class DebtInput(BaseModel):
    """A single debt."""

    name: str
    balance: float = Field(ge=0)
    interest_rate: float = Field(ge=0, le=100)
    min_payment: float = Field(ge=0)


class DebtPayoffInput(BaseModel):
    """Input for debt payoff planning."""

    debts: List[DebtInput] = []
    extra_payment: float = 0.0
    strategy: Literal["avalanche", "snowball"] = "avalanche"
    start_date: Optional[date] = None
    max_points: int = Field(default=projections.DEFAULT_MAX_POINTS, gt=0)


class DebtOutcomeResponse(BaseModel):
    name: str
    payoff_month: Optional[int]
    interest_paid: float
    remaining_balance: float


class DebtPayoffResponse(BaseModel):
    """Response with payoff plan summary."""

    months: int
    years: float
    total_interest: float
    total_debt: float
    total_min_payment: float
    capped: bool
    debt_free_date: Optional[date]
    outcomes: List[DebtOutcomeResponse]
    balance_series: List[Tuple[int, float]]


@router.post("/debt-payoff", response_model=DebtPayoffResponse)
async def calculate_debt_payoff(inputs: DebtPayoffInput):
    """Simulate avalanche or snowball payoff of several debts."""
    debts = [debt.Debt(**d.model_dump()) for d in inputs.debts]
    result = debt.simulate_payoff(debts, inputs.extra_payment, inputs.strategy)

    if result.capped:
        logger.warning(
            f"Debt payoff hit the {debt.MAX_PAYOFF_MONTHS} month cap "
            f"({len(debts)} debts, strategy={inputs.strategy})"
        )

    debt_free_date = None
    if not result.capped:
        start = inputs.start_date or date.today()
        debt_free_date = planning.months_after(start, result.months)

    return DebtPayoffResponse(
        months=result.months,
        years=result.years,
        total_interest=result.total_interest,
        total_debt=debt.total_balance(debts),
        total_min_payment=debt.total_min_payment(debts),
        capped=result.capped,
        debt_free_date=debt_free_date,
        outcomes=[DebtOutcomeResponse(**vars(o)) for o in result.outcomes],
        balance_series=projections.sample_series(result.balance_series, inputs.max_points),
    )


# === Start now vs. wait ===

class StartNowVsWaitInput(BaseModel):
    """Input for the start-now-vs-wait comparison."""

    monthly_contribution: float = Field(ge=0)
    expected_return: Percent
    months_total: int = Field(gt=0, le=1200)
    delay_months: int = Field(default=projections.DEFAULT_DELAY_MONTHS, ge=0)
    target: Optional[float] = Field(default=None, ge=0)
    low_return_buffer: float = Field(
        default=projections.DEFAULT_LOW_RETURN_BUFFER, ge=0, le=100
    )
    max_points: int = Field(default=projections.DEFAULT_MAX_POINTS, gt=0)


class StartNowVsWaitResponse(BaseModel):
    """Sampled series and comparison figures."""

    start_now_final: float
    wait_final: float
    cost_of_waiting: float
    shortfall_vs_target: Optional[float] = None
    probability: Optional[Dict[str, str]] = None
    start_now_series: List[Tuple[int, float]]
    wait_series: List[Tuple[int, float]]


@router.post("/start-now-vs-wait", response_model=StartNowVsWaitResponse)
async def calculate_start_now_vs_wait(inputs: StartNowVsWaitInput):
    """Compare contributing from today against contributing after a delay."""
    result = projections.compare_start_now_vs_wait(
        contribution=inputs.monthly_contribution,
        annual_return_percent=inputs.expected_return,
        months_total=inputs.months_total,
        delay_months=inputs.delay_months,
        target=inputs.target,
        low_return_buffer=inputs.low_return_buffer,
    )

    shortfall = None
    if inputs.target is not None:
        shortfall = projections.cost_of_waiting_against_target(
            result.wait_final, inputs.target
        )

    return StartNowVsWaitResponse(
        start_now_final=result.start_now_final,
        wait_final=result.wait_final,
        cost_of_waiting=result.cost_of_waiting,
        shortfall_vs_target=shortfall,
        probability=result.probability,
        start_now_series=projections.sample_series(
            result.start_now_series, inputs.max_points
        ),
        wait_series=projections.sample_series(result.wait_series, inputs.max_points),
    )
