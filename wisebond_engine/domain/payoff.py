"""Accelerated payoff simulation for extra monthly payments and lump-sum scenarios"""

import math
from dataclasses import dataclass
from typing import Optional

from wisebond_engine.domain.amortization import AmortizationSchedule
from wisebond_engine.domain.annuity import annuity_totals
from wisebond_engine.domain.exceptions import InvalidParameterError
from wisebond_engine.domain.models import LoanParameters, PaymentScenario
from wisebond_engine.utils.formatting import round_currency


@dataclass(frozen=True)
class PayoffResult:
    """Accelerated schedule compared against the standard annuity schedule"""

    months_to_payoff: int
    total_interest_paid: float
    schedule: AmortizationSchedule
    standard_monthly_payment: float
    standard_term_months: int
    standard_total_interest: float

    @property
    def new_monthly_payment(self) -> float:
        return self.standard_monthly_payment + self.schedule.extra_monthly_amount

    @property
    def months_saved(self) -> int:
        return self.standard_term_months - self.months_to_payoff

    @property
    def interest_saved(self) -> float:
        return round_currency(self.standard_total_interest - self.total_interest_paid)


def simulate_extra_payment(params: LoanParameters, extra_monthly_amount: float) -> PayoffResult:
    """
    Simulate paying ``extra_monthly_amount`` on top of the annuity payment.

    The schedule is walked once up front so that a non-amortizing payment or
    a runaway simulation fails here rather than when the caller later
    iterates the returned schedule.

    With ``extra_monthly_amount >= 0`` the loan is paid off within the
    original term (``months_to_payoff <= term_months``). A negative extra
    amount is accepted and may run past the term, up to the iteration cap,
    in which case ``months_saved`` is negative.

    Raises:
        InvalidParameterError: extra amount is not a finite number
        NonAmortizingLoanError: payment plus extra never exceeds the interest
        PayoffSimulationDivergedError: iteration cap (4x the term) exceeded
    """
    if not math.isfinite(extra_monthly_amount):
        raise InvalidParameterError("extra_monthly_amount", extra_monthly_amount, "must be finite")

    return _walk(params, extra_monthly_amount=extra_monthly_amount)


def simulate_scenario(params: LoanParameters, scenario: PaymentScenario) -> PayoffResult:
    """
    Simulate a lump sum and/or a time-limited extra monthly amount.

    Scenario payments are never negative, so the loan is always paid off
    within the original term.
    """
    return _walk(params, scenario=scenario)


def _walk(
    params: LoanParameters,
    extra_monthly_amount: float = 0.0,
    scenario: Optional[PaymentScenario] = None,
) -> PayoffResult:
    standard = annuity_totals(params.principal, params.annual_rate_percent, params.term_years)
    schedule = AmortizationSchedule(
        params=params,
        monthly_payment=standard.monthly_payment,
        extra_monthly_amount=extra_monthly_amount,
        scenario=scenario,
    )

    months = 0
    interest_parts = []
    for period in schedule:
        months += 1
        interest_parts.append(period.interest_component)

    return PayoffResult(
        months_to_payoff=months,
        total_interest_paid=round_currency(math.fsum(interest_parts)),
        schedule=schedule,
        standard_monthly_payment=standard.monthly_payment,
        standard_term_months=params.term_months,
        standard_total_interest=round_currency(standard.total_interest),
    )
