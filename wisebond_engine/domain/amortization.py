"""Period-by-period amortization schedules consistent with the annuity payment"""

import math
from dataclasses import dataclass, replace
from typing import Iterable, Iterator, List, Optional

from wisebond_engine.domain.annuity import monthly_payment
from wisebond_engine.domain.constants import PAYOFF_ITERATION_CAP_MULTIPLIER
from wisebond_engine.domain.exceptions import (
    InvalidParameterError,
    NonAmortizingLoanError,
    PayoffSimulationDivergedError,
)
from wisebond_engine.domain.models import AmortizationPeriod, LoanParameters, PaymentScenario
from wisebond_engine.utils.formatting import round_currency

MONTHLY = 12
YEARLY = 1

# Residual balances below half a cent are float noise and get absorbed
BALANCE_TOLERANCE = 0.005


def standard_balance(params: LoanParameters, months_paid: int) -> float:
    """
    Outstanding balance after ``months_paid`` annuity payments.

        B_k = P * (1 - (1+r)^(k-n)) / (1 - (1+r)^-n)

    Evaluated directly rather than by repeated subtraction, so it stays exact
    to float precision at any valid rate and term. B_0 = P and B_n = 0.
    """
    if isinstance(months_paid, bool) or not isinstance(months_paid, int) or months_paid < 0:
        raise InvalidParameterError("months_paid", months_paid, "must be a whole number of months >= 0")

    principal = params.principal
    r = params.monthly_rate
    n = params.term_months
    if months_paid == 0:
        return principal
    if months_paid >= n:
        return 0.0
    if r == 0:
        return principal * (n - months_paid) / n
    return principal * (1 - (1 + r) ** (months_paid - n)) / (1 - (1 + r) ** -n)


def iter_monthly_periods(
    params: LoanParameters,
    payment: float,
    extra_monthly_amount: float = 0.0,
    iteration_cap: Optional[int] = None,
    scenario: Optional[PaymentScenario] = None,
) -> Iterator[AmortizationPeriod]:
    """
    Run the monthly recurrence until the balance is cleared.

    Used for any payment other than the plain annuity payment (extra amounts,
    scenarios, custom payments); standard schedules come from
    iter_standard_periods.

    Each month:
        interest  = balance * r
        principal = (payment - interest) + extra
        balance  -= principal

    ``extra`` is the constant extra amount plus whatever ``scenario`` adds
    in that month. The month that would overpay (or leave sub-cent residue)
    pays exactly the outstanding balance, so the last period always ends at
    0.0. With a non-negative extra amount the loan is also closed out at
    month n, which absorbs accumulated rounding into the final principal
    payment.

    Raises:
        NonAmortizingLoanError: a month's principal component is <= 0 while
            paying less than the annuity payment
        PayoffSimulationDivergedError: more than ``iteration_cap`` months needed
    """
    r = params.monthly_rate
    n = params.term_months
    cap = iteration_cap if iteration_cap is not None else n * PAYOFF_ITERATION_CAP_MULTIPLIER
    annuity_payment = monthly_payment(params.principal, params.annual_rate_percent, params.term_years)

    balance = params.principal
    cumulative_principal = 0.0
    cumulative_interest = 0.0
    month = 0

    while balance > 0:
        if month >= cap:
            raise PayoffSimulationDivergedError(cap, balance)
        month += 1

        extra = extra_monthly_amount + (scenario.extra_for_month(month) if scenario else 0.0)
        interest = balance * r
        principal_paid = (payment - interest) + extra
        # At or above the annuity payment the loan amortizes; a zero here is float noise
        if principal_paid <= 0 and payment + extra < annuity_payment:
            raise NonAmortizingLoanError(month, balance, payment + extra, interest)

        final = balance - principal_paid < BALANCE_TOLERANCE or (
            extra_monthly_amount >= 0 and month == n
        )
        if final:
            principal_paid = balance
            balance = 0.0
        else:
            balance -= principal_paid

        cumulative_principal += principal_paid
        cumulative_interest += interest
        yield AmortizationPeriod(
            index=month,
            principal_component=principal_paid,
            interest_component=interest,
            ending_balance=balance,
            cumulative_principal=cumulative_principal,
            cumulative_interest=cumulative_interest,
        )


def iter_standard_periods(params: LoanParameters, payment: float) -> Iterator[AmortizationPeriod]:
    """
    Standard annuity schedule from the closed-form balance.

    Month k repays B_{k-1} - B_k of principal and the rest of ``payment`` is
    interest. Balances never depend on earlier float subtractions, so the
    principal components telescope to P and B_n is exactly 0 at any rate.
    """
    if params.principal <= 0:
        return

    r = params.monthly_rate
    previous = params.principal
    cumulative_principal = 0.0
    cumulative_interest = 0.0
    for month in range(1, params.term_months + 1):
        # One-ulp rounding can put B_k a hair above B_{k-1} when (1+r)^-n is negligible
        balance = min(standard_balance(params, month), previous)
        principal_paid = previous - balance
        interest = payment - principal_paid if r else 0.0

        cumulative_principal += principal_paid
        cumulative_interest += interest
        yield AmortizationPeriod(
            index=month,
            principal_component=principal_paid,
            interest_component=interest,
            ending_balance=balance,
            cumulative_principal=cumulative_principal,
            cumulative_interest=cumulative_interest,
        )
        previous = balance


def aggregate_yearly(months: Iterable[AmortizationPeriod]) -> Iterator[AmortizationPeriod]:
    """Collapse monthly periods into one period per 12-month block"""
    block: List[AmortizationPeriod] = []
    for period in months:
        block.append(period)
        if len(block) == 12:
            yield _collapse(block)
            block = []
    if block:
        yield _collapse(block)


def _collapse(block: List[AmortizationPeriod]) -> AmortizationPeriod:
    last = block[-1]
    return AmortizationPeriod(
        index=(last.index - 1) // 12 + 1,
        principal_component=math.fsum(p.principal_component for p in block),
        interest_component=math.fsum(p.interest_component for p in block),
        ending_balance=last.ending_balance,
        cumulative_principal=last.cumulative_principal,
        cumulative_interest=last.cumulative_interest,
    )


@dataclass(frozen=True)
class AmortizationSchedule:
    """
    Lazy, restartable repayment schedule.

    Periods are regenerated on every iteration from the loan terms, so the
    schedule holds no state beyond its inputs. Totals are reported to the
    cent; ``total_principal`` always equals the rounded principal.
    """

    params: LoanParameters
    monthly_payment: float
    extra_monthly_amount: float = 0.0
    periods_per_year: int = MONTHLY
    scenario: Optional[PaymentScenario] = None

    def __post_init__(self) -> None:
        if self.periods_per_year not in (MONTHLY, YEARLY):
            raise InvalidParameterError("periods_per_year", self.periods_per_year, "must be 12 or 1")

    @property
    def is_standard(self) -> bool:
        """Annuity payment with no extra amount or scenario"""
        return (
            self.extra_monthly_amount == 0
            and (self.scenario is None or self.scenario.is_empty)
            and self.monthly_payment
            == monthly_payment(self.params.principal, self.params.annual_rate_percent, self.params.term_years)
        )

    def __iter__(self) -> Iterator[AmortizationPeriod]:
        if self.is_standard:
            months = iter_standard_periods(self.params, self.monthly_payment)
        else:
            months = iter_monthly_periods(
                self.params, self.monthly_payment, self.extra_monthly_amount, scenario=self.scenario
            )
        if self.periods_per_year == YEARLY:
            return aggregate_yearly(months)
        return months

    def monthly(self) -> "AmortizationSchedule":
        return replace(self, periods_per_year=MONTHLY)

    def yearly(self) -> "AmortizationSchedule":
        return replace(self, periods_per_year=YEARLY)

    @property
    def months(self) -> int:
        """Number of monthly payments until the balance reaches zero"""
        return sum(1 for _ in self.monthly())

    @property
    def total_principal(self) -> float:
        return round_currency(math.fsum(p.principal_component for p in self))

    @property
    def total_interest(self) -> float:
        return round_currency(math.fsum(p.interest_component for p in self))

    @property
    def total_paid(self) -> float:
        return round_currency(math.fsum(p.payment for p in self))


def generate_schedule(params: LoanParameters, periods_per_year: int = MONTHLY) -> AmortizationSchedule:
    """Standard schedule at the annuity payment, monthly or aggregated per year"""
    payment = monthly_payment(params.principal, params.annual_rate_percent, params.term_years)
    return AmortizationSchedule(params=params, monthly_payment=payment, periods_per_year=periods_per_year)
