"""Side-by-side loan comparisons across terms and interest rates"""

from dataclasses import dataclass
from typing import Sequence, Tuple

from wisebond_engine.domain.amortization import standard_balance
from wisebond_engine.domain.annuity import annuity_totals
from wisebond_engine.domain.exceptions import InvalidParameterError
from wisebond_engine.domain.models import LoanParameters

DEFAULT_COMPARISON_TERMS = (10, 15, 20, 25, 30)

# Percentage points around the quoted rate (prime +1% down to prime -1%)
DEFAULT_RATE_OFFSETS = (1.0, 0.5, 0.0, -0.5, -1.0)


@dataclass(frozen=True)
class LoanOption:
    """Annuity cost of one term/rate combination"""

    term_years: int
    annual_rate_percent: float
    monthly_payment: float
    total_interest: float
    total_paid: float


def loan_option(principal: float, annual_rate_percent: float, term_years: int) -> LoanOption:
    totals = annuity_totals(principal, annual_rate_percent, term_years)
    return LoanOption(
        term_years=term_years,
        annual_rate_percent=annual_rate_percent,
        monthly_payment=totals.monthly_payment,
        total_interest=totals.total_interest,
        total_paid=totals.total_repayment,
    )


def compare_terms(
    principal: float,
    annual_rate_percent: float,
    terms: Sequence[int] = DEFAULT_COMPARISON_TERMS,
) -> Tuple[LoanOption, ...]:
    """
    Same loan and rate over each term.

    Longer terms lower the monthly payment but raise the total interest.
    """
    if not terms:
        raise InvalidParameterError("terms", terms, "at least one term is required")
    return tuple(loan_option(principal, annual_rate_percent, term) for term in terms)


def rate_spread(base_rate_percent: float, offsets: Sequence[float] = DEFAULT_RATE_OFFSETS) -> Tuple[float, ...]:
    """Rates at each offset from ``base_rate_percent``, skipping any that fall below zero"""
    return tuple(base_rate_percent + offset for offset in offsets if base_rate_percent + offset >= 0)


def compare_rates(
    principal: float,
    term_years: int,
    rates: Sequence[float],
) -> Tuple[LoanOption, ...]:
    """Same loan and term at each rate, in the order given"""
    if not rates:
        raise InvalidParameterError("rates", rates, "at least one rate is required")
    return tuple(loan_option(principal, rate, term_years) for rate in rates)


def potential_savings(options: Sequence[LoanOption], selected: LoanOption) -> float:
    """Interest saved by moving from ``selected`` to the cheapest option"""
    if not options:
        raise InvalidParameterError("options", options, "at least one option is required")
    return selected.total_interest - min(option.total_interest for option in options)


def remaining_balance(params: LoanParameters, after_months: int) -> float:
    """Balance still owed after ``after_months`` standard payments (0 once the term is over)"""
    return standard_balance(params, after_months)


def yearly_balances(params: LoanParameters) -> Tuple[float, ...]:
    """Outstanding balance at the start (year 0) and end of every year of the term"""
    return tuple(standard_balance(params, year * 12) for year in range(params.term_years + 1))
