"""Unit tests for term and rate comparisons"""

import pytest

from wisebond_engine.domain.amortization import generate_schedule
from wisebond_engine.domain.comparison import (
    DEFAULT_COMPARISON_TERMS,
    compare_rates,
    compare_terms,
    loan_option,
    potential_savings,
    rate_spread,
    remaining_balance,
    yearly_balances,
)
from wisebond_engine.domain.exceptions import InvalidParameterError
from wisebond_engine.domain.models import LoanParameters


def test_compare_terms_default_grid():
    """R900,000 at 11.25% over 10 to 30 years"""
    options = compare_terms(900_000, 11.25)

    assert [o.term_years for o in options] == list(DEFAULT_COMPARISON_TERMS)
    assert options[0].monthly_payment == pytest.approx(12_525.21, abs=0.01)
    assert options[3].monthly_payment == pytest.approx(8_984.16, abs=0.01)
    assert options[4].total_interest == pytest.approx(2_246_886.89, abs=0.01)


def test_longer_terms_cost_less_monthly_but_more_interest():
    options = compare_terms(900_000, 11.25)
    payments = [o.monthly_payment for o in options]
    interest = [o.total_interest for o in options]

    assert payments == sorted(payments, reverse=True)
    assert interest == sorted(interest)
    for option in options:
        assert option.total_paid == pytest.approx(900_000 + option.total_interest)


def test_rate_spread_around_quoted_rate():
    assert rate_spread(11.25) == (12.25, 11.75, 11.25, 10.75, 10.25)
    assert rate_spread(0.5) == (1.5, 1.0, 0.5, 0.0)


def test_compare_rates_and_potential_savings():
    """Moving from 11.25% to 10.25% on 25 years saves ~R194,012 of interest"""
    options = compare_rates(900_000, 25, rate_spread(11.25))
    selected = loan_option(900_000, 11.25, 25)

    assert [o.annual_rate_percent for o in options] == [12.25, 11.75, 11.25, 10.75, 10.25]
    assert options[0].monthly_payment == pytest.approx(9_645.69, abs=0.01)
    assert options[-1].total_interest == pytest.approx(1_601_234.86, abs=0.01)
    assert potential_savings(options, selected) == pytest.approx(194_011.92, abs=0.01)
    assert potential_savings(options, options[-1]) == 0


@pytest.mark.parametrize("call", [lambda: compare_terms(900_000, 11.25, ()), lambda: compare_rates(900_000, 25, [])])
def test_empty_comparisons_rejected(call):
    with pytest.raises(InvalidParameterError):
        call()


def test_remaining_balance_matches_schedule(standard_loan):
    """Closed-form balance agrees with the schedule's ending balance"""
    periods = list(generate_schedule(standard_loan))

    assert remaining_balance(standard_loan, 0) == 900_000
    assert remaining_balance(standard_loan, 60) == pytest.approx(856_240.60, abs=0.01)
    for month in (1, 12, 150, 299):
        assert remaining_balance(standard_loan, month) == pytest.approx(periods[month - 1].ending_balance)
    assert remaining_balance(standard_loan, 300) == 0
    assert remaining_balance(standard_loan, 400) == 0


def test_remaining_balance_rejects_negative_months(standard_loan):
    with pytest.raises(InvalidParameterError):
        remaining_balance(standard_loan, -1)


def test_remaining_balance_zero_rate():
    params = LoanParameters(120_000, 0, 10)
    assert remaining_balance(params, 30) == pytest.approx(90_000)


def test_yearly_balances(standard_loan):
    balances = yearly_balances(standard_loan)

    assert len(balances) == 26
    assert balances[0] == 900_000
    assert balances[1] == pytest.approx(893_091.09, abs=0.01)
    assert balances[-1] == 0
    assert list(balances) == sorted(balances, reverse=True)
