"""Unit tests for closed-form annuity math"""

import pytest

from wisebond_engine.domain.annuity import (
    annuity_totals,
    monthly_payment,
    principal_from_payment,
    total_interest,
    total_repayment,
)
from wisebond_engine.domain.exceptions import InvalidParameterError
from wisebond_engine.domain.models import LoanParameters


def test_monthly_payment_reference_bond():
    """R900,000 at 11.25% over 25 years"""
    payment = monthly_payment(900_000, 11.25, 25)

    assert round(payment) == 8984
    assert payment == pytest.approx(8984.16, abs=0.01)


def test_monthly_payment_thirty_year():
    """R200,000 at 6% over 30 years - textbook value 1,199.10"""
    assert monthly_payment(200_000, 6, 30) == pytest.approx(1199.10, abs=0.01)


def test_monthly_payment_zero_rate():
    """Zero rate degenerates to principal / n"""
    assert monthly_payment(120_000, 0, 10) == 1000.0
    assert monthly_payment(100_000, 0, 7) == pytest.approx(100_000 / 84)


def test_monthly_payment_zero_principal():
    """Nothing borrowed, nothing to repay"""
    assert monthly_payment(0, 10, 20) == 0.0


def test_totals_derive_from_same_payment():
    """Total repayment and total interest are M * n and M * n - P for one M"""
    totals = annuity_totals(900_000, 11.25, 25)

    assert totals.total_repayment == totals.monthly_payment * 300
    assert totals.total_interest == totals.total_repayment - 900_000
    assert total_repayment(900_000, 11.25, 25) == totals.total_repayment
    assert total_interest(900_000, 11.25, 25) == totals.total_interest


@pytest.mark.parametrize(
    "principal, rate, term",
    [
        (-1, 10, 20),  # negative principal
        (100_000, -0.5, 20),  # negative rate
        (100_000, 100, 20),  # rate at 100%
        (100_000, 10, 0),  # zero term
        (100_000, 10, -5),  # negative term
        (100_000, 10, 2.5),  # fractional term
    ],
)
def test_monthly_payment_rejects_out_of_domain_inputs(principal, rate, term):
    """Invalid inputs fail loudly instead of being clamped"""
    with pytest.raises(InvalidParameterError):
        monthly_payment(principal, rate, term)


def test_invalid_parameter_error_names_field():
    with pytest.raises(InvalidParameterError) as exc_info:
        monthly_payment(-5, 10, 20)

    assert exc_info.value.field == "principal"
    assert isinstance(exc_info.value, ValueError)


def test_principal_from_payment_inverts_monthly_payment():
    """Payment -> principal -> payment round trip at a realistic rate"""
    payment = monthly_payment(400_000, 6.5, 30)
    assert principal_from_payment(payment, 6.5, 30) == pytest.approx(400_000, abs=0.01)


def test_principal_from_payment_zero_rate():
    assert principal_from_payment(1000, 0, 10) == 120_000


def test_loan_parameters_validated_on_construction():
    """LoanParameters rejects the same inputs the formula does"""
    with pytest.raises(InvalidParameterError):
        LoanParameters(principal=100_000, annual_rate_percent=10, term_years=0)

    params = LoanParameters(principal=100_000, annual_rate_percent=12, term_years=20)
    assert params.term_months == 240
    assert params.monthly_rate == pytest.approx(0.01)
