"""Unit tests for affordability and deposit-savings calculators"""

import pytest

from wisebond_engine.domain.affordability import calculate_affordability, calculate_deposit_savings
from wisebond_engine.domain.exceptions import InvalidParameterError


def test_affordability_capped_at_repayment_ratio():
    """30% of R30k gross (R9,000) is lower than R15k disposable, so it wins"""
    result = calculate_affordability(30_000, 10_000, 5_000, 10.75)

    assert result.disposable_income == 15_000
    assert result.max_monthly_payment == pytest.approx(9_000)
    assert result.available_for_loan == pytest.approx(9_000)
    assert result.max_loan_amount == pytest.approx(935_460.77, abs=0.01)
    assert result.recommended_property_price == pytest.approx(1_039_400.86, abs=0.01)


def test_affordability_limited_by_disposable_income():
    result = calculate_affordability(30_000, 20_000, 5_000, 10.75)

    assert result.available_for_loan == 5_000
    assert result.max_loan_amount < calculate_affordability(30_000, 10_000, 5_000, 10.75).max_loan_amount


def test_affordability_never_negative():
    """Commitments above income leave nothing to borrow against"""
    result = calculate_affordability(10_000, 12_000, 1_000, 10.75)

    assert result.disposable_income == -3_000
    assert result.available_for_loan == 0
    assert result.max_loan_amount == 0
    assert result.recommended_property_price == 0


@pytest.mark.parametrize(
    "kwargs",
    [
        {"gross_monthly_income": -1},
        {"annual_rate_percent": 100},
        {"max_repayment_ratio": 0},
        {"deposit_ratio": 1},
    ],
)
def test_affordability_rejects_invalid_inputs(kwargs):
    arguments = {
        "gross_monthly_income": 30_000,
        "monthly_expenses": 10_000,
        "existing_debt": 0,
        "annual_rate_percent": 10.75,
        **kwargs,
    }
    with pytest.raises(InvalidParameterError):
        calculate_affordability(**arguments)


def test_deposit_savings_without_interest():
    """10% of R1m at R5,000 a month takes exactly 20 months"""
    result = calculate_deposit_savings(1_000_000, 10, 5_000, 0)

    assert result.deposit_amount == 100_000
    assert result.months_to_save == 20
    assert result.total_contributions == 100_000
    assert result.interest_earned == 0


def test_deposit_savings_with_interest():
    """At 6% the balance crosses R100,000 during month 20, not before"""
    result = calculate_deposit_savings(1_000_000, 10, 5_000, 6)

    assert result.months_to_save == 20
    assert result.final_balance == pytest.approx(104_895.58, abs=0.01)
    assert result.interest_earned == pytest.approx(4_895.58, abs=0.01)
    assert result.final_balance >= result.deposit_amount


def test_deposit_savings_months_is_minimal():
    """One month fewer would leave the saver short of the deposit"""
    result = calculate_deposit_savings(2_000_000, 15, 7_500, 8)

    balance = 0.0
    for _ in range(result.months_to_save - 1):
        balance = balance * (1 + 0.08 / 12) + 7_500

    assert balance < result.deposit_amount
    assert result.final_balance >= result.deposit_amount
    assert result.interest_earned > 0


def test_zero_deposit_needs_no_saving():
    result = calculate_deposit_savings(1_000_000, 0, 5_000, 6)

    assert result.months_to_save == 0
    assert result.interest_earned == 0


@pytest.mark.parametrize(
    "price, percent, saving, rate",
    [
        (1_000_000, 10, 0, 6),
        (1_000_000, 10, -100, 6),
        (1_000_000, 120, 5_000, 6),
        (-1, 10, 5_000, 6),
        (1_000_000, 10, 5_000, -1),
    ],
)
def test_deposit_savings_rejects_invalid_inputs(price, percent, saving, rate):
    with pytest.raises(InvalidParameterError):
        calculate_deposit_savings(price, percent, saving, rate)
