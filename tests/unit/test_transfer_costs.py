"""Unit tests for transfer duty and transfer costs"""

import math

import pytest

from wisebond_engine.domain.exceptions import InvalidParameterError
from wisebond_engine.domain.models import FeeBase, TransferDutyBracket
from wisebond_engine.domain.transfer_costs import (
    SA_TRANSFER_DUTY_BRACKETS,
    TransferCostPolicy,
    calculate_transfer_costs,
    transfer_duty,
    validate_brackets,
)


@pytest.mark.parametrize(
    "price, expected",
    [
        (0, 0),
        (750_000, 0),
        (1_000_000, 0),  # no-duty threshold
        (1_100_000, 3_000),
        (1_375_000, 11_250),
        (1_500_000, 18_750),  # 11,250 + 125,000 * 6%
        (1_925_000, 44_250),
        (2_000_000, 50_250),
        (2_475_000, 88_250),
        (3_000_000, 146_000),
        (11_000_000, 1_026_000),
        (12_000_000, 1_156_000),
    ],
)
def test_transfer_duty_table(price, expected):
    assert transfer_duty(price) == pytest.approx(expected)


def test_transfer_duty_split_across_brackets():
    """R1.5m: the whole 1,000,000-1,375,000 band at 3% plus 125,000 at 6%"""
    full_lower_band = (1_375_000 - 1_000_000) * 0.03
    remainder = (1_500_000 - 1_375_000) * 0.06
    assert transfer_duty(1_500_000) == pytest.approx(full_lower_band + remainder)


def test_transfer_duty_continuous_at_boundaries():
    """Duty just below each boundary converges on duty at the boundary"""
    epsilon = 0.01
    for bracket in SA_TRANSFER_DUTY_BRACKETS[:-1]:
        boundary = bracket.upper_bound
        below = transfer_duty(boundary - epsilon)
        at = transfer_duty(boundary)
        assert at - below == pytest.approx(bracket.marginal_rate * epsilon, abs=1e-6)


def test_transfer_duty_non_decreasing():
    prices = range(0, 13_000_000, 25_000)
    duties = [transfer_duty(p) for p in prices]
    assert duties == sorted(duties)


def test_transfer_duty_rejects_negative_price():
    with pytest.raises(InvalidParameterError):
        transfer_duty(-1)


def test_default_table_is_valid():
    assert validate_brackets(SA_TRANSFER_DUTY_BRACKETS) == SA_TRANSFER_DUTY_BRACKETS
    assert math.isinf(SA_TRANSFER_DUTY_BRACKETS[-1].upper_bound)


def test_validate_brackets_rejects_gap():
    table = [
        TransferDutyBracket(0, 100, 0, 0.0),
        TransferDutyBracket(200, math.inf, 0, 0.1),
    ]
    with pytest.raises(InvalidParameterError):
        validate_brackets(table)


def test_validate_brackets_rejects_discontinuous_base():
    table = [
        TransferDutyBracket(0, 100, 0, 0.1),  # duty at 100 is 10
        TransferDutyBracket(100, math.inf, 25, 0.2),
    ]
    with pytest.raises(InvalidParameterError):
        validate_brackets(table)


def test_validate_brackets_rejects_closed_table():
    with pytest.raises(InvalidParameterError):
        validate_brackets([TransferDutyBracket(0, 100, 0, 0.1)])


def test_custom_bracket_table():
    table = validate_brackets(
        [
            TransferDutyBracket(0, 500, 0, 0.0),
            TransferDutyBracket(500, math.inf, 0, 0.1),
        ]
    )
    assert transfer_duty(400, table) == 0
    assert transfer_duty(600, table) == pytest.approx(10)


def test_transfer_costs_on_purchase_price():
    """Default fees: 1.5% attorney, 1.2% bond registration, R1,500 deeds office"""
    costs = calculate_transfer_costs(1_500_000)

    assert costs.transfer_duty == pytest.approx(18_750)
    assert costs.attorney_fee == pytest.approx(22_500)
    assert costs.bond_registration_fee == pytest.approx(18_000)
    assert costs.deeds_office_fee == 1500
    assert costs.total_costs == pytest.approx(18_750 + 22_500 + 18_000 + 1500)
    assert costs.fee_base == FeeBase.PURCHASE_PRICE


def test_transfer_costs_on_loan_amount():
    """With the loan amount as base, percentage fees shrink but duty does not"""
    policy = TransferCostPolicy(fee_base=FeeBase.LOAN_AMOUNT)
    costs = calculate_transfer_costs(1_500_000, loan_amount=1_200_000, policy=policy)

    assert costs.transfer_duty == pytest.approx(18_750)
    assert costs.attorney_fee == pytest.approx(18_000)
    assert costs.bond_registration_fee == pytest.approx(14_400)


def test_transfer_costs_loan_defaults_to_price():
    costs = calculate_transfer_costs(800_000, policy=TransferCostPolicy(fee_base=FeeBase.LOAN_AMOUNT))
    assert costs.loan_amount == 800_000
    assert costs.attorney_fee == pytest.approx(12_000)


def test_transfer_costs_configurable_fees():
    policy = TransferCostPolicy(attorney_fee_rate=0.01, bond_registration_fee_rate=0, deeds_office_fee=0)
    costs = calculate_transfer_costs(1_000_000, policy=policy)

    assert costs.total_costs == pytest.approx(10_000)


@pytest.mark.parametrize(
    "price, loan",
    [(-1, None), (1_000_000, -5), (1_000_000, 1_000_001)],
)
def test_transfer_costs_reject_invalid_amounts(price, loan):
    with pytest.raises(InvalidParameterError):
        calculate_transfer_costs(price, loan_amount=loan)


def test_policy_rejects_negative_fee():
    with pytest.raises(InvalidParameterError):
        TransferCostPolicy(deeds_office_fee=-1)
