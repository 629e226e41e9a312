"""Transfer duty (progressive bracket table) and ancillary transfer costs"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from wisebond_engine.domain.constants import (
    ATTORNEY_FEE_RATE,
    BOND_REGISTRATION_FEE_RATE,
    DEEDS_OFFICE_FEE,
    SA_TRANSFER_DUTY_TABLE,
)
from wisebond_engine.domain.exceptions import InvalidParameterError
from wisebond_engine.domain.models import (
    FeeBase,
    TransferCostBreakdown,
    TransferDutyBracket,
    require_non_negative,
)

# Base amounts are published in whole rands
CONTINUITY_TOLERANCE = 0.01


def validate_brackets(brackets: Sequence[TransferDutyBracket]) -> Tuple[TransferDutyBracket, ...]:
    """
    Check a duty table is usable for lookup.

    Requirements:
    - Starts at 0 and ends at infinity
    - Contiguous: each bracket starts where the previous one ends
    - Continuous: each base_amount equals the previous bracket's duty at the boundary
    - Non-negative marginal rates (duty never decreases with price)
    """
    table = tuple(brackets)
    if not table:
        raise InvalidParameterError("brackets", table, "table is empty")
    if table[0].lower_bound != 0:
        raise InvalidParameterError("brackets", table[0], "first bracket must start at 0")
    if not math.isinf(table[-1].upper_bound):
        raise InvalidParameterError("brackets", table[-1], "last bracket must be open-ended")

    for bracket in table:
        if bracket.upper_bound <= bracket.lower_bound:
            raise InvalidParameterError("brackets", bracket, "upper bound must exceed lower bound")
        if bracket.marginal_rate < 0:
            raise InvalidParameterError("brackets", bracket, "marginal rate must be >= 0")

    for previous, current in zip(table, table[1:]):
        if current.lower_bound != previous.upper_bound:
            raise InvalidParameterError("brackets", current, "brackets must be contiguous")
        expected_base = previous.duty_at(previous.upper_bound)
        if abs(current.base_amount - expected_base) > CONTINUITY_TOLERANCE:
            raise InvalidParameterError(
                "brackets", current, f"base amount should be {expected_base:.2f} for continuity"
            )
    return table


SA_TRANSFER_DUTY_BRACKETS = validate_brackets(
    [TransferDutyBracket(*row) for row in SA_TRANSFER_DUTY_TABLE]
)


def transfer_duty(
    purchase_price: float,
    brackets: Sequence[TransferDutyBracket] = SA_TRANSFER_DUTY_BRACKETS,
) -> float:
    """
    Duty payable on ``purchase_price``: base + (price - lower) * marginal rate
    of the bracket whose [lower, upper) range contains the price.

    Example:
        R1,500,000 falls in [1,375,000, 1,925,000):
        11,250 + (1,500,000 - 1,375,000) * 0.06 = 18,750
    """
    require_non_negative("purchase_price", purchase_price)
    for bracket in brackets:
        if bracket.contains(purchase_price):
            return bracket.duty_at(purchase_price)
    raise InvalidParameterError("purchase_price", purchase_price, "not covered by the duty table")


@dataclass(frozen=True)
class TransferCostPolicy:
    """
    Fee schedule for a transfer-cost quote.

    ``fee_base`` states which amount the percentage fees are charged on:
    the full purchase price or the amount financed.
    """

    attorney_fee_rate: float = ATTORNEY_FEE_RATE
    bond_registration_fee_rate: float = BOND_REGISTRATION_FEE_RATE
    deeds_office_fee: float = DEEDS_OFFICE_FEE
    fee_base: FeeBase = FeeBase.PURCHASE_PRICE
    brackets: Tuple[TransferDutyBracket, ...] = SA_TRANSFER_DUTY_BRACKETS

    def __post_init__(self) -> None:
        require_non_negative("attorney_fee_rate", self.attorney_fee_rate)
        require_non_negative("bond_registration_fee_rate", self.bond_registration_fee_rate)
        require_non_negative("deeds_office_fee", self.deeds_office_fee)
        object.__setattr__(self, "brackets", validate_brackets(self.brackets))


DEFAULT_TRANSFER_COST_POLICY = TransferCostPolicy()


def calculate_transfer_costs(
    purchase_price: float,
    loan_amount: Optional[float] = None,
    policy: TransferCostPolicy = DEFAULT_TRANSFER_COST_POLICY,
) -> TransferCostBreakdown:
    """Transfer duty plus attorney, bond registration and deeds office fees"""
    require_non_negative("purchase_price", purchase_price)
    if loan_amount is None:
        loan_amount = purchase_price
    require_non_negative("loan_amount", loan_amount)
    if loan_amount > purchase_price:
        raise InvalidParameterError("loan_amount", loan_amount, "cannot exceed the purchase price")

    base = purchase_price if policy.fee_base == FeeBase.PURCHASE_PRICE else loan_amount

    return TransferCostBreakdown(
        purchase_price=purchase_price,
        loan_amount=loan_amount,
        fee_base=policy.fee_base,
        transfer_duty=transfer_duty(purchase_price, policy.brackets),
        attorney_fee=base * policy.attorney_fee_rate,
        bond_registration_fee=base * policy.bond_registration_fee_rate,
        deeds_office_fee=policy.deeds_office_fee,
    )
