"""Affordability and deposit-savings calculators"""

import math

from wisebond_engine.domain.annuity import principal_from_payment
from wisebond_engine.domain.constants import (
    AFFORDABILITY_TERM_YEARS,
    ASSUMED_DEPOSIT_RATIO,
    MAX_REPAYMENT_TO_INCOME,
)
from wisebond_engine.domain.exceptions import InvalidParameterError
from wisebond_engine.domain.models import (
    AffordabilityResult,
    DepositSavingsResult,
    require_non_negative,
    require_rate,
)


def calculate_affordability(
    gross_monthly_income: float,
    monthly_expenses: float,
    existing_debt: float,
    annual_rate_percent: float,
    term_years: int = AFFORDABILITY_TERM_YEARS,
    max_repayment_ratio: float = MAX_REPAYMENT_TO_INCOME,
    deposit_ratio: float = ASSUMED_DEPOSIT_RATIO,
) -> AffordabilityResult:
    """
    Maximum loan an applicant could service.

    The affordable repayment is the lower of disposable income and 30% of
    gross income (never below zero). That repayment is converted into a
    loan amount with the inverse annuity formula, and the recommended
    property price assumes a 10% deposit on top.
    """
    require_non_negative("gross_monthly_income", gross_monthly_income)
    require_non_negative("monthly_expenses", monthly_expenses)
    require_non_negative("existing_debt", existing_debt)
    if not 0 < max_repayment_ratio <= 1:
        raise InvalidParameterError("max_repayment_ratio", max_repayment_ratio, "must be in (0, 1]")
    if not 0 <= deposit_ratio < 1:
        raise InvalidParameterError("deposit_ratio", deposit_ratio, "must be in [0, 1)")

    disposable_income = gross_monthly_income - monthly_expenses - existing_debt
    max_monthly_payment = gross_monthly_income * max_repayment_ratio
    available_for_loan = max(0.0, min(disposable_income, max_monthly_payment))

    max_loan = principal_from_payment(available_for_loan, annual_rate_percent, term_years)

    return AffordabilityResult(
        disposable_income=disposable_income,
        max_monthly_payment=max_monthly_payment,
        available_for_loan=available_for_loan,
        max_loan_amount=max_loan,
        recommended_property_price=max_loan / (1 - deposit_ratio),
    )


def calculate_deposit_savings(
    property_price: float,
    deposit_percent: float,
    monthly_saving: float,
    savings_rate_percent: float,
) -> DepositSavingsResult:
    """
    Whole months needed to save a deposit of ``deposit_percent`` of the price.

    Solves the future value of monthly contributions for n:
        FV = PMT * ((1 + r)^n - 1) / r  =>  n = log(FV * r / PMT + 1) / log(1 + r)
    """
    require_non_negative("property_price", property_price)
    if not 0 <= deposit_percent <= 100:
        raise InvalidParameterError("deposit_percent", deposit_percent, "must be between 0 and 100")
    if not math.isfinite(monthly_saving) or monthly_saving <= 0:
        raise InvalidParameterError("monthly_saving", monthly_saving, "must be > 0")
    require_rate("savings_rate_percent", savings_rate_percent)

    deposit = property_price * deposit_percent / 100
    r = savings_rate_percent / 100 / 12
    if r == 0:
        exact_months = deposit / monthly_saving
    else:
        exact_months = math.log(deposit * r / monthly_saving + 1) / math.log(1 + r)

    months = math.ceil(exact_months)
    contributions = monthly_saving * months
    if r == 0:
        final_balance = contributions
    else:
        final_balance = monthly_saving * ((1 + r) ** months - 1) / r

    return DepositSavingsResult(
        deposit_amount=deposit,
        months_to_save=months,
        total_contributions=contributions,
        final_balance=final_balance,
        interest_earned=final_balance - contributions,
    )
