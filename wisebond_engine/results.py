"""
Calculation entry points used by the site.

Each builder runs one domain calculation and wraps inputs, structured outputs
and formatted display lines in a CalculationResult. Domain errors are logged
and re-raised unchanged.
"""

import time
from dataclasses import asdict
from enum import Enum
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from wisebond_engine.config import settings
from wisebond_engine.domain.affordability import calculate_affordability, calculate_deposit_savings
from wisebond_engine.domain.amortization import AmortizationSchedule, generate_schedule
from wisebond_engine.domain.annuity import annuity_totals
from wisebond_engine.domain.comparison import (
    DEFAULT_COMPARISON_TERMS,
    DEFAULT_RATE_OFFSETS,
    compare_rates,
    compare_terms,
    loan_option,
    potential_savings,
    rate_spread,
    yearly_balances,
)
from wisebond_engine.domain.eligibility import EligibilityPolicy, evaluate_eligibility
from wisebond_engine.domain.exceptions import DomainException
from wisebond_engine.domain.models import EligibilityProfile, LoanParameters, PaymentScenario
from wisebond_engine.domain.payoff import PayoffResult, simulate_extra_payment, simulate_scenario
from wisebond_engine.domain.transfer_costs import TransferCostPolicy, calculate_transfer_costs
from wisebond_engine.infrastructure.observability.logging import log_calculation, log_calculation_failure
from wisebond_engine.schemas import CalculationResult, DisplayItem
from wisebond_engine.utils.formatting import format_currency, format_months, format_percent, round_currency

F = TypeVar("F", bound=Callable[..., CalculationResult])


def _logged(calculation_type: str) -> Callable[[F], F]:
    """Time the builder, log the outcome, and let domain errors propagate"""

    def decorator(func: F) -> F:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> CalculationResult:
            start_time = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except DomainException as e:
                log_calculation_failure(calculation_type, e)
                raise
            duration_ms = (time.perf_counter() - start_time) * 1000
            log_calculation(calculation_type, duration_ms, display_items=len(result.display_results))
            return result

        return wrapper  # type: ignore[return-value]

    return decorator


def _plain(value: Any) -> Any:
    """Dataclass/enum tree -> JSON-friendly dicts, lists and scalars"""
    if hasattr(value, "__dataclass_fields__"):
        value = asdict(value)
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(item) for item in value]
    if isinstance(value, Enum):
        return value.value
    return value


def _schedule_rows(schedule: AmortizationSchedule) -> List[Dict[str, Any]]:
    return [_plain(period) for period in schedule.yearly()]


@_logged("bond")
def bond_result(
    property_value: float,
    annual_rate_percent: float,
    term_years: int,
    deposit: float = 0.0,
) -> CalculationResult:
    """Monthly repayment on the amount financed after the deposit"""
    params = LoanParameters(property_value - deposit, annual_rate_percent, term_years)
    totals = annuity_totals(params.principal, params.annual_rate_percent, params.term_years)

    return CalculationResult(
        calculation_type="bond",
        inputs={
            "property_value": property_value,
            "annual_rate_percent": annual_rate_percent,
            "term_years": term_years,
            "deposit": deposit,
        },
        outputs={
            "loan_amount": params.principal,
            "monthly_repayment": totals.monthly_payment,
            "total_repayment": totals.total_repayment,
            "total_interest": totals.total_interest,
        },
        display_results=[
            DisplayItem(
                label="Monthly Repayment",
                value=format_currency(totals.monthly_payment),
                tooltip="The amount you will need to pay each month for the duration of your home loan.",
            ),
            DisplayItem(
                label="Total Repayment Amount",
                value=format_currency(totals.total_repayment),
                tooltip="The total amount you will repay over the entire term of the loan, including interest.",
            ),
            DisplayItem(
                label="Total Interest Paid",
                value=format_currency(totals.total_interest),
                tooltip="The total amount of interest you will pay over the entire term of the loan.",
            ),
        ],
    )


@_logged("amortisation")
def amortisation_result(loan_amount: float, annual_rate_percent: float, term_years: int) -> CalculationResult:
    """Yearly principal/interest breakdown for charts and tables"""
    params = LoanParameters(loan_amount, annual_rate_percent, term_years)
    schedule = generate_schedule(params)

    return CalculationResult(
        calculation_type="amortisation",
        inputs=_plain(params),
        outputs={
            "monthly_payment": schedule.monthly_payment,
            "total_principal": schedule.total_principal,
            "total_interest": schedule.total_interest,
            "total_paid": schedule.total_paid,
            "yearly_schedule": _schedule_rows(schedule),
        },
        display_results=[
            DisplayItem(label="Monthly Payment", value=format_currency(schedule.monthly_payment)),
            DisplayItem(label="Total Principal", value=format_currency(schedule.total_principal)),
            DisplayItem(
                label="Total Interest",
                value=format_currency(schedule.total_interest),
                tooltip="Interest paid over the full term at the scheduled payment.",
            ),
            DisplayItem(label="Total Paid", value=format_currency(schedule.total_paid)),
        ],
    )


def _payoff_outputs(payoff: PayoffResult) -> Dict[str, Any]:
    return {
        "standard_monthly_payment": payoff.standard_monthly_payment,
        "new_monthly_payment": payoff.new_monthly_payment,
        "months_to_payoff": payoff.months_to_payoff,
        "months_saved": payoff.months_saved,
        "total_interest_paid": payoff.total_interest_paid,
        "standard_total_interest": payoff.standard_total_interest,
        "interest_saved": payoff.interest_saved,
        "yearly_schedule": _schedule_rows(payoff.schedule),
    }


def _payoff_display(payoff: PayoffResult, include_new_payment: bool = True) -> List[DisplayItem]:
    display = [
        DisplayItem(
            label="Standard Monthly Payment",
            value=format_currency(payoff.standard_monthly_payment),
            tooltip="Your regular monthly payment without additional contributions",
        ),
    ]
    if include_new_payment:
        display.append(
            DisplayItem(
                label="New Monthly Payment",
                value=format_currency(payoff.new_monthly_payment),
                tooltip="Total monthly payment including your additional amount",
            )
        )
    display.extend(
        [
            DisplayItem(
                label="Time Saved",
                value=format_months(payoff.months_saved),
                tooltip="How much earlier you'll pay off your loan",
            ),
            DisplayItem(
                label="Interest Saved",
                value=format_currency(payoff.interest_saved),
                tooltip="Total interest you'll save by making additional payments",
            ),
            DisplayItem(
                label="New Loan Term",
                value=format_months(payoff.months_to_payoff),
                tooltip="Your new reduced loan term",
            ),
        ]
    )
    return display


@_logged("additional-payment")
def additional_payment_result(
    loan_amount: float,
    annual_rate_percent: float,
    term_years: int,
    extra_monthly_amount: float,
) -> CalculationResult:
    """Time and interest saved by paying a constant extra amount each month"""
    params = LoanParameters(loan_amount, annual_rate_percent, term_years)
    payoff = simulate_extra_payment(params, extra_monthly_amount)

    return CalculationResult(
        calculation_type="additional-payment",
        inputs={**_plain(params), "extra_monthly_amount": extra_monthly_amount},
        outputs=_payoff_outputs(payoff),
        display_results=_payoff_display(payoff),
    )


@_logged("additional-payment")
def scenario_result(
    loan_amount: float,
    annual_rate_percent: float,
    term_years: int,
    scenario: PaymentScenario,
) -> CalculationResult:
    """Time and interest saved by a lump sum and/or a time-limited extra amount"""
    params = LoanParameters(loan_amount, annual_rate_percent, term_years)
    payoff = simulate_scenario(params, scenario)

    return CalculationResult(
        calculation_type="additional-payment",
        inputs={**_plain(params), "scenario": _plain(scenario)},
        outputs=_payoff_outputs(payoff),
        display_results=_payoff_display(payoff, include_new_payment=False),
    )


@_logged("comparison")
def comparison_result(
    loan_amount: float,
    annual_rate_percent: float,
    term_years: int,
    terms: Sequence[int] = DEFAULT_COMPARISON_TERMS,
    rate_offsets: Sequence[float] = DEFAULT_RATE_OFFSETS,
) -> CalculationResult:
    """Payment and interest across terms and rates, with the balance over time"""
    params = LoanParameters(loan_amount, annual_rate_percent, term_years)
    by_term = compare_terms(loan_amount, annual_rate_percent, terms)
    by_rate = compare_rates(loan_amount, term_years, rate_spread(annual_rate_percent, rate_offsets))
    savings = potential_savings(by_rate, loan_option(loan_amount, annual_rate_percent, term_years))

    display = [
        DisplayItem(
            label=f"{option.term_years}-Year Term",
            value=f"{format_currency(option.monthly_payment)} per month",
            tooltip=f"Total interest {format_currency(option.total_interest)}",
        )
        for option in by_term
    ]
    display.extend(
        DisplayItem(
            label=f"{option.annual_rate_percent:g}% Rate",
            value=f"{format_currency(option.monthly_payment)} per month",
            tooltip=f"Total interest {format_currency(option.total_interest)}",
        )
        for option in by_rate
    )
    display.append(
        DisplayItem(
            label="Potential Savings",
            value=format_currency(savings),
            tooltip="Interest saved at the lowest compared rate instead of your current rate",
        )
    )

    return CalculationResult(
        calculation_type="comparison",
        inputs={
            **_plain(params),
            "terms": list(terms),
            "rate_offsets": list(rate_offsets),
        },
        outputs={
            "by_term": _plain(by_term),
            "by_rate": _plain(by_rate),
            "potential_savings": savings,
            "yearly_balances": list(yearly_balances(params)),
        },
        display_results=display,
    )


@_logged("transfer")
def transfer_result(
    purchase_price: float,
    loan_amount: Optional[float] = None,
    policy: Optional[TransferCostPolicy] = None,
) -> CalculationResult:
    """Transfer duty and registration costs for a purchase"""
    policy = policy or settings.transfer_cost_policy()
    costs = calculate_transfer_costs(purchase_price, loan_amount, policy)

    return CalculationResult(
        calculation_type="transfer",
        inputs={
            "purchase_price": purchase_price,
            "loan_amount": loan_amount,
            "fee_base": policy.fee_base.value,
        },
        outputs={**_plain(costs), "total_costs": costs.total_costs},
        display_results=[
            DisplayItem(
                label="Transfer Duty",
                value=format_currency(costs.transfer_duty),
                tooltip="Government tax on property transfers",
            ),
            DisplayItem(
                label="Transfer Attorney Fees",
                value=format_currency(costs.attorney_fee),
                tooltip="Fees for the attorney handling the property transfer",
            ),
            DisplayItem(
                label="Bond Registration Fee",
                value=format_currency(costs.bond_registration_fee),
                tooltip="Cost of registering the bond with the Deeds Office",
            ),
            DisplayItem(
                label="Deeds Office Fee",
                value=format_currency(costs.deeds_office_fee),
                tooltip="Fee charged by the Deeds Office for registration",
            ),
            DisplayItem(
                label="Total Costs",
                value=format_currency(costs.total_costs),
                tooltip="Total fees and costs for property transfer and bond registration",
            ),
        ],
    )


@_logged("eligibility")
def eligibility_result(
    profile: EligibilityProfile,
    policy: Optional[EligibilityPolicy] = None,
) -> CalculationResult:
    """Eligibility pre-check verdict with reasons and a suggested loan"""
    verdict = evaluate_eligibility(profile, policy or settings.eligibility_policy())

    display = [
        DisplayItem(
            label="Eligibility",
            value="Likely eligible" if verdict.eligible else "Not eligible",
            tooltip="A pre-check only; final approval rests with the lender.",
        ),
        DisplayItem(
            label="Loan-to-Value",
            value=format_percent(verdict.loan_to_value_percent),
            tooltip="Loan amount as a share of the property price.",
        ),
        DisplayItem(
            label="Debt-to-Income",
            value=format_percent(verdict.debt_to_income_percent),
            tooltip="Monthly obligations, including the projected bond repayment, as a share of income.",
        ),
    ]
    if verdict.suggested_loan_amount is not None:
        display.append(DisplayItem(label="Suggested Loan Amount", value=format_currency(verdict.suggested_loan_amount)))
    if verdict.suggested_monthly_payment is not None:
        display.append(
            DisplayItem(label="Estimated Monthly Repayment", value=format_currency(verdict.suggested_monthly_payment))
        )
    display.extend(DisplayItem(label="Reason", value=reason) for reason in verdict.blocking_reasons)
    display.extend(DisplayItem(label="Note", value=note) for note in verdict.advisory_notes)

    return CalculationResult(
        calculation_type="eligibility",
        inputs=_plain(profile),
        outputs={**_plain(verdict), "eligible": verdict.eligible},
        display_results=display,
    )


@_logged("affordability")
def affordability_result(
    gross_monthly_income: float,
    monthly_expenses: float,
    existing_debt: float,
    annual_rate_percent: float,
) -> CalculationResult:
    """How much the applicant could borrow"""
    result = calculate_affordability(gross_monthly_income, monthly_expenses, existing_debt, annual_rate_percent)

    return CalculationResult(
        calculation_type="affordability",
        inputs={
            "gross_monthly_income": gross_monthly_income,
            "monthly_expenses": monthly_expenses,
            "existing_debt": existing_debt,
            "annual_rate_percent": annual_rate_percent,
        },
        outputs=_plain(result),
        display_results=[
            DisplayItem(
                label="Maximum Loan Amount",
                value=format_currency(result.max_loan_amount),
                tooltip="The maximum home loan amount you could potentially qualify for based on your income and expenses.",
            ),
            DisplayItem(
                label="Affordable Monthly Payment",
                value=format_currency(result.available_for_loan),
                tooltip="The monthly repayment amount you can comfortably afford based on your financial situation.",
            ),
            DisplayItem(
                label="Recommended Property Price",
                value=format_currency(result.recommended_property_price),
                tooltip="The suggested property price range you should consider, assuming a standard deposit amount.",
            ),
        ],
    )


@_logged("deposit")
def deposit_savings_result(
    property_price: float,
    deposit_percent: float,
    monthly_saving: float,
    savings_rate_percent: float,
) -> CalculationResult:
    """How long it takes to save a deposit"""
    result = calculate_deposit_savings(property_price, deposit_percent, monthly_saving, savings_rate_percent)

    return CalculationResult(
        calculation_type="deposit",
        inputs={
            "property_price": property_price,
            "deposit_percent": deposit_percent,
            "monthly_saving": monthly_saving,
            "savings_rate_percent": savings_rate_percent,
        },
        outputs=_plain(result),
        display_results=[
            DisplayItem(
                label="Deposit Amount Required",
                value=format_currency(result.deposit_amount),
                tooltip="The total deposit amount you need to save based on the property price and deposit percentage.",
            ),
            DisplayItem(
                label="Time to Save Deposit",
                value=format_months(result.months_to_save),
                tooltip="The estimated time it will take you to save the required deposit amount with your monthly savings.",
            ),
            DisplayItem(
                label="Interest Earned",
                value=format_currency(round_currency(result.interest_earned)),
                tooltip="The amount of interest you will earn on your savings during the saving period.",
            ),
        ],
    )
