"""Home-loan eligibility pre-check - independent rules folded into one verdict"""

import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from wisebond_engine.domain import constants
from wisebond_engine.domain.annuity import monthly_payment
from wisebond_engine.domain.models import (
    AdverseRecord,
    CreditTier,
    EligibilityProfile,
    EligibilityVerdict,
    EmploymentDuration,
    EmploymentStatus,
    MissedPayments,
    ResidencyType,
)


@dataclass(frozen=True)
class EligibilityPolicy:
    """Thresholds for the pre-check (percentages are 0-100)"""

    reference_rate_percent: float = constants.REFERENCE_RATE_PERCENT
    min_age: int = constants.MIN_AGE
    max_age: int = constants.MAX_AGE
    min_monthly_income: float = constants.MIN_MONTHLY_INCOME
    max_ltv_percent: float = constants.MAX_LTV_PERCENT
    max_dti_percent: float = constants.MAX_DTI_PERCENT
    min_credit_tier: CreditTier = CreditTier.FAIR
    advisory_ltv_percent: float = constants.ADVISORY_LTV_PERCENT
    advisory_dti_percent: float = constants.ADVISORY_DTI_PERCENT
    counter_offer_dti_floor: float = constants.COUNTER_OFFER_DTI_FLOOR
    counter_offer_factor: float = constants.COUNTER_OFFER_FACTOR
    credit_card_monthly_rate: float = constants.CREDIT_CARD_MONTHLY_RATE
    instalment_debt_term_months: int = constants.INSTALMENT_DEBT_TERM_MONTHS


DEFAULT_ELIGIBILITY_POLICY = EligibilityPolicy()


@dataclass(frozen=True)
class AffordabilityMetrics:
    """Ratios every rule is evaluated against"""

    total_monthly_income: float
    estimated_monthly_debt_service: float
    projected_monthly_payment: float
    loan_to_value_percent: float
    debt_to_income_percent: float


@dataclass(frozen=True)
class RuleOutcome:
    """A failed (blocking) or cautionary (advisory) rule"""

    code: str
    message: str


Rule = Callable[[EligibilityProfile, AffordabilityMetrics, EligibilityPolicy], Optional[RuleOutcome]]


def estimate_monthly_debt_service(profile: EligibilityProfile, policy: EligibilityPolicy) -> float:
    """
    Monthly cost of existing obligations.

    Assumptions:
    - Credit cards: 5% of the outstanding balance per month
    - Personal, car and other loans: balance amortized over 60 months
    - Plus any debt service the applicant already reported as a monthly figure
    """
    instalment_debt = profile.personal_loans + profile.car_loans + profile.other_loans
    return (
        profile.existing_monthly_debt_service
        + profile.credit_card_debt * policy.credit_card_monthly_rate
        + instalment_debt / policy.instalment_debt_term_months
    )


def compute_metrics(profile: EligibilityProfile, policy: EligibilityPolicy) -> AffordabilityMetrics:
    total_income = profile.total_monthly_income
    debt_service = estimate_monthly_debt_service(profile, policy)
    projected = monthly_payment(profile.loan_amount, policy.reference_rate_percent, profile.loan_term_years)

    obligations = profile.monthly_expenses + debt_service + projected
    if total_income > 0:
        dti = obligations / total_income * 100
    else:
        dti = math.inf if obligations > 0 else 0.0

    return AffordabilityMetrics(
        total_monthly_income=total_income,
        estimated_monthly_debt_service=debt_service,
        projected_monthly_payment=projected,
        loan_to_value_percent=profile.loan_amount / profile.property_price * 100,
        debt_to_income_percent=dti,
    )


# Blocking rules. Each is independent; the tuple order is only the order
# reasons are reported in.


def age_rule(
    profile: EligibilityProfile, metrics: AffordabilityMetrics, policy: EligibilityPolicy
) -> Optional[RuleOutcome]:
    if not policy.min_age <= profile.age <= policy.max_age:
        return RuleOutcome(
            "AGE_OUT_OF_RANGE",
            f"Age requirement: Applicants should typically be between "
            f"{policy.min_age} and {policy.max_age} years old",
        )
    return None


def income_rule(
    profile: EligibilityProfile, metrics: AffordabilityMetrics, policy: EligibilityPolicy
) -> Optional[RuleOutcome]:
    if metrics.total_monthly_income < policy.min_monthly_income:
        return RuleOutcome(
            "INCOME_BELOW_MINIMUM",
            f"Income requirement: Minimum gross monthly income should be at least "
            f"R{policy.min_monthly_income:,.0f}",
        )
    return None


def ltv_rule(
    profile: EligibilityProfile, metrics: AffordabilityMetrics, policy: EligibilityPolicy
) -> Optional[RuleOutcome]:
    if metrics.loan_to_value_percent > policy.max_ltv_percent:
        return RuleOutcome(
            "LTV_OVER_LIMIT",
            f"Loan-to-value ratio: Maximum LTV is typically {policy.max_ltv_percent:g}%. "
            f"Consider a larger deposit",
        )
    return None


def dti_rule(
    profile: EligibilityProfile, metrics: AffordabilityMetrics, policy: EligibilityPolicy
) -> Optional[RuleOutcome]:
    if metrics.debt_to_income_percent > policy.max_dti_percent:
        return RuleOutcome(
            "DTI_OVER_LIMIT",
            f"Debt-to-income ratio: Your DTI ratio exceeds {policy.max_dti_percent:g}%. "
            f"Consider reducing debt or expenses",
        )
    return None


def credit_tier_rule(
    profile: EligibilityProfile, metrics: AffordabilityMetrics, policy: EligibilityPolicy
) -> Optional[RuleOutcome]:
    if profile.credit_tier.rank < policy.min_credit_tier.rank:
        return RuleOutcome(
            "CREDIT_TIER_TOO_LOW",
            "Credit score: Banks typically require a fair to excellent credit score",
        )
    return None


def adverse_history_rule(
    profile: EligibilityProfile, metrics: AffordabilityMetrics, policy: EligibilityPolicy
) -> Optional[RuleOutcome]:
    if (
        profile.missed_payments == MissedPayments.MANY
        or profile.judgments == AdverseRecord.YES
        or profile.bankruptcy == AdverseRecord.YES
    ):
        return RuleOutcome(
            "ADVERSE_CREDIT_HISTORY",
            "Credit history: Recent missed payments, judgments, or bankruptcies may affect approval",
        )
    return None


def employment_status_rule(
    profile: EligibilityProfile, metrics: AffordabilityMetrics, policy: EligibilityPolicy
) -> Optional[RuleOutcome]:
    if profile.employment_status == EmploymentStatus.UNEMPLOYED:
        return RuleOutcome(
            "UNEMPLOYED",
            "Employment: Stable employment is typically required for loan approval",
        )
    return None


def employment_duration_rule(
    profile: EligibilityProfile, metrics: AffordabilityMetrics, policy: EligibilityPolicy
) -> Optional[RuleOutcome]:
    if (
        profile.employment_duration == EmploymentDuration.LESS_THAN_6_MONTHS
        and profile.employment_status != EmploymentStatus.SELF_EMPLOYED
    ):
        return RuleOutcome(
            "EMPLOYMENT_TOO_SHORT",
            "Employment duration: At least 6 months in current job is typically preferred",
        )
    return None


def residency_rule(
    profile: EligibilityProfile, metrics: AffordabilityMetrics, policy: EligibilityPolicy
) -> Optional[RuleOutcome]:
    if not profile.is_citizen and profile.residency_type == ResidencyType.TEMPORARY:
        return RuleOutcome(
            "TEMPORARY_RESIDENCY",
            "Residency status: Permanent residence or citizenship is typically preferred",
        )
    return None


BLOCKING_RULES: Tuple[Rule, ...] = (
    age_rule,
    income_rule,
    ltv_rule,
    dti_rule,
    credit_tier_rule,
    adverse_history_rule,
    employment_status_rule,
    employment_duration_rule,
    residency_rule,
)


# Advisory rules never block; they are only reported for eligible applicants.


def deposit_advisory(
    profile: EligibilityProfile, metrics: AffordabilityMetrics, policy: EligibilityPolicy
) -> Optional[RuleOutcome]:
    if metrics.loan_to_value_percent > policy.advisory_ltv_percent:
        return RuleOutcome(
            "LARGER_DEPOSIT_ADVISED",
            "Note: Deposits larger than 20% typically secure better interest rates",
        )
    return None


def dti_advisory(
    profile: EligibilityProfile, metrics: AffordabilityMetrics, policy: EligibilityPolicy
) -> Optional[RuleOutcome]:
    if metrics.debt_to_income_percent > policy.advisory_dti_percent:
        return RuleOutcome(
            "HIGH_DTI",
            "Note: Your debt-to-income ratio is on the higher side. "
            "Reducing this may improve loan terms",
        )
    return None


ADVISORY_RULES: Tuple[Rule, ...] = (deposit_advisory, dti_advisory)


def suggest_loan_amount(requested: float, dti_percent: float, policy: EligibilityPolicy) -> float:
    """Counter-offer a reduced amount when DTI sits just under the hard limit"""
    if policy.counter_offer_dti_floor < dti_percent <= policy.max_dti_percent:
        return float(round(requested * policy.counter_offer_factor))
    return requested


def evaluate_eligibility(
    profile: EligibilityProfile,
    policy: EligibilityPolicy = DEFAULT_ELIGIBILITY_POLICY,
) -> EligibilityVerdict:
    """
    Single-pass fold over independent rules.

    Any blocking outcome makes the applicant ineligible. Advisory notes and
    the suggested loan/payment are only produced when every blocking rule
    passes. The verdict depends on nothing but ``profile`` and ``policy``.
    """
    metrics = compute_metrics(profile, policy)

    blocking = [
        outcome
        for rule in BLOCKING_RULES
        if (outcome := rule(profile, metrics, policy)) is not None
    ]
    eligible = not blocking

    advisory = []
    if eligible:
        advisory = [
            outcome
            for rule in ADVISORY_RULES
            if (outcome := rule(profile, metrics, policy)) is not None
        ]

    requested = profile.loan_amount
    return EligibilityVerdict(
        blocking_reasons=tuple(o.message for o in blocking),
        blocking_codes=tuple(o.code for o in blocking),
        advisory_notes=tuple(o.message for o in advisory),
        loan_to_value_percent=round(metrics.loan_to_value_percent, 1),
        debt_to_income_percent=round(metrics.debt_to_income_percent, 1),
        requested_loan_amount=requested,
        projected_monthly_payment=metrics.projected_monthly_payment,
        suggested_loan_amount=(
            suggest_loan_amount(requested, metrics.debt_to_income_percent, policy) if eligible else None
        ),
        suggested_monthly_payment=(
            float(round(metrics.projected_monthly_payment)) if eligible else None
        ),
    )
