"""Domain models - immutable value objects passed in and out of the calculators"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from wisebond_engine.domain.exceptions import InvalidParameterError


def require_non_negative(field: str, value: float) -> None:
    """Reject negative or non-finite money amounts"""
    if not math.isfinite(value) or value < 0:
        raise InvalidParameterError(field, value, "must be a finite amount >= 0")


def require_rate(field: str, annual_rate_percent: float) -> None:
    """Annual rate is a percentage in [0, 100)"""
    if not math.isfinite(annual_rate_percent) or not 0 <= annual_rate_percent < 100:
        raise InvalidParameterError(field, annual_rate_percent, "must be >= 0 and < 100")


def require_term(field: str, term_years: int) -> None:
    """Loan term is a whole number of years greater than zero"""
    if isinstance(term_years, bool) or not isinstance(term_years, int) or term_years <= 0:
        raise InvalidParameterError(field, term_years, "must be a positive whole number of years")


@dataclass(frozen=True)
class LoanParameters:
    """Fixed-rate, fully-amortizing loan terms"""

    principal: float
    annual_rate_percent: float
    term_years: int

    def __post_init__(self) -> None:
        require_non_negative("principal", self.principal)
        require_rate("annual_rate_percent", self.annual_rate_percent)
        require_term("term_years", self.term_years)

    @property
    def term_months(self) -> int:
        return self.term_years * 12

    @property
    def monthly_rate(self) -> float:
        return self.annual_rate_percent / 100 / 12


@dataclass(frozen=True)
class PaymentScenario:
    """
    Extra payments on top of the scheduled instalment.

    A one-off lump sum paid in ``lump_sum_month``, and/or a recurring extra
    amount from ``extra_start_month`` for ``extra_duration_months`` months
    (open-ended when None, which models a permanent payment increase).
    Months are 1-based payment numbers.
    """

    lump_sum_amount: float = 0.0
    lump_sum_month: int = 1
    extra_monthly_amount: float = 0.0
    extra_start_month: int = 1
    extra_duration_months: Optional[int] = None

    def __post_init__(self) -> None:
        require_non_negative("lump_sum_amount", self.lump_sum_amount)
        require_non_negative("extra_monthly_amount", self.extra_monthly_amount)
        for field in ("lump_sum_month", "extra_start_month"):
            value = getattr(self, field)
            if isinstance(value, bool) or not isinstance(value, int) or value < 1:
                raise InvalidParameterError(field, value, "must be a payment number >= 1")
        duration = self.extra_duration_months
        if duration is not None and (isinstance(duration, bool) or not isinstance(duration, int) or duration < 1):
            raise InvalidParameterError("extra_duration_months", duration, "must be a whole number of months >= 1")

    @property
    def is_empty(self) -> bool:
        return self.lump_sum_amount == 0 and self.extra_monthly_amount == 0

    def extra_for_month(self, month: int) -> float:
        """Total additional payment made in payment number ``month``"""
        extra = self.lump_sum_amount if month == self.lump_sum_month else 0.0
        in_window = month >= self.extra_start_month and (
            self.extra_duration_months is None
            or month < self.extra_start_month + self.extra_duration_months
        )
        if in_window:
            extra += self.extra_monthly_amount
        return extra


@dataclass(frozen=True)
class AnnuityTotals:
    """Closed-form payment and the totals derived from that same payment"""

    monthly_payment: float
    total_repayment: float
    total_interest: float


@dataclass(frozen=True)
class AmortizationPeriod:
    """One month (or one aggregated year) of a repayment schedule"""

    index: int  # 1-based month or year
    principal_component: float
    interest_component: float
    ending_balance: float
    cumulative_principal: float = 0.0
    cumulative_interest: float = 0.0

    @property
    def payment(self) -> float:
        return self.principal_component + self.interest_component


@dataclass(frozen=True)
class TransferDutyBracket:
    """Half-open price band [lower_bound, upper_bound) of a progressive duty table"""

    lower_bound: float
    upper_bound: float
    base_amount: float  # duty accrued up to lower_bound
    marginal_rate: float

    def contains(self, price: float) -> bool:
        return self.lower_bound <= price < self.upper_bound

    def duty_at(self, price: float) -> float:
        return self.base_amount + (price - self.lower_bound) * self.marginal_rate


class FeeBase(str, Enum):
    """Amount the percentage-based transfer fees are charged on"""

    PURCHASE_PRICE = "purchase_price"
    LOAN_AMOUNT = "loan_amount"


@dataclass(frozen=True)
class TransferCostBreakdown:
    """Transfer duty plus ancillary attorney, bond and deeds office fees"""

    purchase_price: float
    loan_amount: float
    fee_base: FeeBase
    transfer_duty: float
    attorney_fee: float
    bond_registration_fee: float
    deeds_office_fee: float

    @property
    def total_costs(self) -> float:
        return math.fsum(
            (self.transfer_duty, self.attorney_fee, self.bond_registration_fee, self.deeds_office_fee)
        )


class CreditTier(str, Enum):
    """Self-reported credit score band"""

    VERY_POOR = "very-poor"  # below 580
    POOR = "poor"  # 580-619
    FAIR = "fair"  # 620-679
    GOOD = "good"  # 680-699
    EXCELLENT = "excellent"  # 700+
    UNKNOWN = "unknown"

    @property
    def rank(self) -> int:
        """Ordering used for threshold checks; an unknown score ranks as fair"""
        return _CREDIT_TIER_RANK[self]


_CREDIT_TIER_RANK = {
    CreditTier.VERY_POOR: 0,
    CreditTier.POOR: 1,
    CreditTier.FAIR: 2,
    CreditTier.UNKNOWN: 2,
    CreditTier.GOOD: 3,
    CreditTier.EXCELLENT: 4,
}


class EmploymentStatus(str, Enum):
    FULL_TIME = "full-time"
    PART_TIME = "part-time"
    SELF_EMPLOYED = "self-employed"
    CONTRACT = "contract"
    RETIRED = "retired"
    UNEMPLOYED = "unemployed"


class EmploymentDuration(str, Enum):
    LESS_THAN_6_MONTHS = "less-than-6-months"
    SIX_TO_12_MONTHS = "6-months-to-1-year"
    ONE_TO_3_YEARS = "1-3-years"
    THREE_TO_5_YEARS = "3-5-years"
    MORE_THAN_5_YEARS = "more-than-5-years"


class ResidencyType(str, Enum):
    PERMANENT = "permanent"
    TEMPORARY = "temporary"
    WORK_VISA = "work-visa"


class MissedPayments(str, Enum):
    """Missed credit payments in the last 12 months"""

    NONE = "no"
    FEW = "yes-few"  # 1-2
    MANY = "yes-many"  # 3 or more


class AdverseRecord(str, Enum):
    """Status of a judgment or bankruptcy"""

    NO = "no"
    YES = "yes"
    REHABILITATED = "rehabilitated"


@dataclass(frozen=True)
class EligibilityProfile:
    """Normalized applicant data for the eligibility pre-check"""

    age: int
    gross_monthly_income: float
    property_price: float
    deposit_amount: float
    loan_term_years: int
    monthly_expenses: float = 0.0
    other_monthly_income: float = 0.0
    existing_monthly_debt_service: float = 0.0
    credit_card_debt: float = 0.0
    personal_loans: float = 0.0
    car_loans: float = 0.0
    other_loans: float = 0.0
    credit_tier: CreditTier = CreditTier.UNKNOWN
    employment_status: EmploymentStatus = EmploymentStatus.FULL_TIME
    employment_duration: EmploymentDuration = EmploymentDuration.ONE_TO_3_YEARS
    is_citizen: bool = True
    residency_type: Optional[ResidencyType] = None
    missed_payments: MissedPayments = MissedPayments.NONE
    judgments: AdverseRecord = AdverseRecord.NO
    bankruptcy: AdverseRecord = AdverseRecord.NO

    def __post_init__(self) -> None:
        if isinstance(self.age, bool) or not isinstance(self.age, int) or self.age < 0:
            raise InvalidParameterError("age", self.age, "must be a whole number >= 0")
        for field in (
            "gross_monthly_income",
            "other_monthly_income",
            "monthly_expenses",
            "existing_monthly_debt_service",
            "credit_card_debt",
            "personal_loans",
            "car_loans",
            "other_loans",
            "deposit_amount",
        ):
            require_non_negative(field, getattr(self, field))
        if not math.isfinite(self.property_price) or self.property_price <= 0:
            raise InvalidParameterError("property_price", self.property_price, "must be > 0")
        if self.deposit_amount > self.property_price:
            raise InvalidParameterError(
                "deposit_amount", self.deposit_amount, "cannot exceed the property price"
            )
        require_term("loan_term_years", self.loan_term_years)

    @property
    def total_monthly_income(self) -> float:
        return self.gross_monthly_income + self.other_monthly_income

    @property
    def loan_amount(self) -> float:
        return self.property_price - self.deposit_amount


@dataclass(frozen=True)
class EligibilityVerdict:
    """Output of the eligibility pre-check; eligible iff no blocking reasons"""

    blocking_reasons: Tuple[str, ...]
    blocking_codes: Tuple[str, ...]
    advisory_notes: Tuple[str, ...]
    loan_to_value_percent: float
    debt_to_income_percent: float
    requested_loan_amount: float
    projected_monthly_payment: float
    suggested_loan_amount: Optional[float] = None
    suggested_monthly_payment: Optional[float] = None

    @property
    def eligible(self) -> bool:
        return not self.blocking_reasons


@dataclass(frozen=True)
class AffordabilityResult:
    """How much an applicant could borrow from income and commitments"""

    disposable_income: float
    max_monthly_payment: float
    available_for_loan: float
    max_loan_amount: float
    recommended_property_price: float


@dataclass(frozen=True)
class DepositSavingsResult:
    """Time needed to save a deposit with regular contributions"""

    deposit_amount: float
    months_to_save: int
    total_contributions: float
    final_balance: float
    interest_earned: float
