"""Pytest fixtures for testing"""

import pytest

from wisebond_engine.domain.models import (
    CreditTier,
    EligibilityProfile,
    EmploymentDuration,
    EmploymentStatus,
    LoanParameters,
)


@pytest.fixture
def standard_loan() -> LoanParameters:
    """R900,000 over 25 years at 11.25%"""
    return LoanParameters(principal=900_000, annual_rate_percent=11.25, term_years=25)


@pytest.fixture
def eligible_profile() -> EligibilityProfile:
    """
    Applicant who passes every rule with no advisory notes.

    R1.5m property with a 20% deposit (LTV exactly 80%), R60k income and
    R8k expenses: projected repayment at 9.75% over 20 years is ~R11,382,
    so DTI is ~32.3%.
    """
    return EligibilityProfile(
        age=35,
        gross_monthly_income=60_000,
        monthly_expenses=8_000,
        property_price=1_500_000,
        deposit_amount=300_000,
        loan_term_years=20,
        credit_tier=CreditTier.GOOD,
        employment_status=EmploymentStatus.FULL_TIME,
        employment_duration=EmploymentDuration.THREE_TO_5_YEARS,
    )
