"""Rates, thresholds and bracket tables used by the calculators"""

import math

# South African transfer duty: (lower_bound, upper_bound, base_amount, marginal_rate)
# base_amount is the duty accrued up to lower_bound.
SA_TRANSFER_DUTY_TABLE = (
    (0.0, 1_000_000.0, 0.0, 0.0),
    (1_000_000.0, 1_375_000.0, 0.0, 0.03),
    (1_375_000.0, 1_925_000.0, 11_250.0, 0.06),
    (1_925_000.0, 2_475_000.0, 44_250.0, 0.08),
    (2_475_000.0, 11_000_000.0, 88_250.0, 0.11),
    (11_000_000.0, math.inf, 1_026_000.0, 0.13),
)

# Ancillary transfer costs (approximations used on the public calculators)
ATTORNEY_FEE_RATE = 0.015
BOND_REGISTRATION_FEE_RATE = 0.012
DEEDS_OFFICE_FEE = 1500.0

# Eligibility pre-check
REFERENCE_RATE_PERCENT = 9.75
MIN_AGE = 18
MAX_AGE = 70
MIN_MONTHLY_INCOME = 5000.0
MAX_LTV_PERCENT = 90.0
MAX_DTI_PERCENT = 45.0
ADVISORY_LTV_PERCENT = 80.0
ADVISORY_DTI_PERCENT = 35.0
COUNTER_OFFER_DTI_FLOOR = 40.0  # exclusive
COUNTER_OFFER_FACTOR = 0.9

# Existing-debt service assumptions
CREDIT_CARD_MONTHLY_RATE = 0.05  # 5% of the card balance per month
INSTALMENT_DEBT_TERM_MONTHS = 60  # personal/car/other loans over 5 years

# Payoff simulation circuit-breaker: months allowed = term_months * multiplier
PAYOFF_ITERATION_CAP_MULTIPLIER = 4

# Affordability
AFFORDABILITY_TERM_YEARS = 25
MAX_REPAYMENT_TO_INCOME = 0.3
ASSUMED_DEPOSIT_RATIO = 0.1
