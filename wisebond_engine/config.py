"""Configuration management using Pydantic Settings"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from wisebond_engine.domain import constants
from wisebond_engine.domain.eligibility import EligibilityPolicy
from wisebond_engine.domain.models import CreditTier, FeeBase
from wisebond_engine.domain.transfer_costs import TransferCostPolicy


class Settings(BaseSettings):
    """Engine configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "wisebond-engine"
    log_level: str = "INFO"

    # Eligibility pre-check
    reference_rate_percent: float = Field(constants.REFERENCE_RATE_PERCENT, ge=0, lt=100)
    min_age: int = constants.MIN_AGE
    max_age: int = constants.MAX_AGE
    min_monthly_income: float = constants.MIN_MONTHLY_INCOME
    max_ltv_percent: float = constants.MAX_LTV_PERCENT
    max_dti_percent: float = constants.MAX_DTI_PERCENT
    min_credit_tier: CreditTier = CreditTier.FAIR
    advisory_ltv_percent: float = constants.ADVISORY_LTV_PERCENT
    advisory_dti_percent: float = constants.ADVISORY_DTI_PERCENT
    counter_offer_dti_floor: float = constants.COUNTER_OFFER_DTI_FLOOR
    counter_offer_factor: float = Field(constants.COUNTER_OFFER_FACTOR, gt=0, le=1)

    # Transfer costs
    attorney_fee_rate: float = Field(constants.ATTORNEY_FEE_RATE, ge=0)
    bond_registration_fee_rate: float = Field(constants.BOND_REGISTRATION_FEE_RATE, ge=0)
    deeds_office_fee: float = Field(constants.DEEDS_OFFICE_FEE, ge=0)
    fee_base: FeeBase = FeeBase.PURCHASE_PRICE

    def eligibility_policy(self) -> EligibilityPolicy:
        return EligibilityPolicy(
            reference_rate_percent=self.reference_rate_percent,
            min_age=self.min_age,
            max_age=self.max_age,
            min_monthly_income=self.min_monthly_income,
            max_ltv_percent=self.max_ltv_percent,
            max_dti_percent=self.max_dti_percent,
            min_credit_tier=self.min_credit_tier,
            advisory_ltv_percent=self.advisory_ltv_percent,
            advisory_dti_percent=self.advisory_dti_percent,
            counter_offer_dti_floor=self.counter_offer_dti_floor,
            counter_offer_factor=self.counter_offer_factor,
        )

    def transfer_cost_policy(self) -> TransferCostPolicy:
        return TransferCostPolicy(
            attorney_fee_rate=self.attorney_fee_rate,
            bond_registration_fee_rate=self.bond_registration_fee_rate,
            deeds_office_fee=self.deeds_office_fee,
            fee_base=self.fee_base,
        )


settings = Settings()
