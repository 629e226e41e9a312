"""Closed-form annuity math for fixed-rate, fully-amortizing loans"""

from wisebond_engine.domain.models import (
    AnnuityTotals,
    require_non_negative,
    require_rate,
    require_term,
)


def monthly_payment(principal: float, annual_rate_percent: float, term_years: int) -> float:
    """
    Fixed monthly payment that clears ``principal`` over ``term_years``.

    M = P * r * (1+r)^n / ((1+r)^n - 1), with r the monthly rate and n the
    number of monthly payments. A zero rate degenerates to P / n.

    Raises:
        InvalidParameterError: negative principal, non-positive term, or a
            rate outside [0, 100)
    """
    require_non_negative("principal", principal)
    require_rate("annual_rate_percent", annual_rate_percent)
    require_term("term_years", term_years)

    r = annual_rate_percent / 100 / 12
    n = term_years * 12
    if r == 0:
        return principal / n

    # Same as P * r * g / (g - 1) with g = (1+r)^n, without overflowing g
    return principal * r / (1 - (1 + r) ** -n)


def annuity_totals(principal: float, annual_rate_percent: float, term_years: int) -> AnnuityTotals:
    """Payment, total repayment and total interest, all from one computed payment"""
    payment = monthly_payment(principal, annual_rate_percent, term_years)
    total_repayment = payment * term_years * 12
    return AnnuityTotals(
        monthly_payment=payment,
        total_repayment=total_repayment,
        total_interest=total_repayment - principal,
    )


def total_repayment(principal: float, annual_rate_percent: float, term_years: int) -> float:
    return annuity_totals(principal, annual_rate_percent, term_years).total_repayment


def total_interest(principal: float, annual_rate_percent: float, term_years: int) -> float:
    return annuity_totals(principal, annual_rate_percent, term_years).total_interest


def principal_from_payment(payment: float, annual_rate_percent: float, term_years: int) -> float:
    """
    Inverse of monthly_payment: the loan a given payment fully amortizes.

    Used to turn an affordable monthly amount into a maximum loan size.
    """
    require_non_negative("payment", payment)
    require_rate("annual_rate_percent", annual_rate_percent)
    require_term("term_years", term_years)

    r = annual_rate_percent / 100 / 12
    n = term_years * 12
    if r == 0:
        return payment * n
    return payment * (1 - (1 + r) ** -n) / r
