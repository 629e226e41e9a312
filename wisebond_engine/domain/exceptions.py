"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidParameterError(DomainException, ValueError):
    """Numeric input is outside the domain of the calculation (never clamped)"""

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}={value!r}: {reason}")


class NonAmortizingLoanError(DomainException):
    """Payment does not exceed accruing interest, so the balance never decreases"""

    def __init__(self, month: int, balance: float, payment: float, interest: float):
        self.month = month
        self.balance = balance
        self.payment = payment
        self.interest = interest
        super().__init__(
            f"Payment {payment:.2f} does not cover interest {interest:.2f} "
            f"on balance {balance:.2f} (month {month})"
        )


class PayoffSimulationDivergedError(DomainException):
    """Payoff simulation hit its iteration cap without clearing the balance"""

    def __init__(self, iteration_cap: int, remaining_balance: float):
        self.iteration_cap = iteration_cap
        self.remaining_balance = remaining_balance
        super().__init__(
            f"Balance {remaining_balance:.2f} still outstanding after {iteration_cap} months"
        )
