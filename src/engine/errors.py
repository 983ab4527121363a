"""Engine error taxonomy.

Both errors subclass ValueError: every failure is a deterministic function of
the inputs, so callers can treat them as validation failures.
"""

from decimal import Decimal


class InvalidInputError(ValueError):
    """A numeric input is out of range on its own (negative principal, bad rate, ...)."""


class NeverAmortizesError(ValueError):
    """The payment does not exceed the periodic interest, so the balance never falls."""

    def __init__(self, payment_amount: Decimal, minimum_payment: Decimal):
        self.payment_amount = payment_amount
        self.minimum_payment = minimum_payment
        super().__init__(
            f"Payment of ${payment_amount:,.2f} never pays off the loan; "
            f"it must be greater than ${minimum_payment:,.2f} (monthly interest). "
            "Increase your payment."
        )
