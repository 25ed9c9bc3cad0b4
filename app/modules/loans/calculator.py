"""
Amortized monthly payment calculation.

All arithmetic is Decimal. The monthly rate is fixed at 10 fractional digits
before it is raised to the term, and the payment is rounded half-up to cents.
"""
from decimal import Decimal, ROUND_HALF_UP, localcontext

from app.core.exceptions import ValidationFailedError

CENTS = Decimal("0.01")
MONTHLY_RATE_SCALE = Decimal("0.0000000001")
MONTHS_PER_YEAR = 12


def calculate_monthly_amount(
    amount: Decimal,
    annual_interest_rate: Decimal,
    duration: Decimal
) -> Decimal:
    """
    Fixed monthly payment that repays ``amount`` over ``duration`` months.

    ``annual_interest_rate`` is a percentage (12 means 12%). ``duration`` is
    truncated toward zero to whole months. A zero monthly rate yields the
    straight ``amount / months`` payment.

    Raises:
        ValidationFailedError: fewer than one whole month, or a negative rate.
    """
    months = int(duration)
    if months < 1:
        raise ValidationFailedError(
            f"Loan duration must be at least 1 month, got {duration}",
            code="INVALID_DURATION",
        )
    if annual_interest_rate < 0:
        raise ValidationFailedError(
            f"Annual interest rate cannot be negative, got {annual_interest_rate}",
            code="INVALID_INTEREST_RATE",
        )

    with localcontext() as ctx:
        ctx.prec = 50
        monthly_rate = (
            annual_interest_rate / (MONTHS_PER_YEAR * 100)
        ).quantize(MONTHLY_RATE_SCALE, rounding=ROUND_HALF_UP)

        # rates below the scale round to zero as well
        if monthly_rate == 0:
            return (amount / months).quantize(CENTS, rounding=ROUND_HALF_UP)

        growth = (1 + monthly_rate) ** months
        payment = amount * monthly_rate * growth / (growth - 1)

        return payment.quantize(CENTS, rounding=ROUND_HALF_UP)
