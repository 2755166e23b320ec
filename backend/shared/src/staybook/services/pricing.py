"""Pricing service for stay price calculation.

All arithmetic is done on integer minor currency units.
"""

import datetime as dt

from staybook.models import DEFAULT_CURRENCY, Failure, PriceQuote, Property

INVALID_RANGE_MESSAGE = "checkout must be after checkin"


def format_amount(amount_cents: int, currency: str) -> str:
    """Render minor units as a major-unit decimal string.

    Args:
        amount_cents: Amount in minor units (>= 0)
        currency: ISO currency code

    Returns:
        String like "300.00 EUR"
    """
    major, minor = divmod(amount_cents, 100)
    return f"{major}.{minor:02d} {currency.upper()}"


class PricingService:
    """Service for nights and total price calculations. Stateless."""

    @staticmethod
    def validate_range(check_in: dt.date, check_out: dt.date) -> Failure | None:
        """Check that check_out is strictly after check_in.

        Returns:
            None if the range is valid, otherwise an INVALID_INPUT Failure
        """
        if check_out <= check_in:
            return Failure.invalid_input(
                INVALID_RANGE_MESSAGE,
                checkin=check_in.isoformat(),
                checkout=check_out.isoformat(),
            )
        return None

    @staticmethod
    def nights_between(check_in: dt.date, check_out: dt.date) -> int:
        """Number of nights in [check_in, check_out)."""
        return (check_out - check_in).days

    def calculate_price(
        self,
        check_in: dt.date,
        check_out: dt.date,
        nightly_rate_cents: int,
        currency: str = DEFAULT_CURRENCY,
    ) -> PriceQuote | Failure:
        """Calculate total price for a stay.

        Args:
            check_in: Check-in date
            check_out: Check-out date (exclusive)
            nightly_rate_cents: Nightly price in minor units
            currency: ISO currency code

        Returns:
            PriceQuote, or INVALID_INPUT Failure when check_out <= check_in
        """
        invalid = self.validate_range(check_in, check_out)
        if invalid:
            return invalid

        nights = self.nights_between(check_in, check_out)
        total = nights * nightly_rate_cents
        currency = currency.upper()

        return PriceQuote(
            checkin=check_in,
            checkout=check_out,
            nights=nights,
            currency=currency,
            price_per_night_cents=nightly_rate_cents,
            total_cents=total,
            total_formatted=format_amount(total, currency),
        )

    def quote(self, prop: Property, check_in: dt.date, check_out: dt.date) -> PriceQuote | Failure:
        """Calculate the price of a stay at a property."""
        return self.calculate_price(
            check_in,
            check_out,
            prop.price_per_night_cents,
            prop.currency,
        )
