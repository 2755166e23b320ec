"""Stripe payment service for checkout sessions and webhook verification.

Provides integration with Stripe using the v8+ StripeClient pattern.
Secrets come from the environment, or from SSM Parameter Store when unset.

Every gateway request is bounded by ``PAYMENT_TIMEOUT_SECONDS``; Stripe's
client retries transient failures up to ``STRIPE_MAX_NETWORK_RETRIES``
times. A timeout surfaces as ``stripe.APIConnectionError`` and is reported
like any other transient failure.
"""

import logging
from datetime import datetime, timezone
from typing import Protocol

import stripe
from stripe import StripeClient

from staybook.config import Settings, get_settings
from staybook.models import PaymentSession

from .ssm_service import SSMService, SSMServiceError, get_ssm_service, stripe_parameter_name

logger = logging.getLogger(__name__)

# Checkout sessions lapse after 30 minutes
CHECKOUT_SESSION_TTL_SECONDS = 1800

# Stripe error codes that indicate a transient condition
STRIPE_RETRYABLE_ERRORS: set[str] = {
    "processing_error",
    "rate_limit",
    "lock_timeout",
    "api_connection_error",
}

TRANSIENT_STRIPE_ERRORS = (
    stripe.APIConnectionError,
    stripe.RateLimitError,
    stripe.APIError,
)


class PaymentSessionError(Exception):
    """Raised when a payment session cannot be created."""

    def __init__(
        self,
        message: str,
        stripe_error_code: str | None = None,
        retryable: bool = False,
    ) -> None:
        """Initialize with message and failure classification.

        Args:
            message: Human-readable error message.
            stripe_error_code: Stripe-specific error code if available.
            retryable: True for transient failures (network, timeout, rate limit).
        """
        super().__init__(message)
        self.stripe_error_code = stripe_error_code
        self.retryable = retryable


class WebhookSignatureError(Exception):
    """Raised when a webhook payload fails signature verification."""

    pass


class PaymentSessionFactory(Protocol):
    """Contract of the hosted payment page provider."""

    def create_checkout_session(
        self,
        *,
        reservation_id: str,
        amount_cents: int,
        currency: str,
        description: str,
        customer_email: str | None,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
        product_name: str,
    ) -> PaymentSession: ...


def is_retryable(error: stripe.StripeError) -> bool:
    """Whether a Stripe error is likely transient."""
    if isinstance(error, TRANSIENT_STRIPE_ERRORS):
        return True
    return getattr(error, "code", None) in STRIPE_RETRYABLE_ERRORS


class StripeService:
    """Service for Stripe payment operations.

    Handles:
    - Checkout session creation
    - Webhook signature validation

    Usage:
        stripe_svc = StripeService(get_settings())
        session = stripe_svc.create_checkout_session(
            reservation_id="3f7c...",
            amount_cents=30000,
            currency="eur",
            description="Villa X: 2024-06-01 → 2024-06-04 · 3 nights",
            customer_email="guest@example.com",
            success_url="https://example.com/success",
            cancel_url="https://example.com/cancel",
            metadata={"property_slug": "villa-x"},
            product_name="Stay: Villa X",
        )
    """

    def __init__(
        self,
        settings: Settings | None = None,
        ssm: SSMService | None = None,
    ) -> None:
        """Initialize Stripe service.

        Args:
            settings: Process settings. Defaults to get_settings().
            ssm: SSM service used when secrets are not in the environment.
        """
        self._settings = settings or get_settings()
        self._ssm = ssm
        self._client: StripeClient | None = None
        self._webhook_secret: str | None = None

    def _get_secret(self, configured: str | None, name: str) -> str:
        if configured:
            return configured
        if self._ssm is None:
            self._ssm = get_ssm_service()
        return self._ssm.get_parameter(stripe_parameter_name(self._settings.environment, name))

    def _get_client(self) -> StripeClient:
        """Get or create the Stripe client (lazy initialization).

        Raises:
            PaymentSessionError: If credentials cannot be retrieved.
        """
        if self._client is None:
            try:
                secret_key = self._get_secret(self._settings.stripe_secret_key, "secret_key")
            except SSMServiceError as e:
                raise PaymentSessionError(f"Failed to initialize Stripe client: {e}") from e

            self._client = StripeClient(
                secret_key,
                http_client=stripe.RequestsClient(timeout=self._settings.payment_timeout_seconds),
                max_network_retries=self._settings.stripe_max_network_retries,
            )
            logger.info("Stripe client initialized for environment: %s", self._settings.environment)
        return self._client

    def _get_webhook_secret(self) -> str:
        """Get the webhook signing secret.

        Raises:
            PaymentSessionError: If secret cannot be retrieved.
        """
        if self._webhook_secret is None:
            try:
                self._webhook_secret = self._get_secret(
                    self._settings.stripe_webhook_secret, "webhook_secret"
                )
            except SSMServiceError as e:
                raise PaymentSessionError(f"Failed to get webhook secret: {e}") from e
        return self._webhook_secret

    def create_checkout_session(
        self,
        *,
        reservation_id: str,
        amount_cents: int,
        currency: str,
        description: str,
        customer_email: str | None,
        success_url: str,
        cancel_url: str,
        metadata: dict[str, str],
        product_name: str,
    ) -> PaymentSession:
        """Create a Stripe Checkout session.

        Args:
            reservation_id: Reservation ID (used as idempotency key).
            amount_cents: Amount in minor units.
            currency: ISO currency code.
            description: Line item description.
            customer_email: Customer email for the Stripe receipt.
            success_url: URL to redirect on success (supports {CHECKOUT_SESSION_ID}).
            cancel_url: URL to redirect on cancel.
            metadata: Correlation data echoed back in webhook events.
            product_name: Line item name shown on the hosted page.

        Returns:
            PaymentSession with the hosted checkout URL.

        Raises:
            PaymentSessionError: If session creation fails or times out.
        """
        client = self._get_client()

        session_metadata = {key: str(value) for key, value in metadata.items()}
        session_metadata["reservation_id"] = reservation_id

        try:
            logger.info(
                "Creating Stripe checkout session for reservation %s, amount %d %s",
                reservation_id,
                amount_cents,
                currency.upper(),
            )

            session = client.checkout.sessions.create(
                params={
                    "mode": "payment",
                    "line_items": [
                        {
                            "price_data": {
                                "currency": currency.lower(),
                                "unit_amount": amount_cents,
                                "product_data": {
                                    "name": product_name,
                                    "description": description,
                                },
                            },
                            "quantity": 1,
                        }
                    ],
                    "success_url": success_url,
                    "cancel_url": cancel_url,
                    "metadata": session_metadata,
                    "customer_email": customer_email,
                    "expires_at": int(datetime.now(timezone.utc).timestamp())
                    + CHECKOUT_SESSION_TTL_SECONDS,
                },
                options={"idempotency_key": f"checkout_{reservation_id}"},
            )

        except stripe.StripeError as e:
            error_code = getattr(e, "code", None)
            retryable = is_retryable(e)
            logger.error(
                "Stripe checkout session creation failed: %s (code: %s, retryable: %s)",
                str(e),
                error_code,
                retryable,
            )
            raise PaymentSessionError(
                f"Failed to create checkout session: {e}",
                stripe_error_code=error_code,
                retryable=retryable,
            ) from e

        logger.info("Checkout session created: %s for reservation %s", session.id, reservation_id)

        return PaymentSession(
            session_id=session.id,
            checkout_url=session.url,
            expires_at=(
                datetime.fromtimestamp(session.expires_at, tz=timezone.utc)
                if session.expires_at
                else None
            ),
        )

    def verify_webhook_signature(self, payload: bytes, signature: str) -> dict:
        """Verify a webhook signature and parse the event.

        Args:
            payload: Raw request body bytes.
            signature: Stripe-Signature header value.

        Returns:
            Parsed Stripe event dictionary.

        Raises:
            WebhookSignatureError: If signature is invalid.
            PaymentSessionError: If the webhook secret cannot be retrieved.
        """
        webhook_secret = self._get_webhook_secret()

        try:
            event = stripe.Webhook.construct_event(payload, signature, webhook_secret)
        except (stripe.SignatureVerificationError, ValueError) as e:
            logger.warning("Invalid webhook signature: %s", str(e))
            raise WebhookSignatureError("Invalid webhook signature") from e

        logger.info("Webhook signature verified for event: %s", event["id"])
        return event.to_dict() if hasattr(event, "to_dict") else dict(event)
