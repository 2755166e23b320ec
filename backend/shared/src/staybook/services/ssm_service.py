"""Stripe secrets from AWS SSM Parameter Store.

Only consulted when ``STRIPE_SECRET_KEY`` / ``STRIPE_WEBHOOK_SECRET`` are not
set. Parameters live under ``/staybook/<environment>/stripe/<name>`` as
SecureStrings.
"""

import logging
from functools import lru_cache
from typing import Any

import boto3
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

_REASONS = {
    "ParameterNotFound": "parameter not found",
    "AccessDeniedException": "access denied (check ssm:GetParameter and kms:Decrypt)",
}


def stripe_parameter_name(environment: str, name: str) -> str:
    """Build the SSM path of a Stripe secret, e.g. /staybook/dev/stripe/secret_key."""
    return f"/staybook/{environment}/stripe/{name}"


class SSMServiceError(Exception):
    """Raised when a Stripe secret cannot be read from SSM."""

    pass


class SSMService:
    """Decrypting reader for Stripe secrets; each value is fetched once per instance."""

    def __init__(self, client: Any = None) -> None:
        self._client = client or boto3.client("ssm")
        self._values: dict[str, str] = {}

    def get_parameter(self, name: str) -> str:
        """Return the decrypted value of ``name``.

        Raises:
            SSMServiceError: If the parameter is missing or unreadable.
        """
        if name not in self._values:
            self._values[name] = self._fetch(name)
        return self._values[name]

    def _fetch(self, name: str) -> str:
        try:
            response = self._client.get_parameter(Name=name, WithDecryption=True)
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "Unknown")
            reason = _REASONS.get(code, f"{code}: {e}")
            raise SSMServiceError(f"Cannot read SSM parameter {name}: {reason}") from e

        logger.info("Loaded Stripe secret from SSM parameter %s", name)
        return response["Parameter"]["Value"]


@lru_cache(maxsize=1)
def get_ssm_service() -> SSMService:
    """Process-wide SSMService, so secrets are fetched at most once."""
    return SSMService()
