"""
Stripe payment intents over the REST API.

Only intent creation is needed: the client confirms the charge with the
returned client secret.
"""

import logging
import math
from typing import Any, Optional

import requests

import config

logger = logging.getLogger(__name__)


class InvalidPrice(ValueError):
    pass


class PaymentGatewayError(Exception):
    pass


class PaymentGatewayUnavailable(Exception):
    pass


def to_minor_units(price: Any) -> int:
    """Convert a price in major units (10.00) to an integer amount (1000)."""
    if price is None or isinstance(price, bool):
        raise InvalidPrice("price is required")
    try:
        value = float(price)
    except (TypeError, ValueError):
        raise InvalidPrice("price must be a number")
    if not math.isfinite(value) or value <= 0:
        raise InvalidPrice("price must be a positive number")
    amount = int(round(value * 100))
    if amount < 1:
        raise InvalidPrice("price must be a positive number")
    return amount


class StripeGateway:
    def __init__(self, secret_key: str, api_base: str = "https://api.stripe.com/v1",
                 currency: str = "usd", timeout: float = 10):
        self.secret_key = secret_key
        self.api_base = api_base.rstrip("/")
        self.currency = currency
        self.timeout = timeout

    def create_payment_intent(self, amount: int) -> str:
        try:
            r = requests.post(
                f"{self.api_base}/payment_intents",
                headers={"Authorization": f"Bearer {self.secret_key}"},
                data={
                    "amount": amount,
                    "currency": self.currency,
                    "automatic_payment_methods[enabled]": "true",
                },
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise PaymentGatewayError(f"Payment gateway unreachable: {e}")

        if r.status_code != 200:
            try:
                message = r.json().get("error", {}).get("message")
            except ValueError:
                message = None
            raise PaymentGatewayError(message or f"Payment gateway returned {r.status_code}")

        client_secret = r.json().get("client_secret")
        if not client_secret:
            raise PaymentGatewayError("Payment gateway returned no client secret")
        logger.info("Created payment intent for %s %s", amount, self.currency)
        return client_secret


_gateway: Optional[StripeGateway] = None


def get_payment_gateway() -> StripeGateway:
    global _gateway
    if not config.STRIPE_SECRET:
        raise PaymentGatewayUnavailable("STRIPE_SECRET is not set")
    if _gateway is None:
        _gateway = StripeGateway(config.STRIPE_SECRET, config.STRIPE_API_BASE, config.PAYMENT_CURRENCY)
    return _gateway
