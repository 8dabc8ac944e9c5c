"""Payment gateways package."""

from modules.payments.gateways.base import GatewayTransportError, PaymentGateway
from modules.payments.gateways.credit_card import CreditCardGateway
from modules.payments.gateways.paypal import PayPalGateway
from modules.payments.gateways.registry import (
    GATEWAY_CLASSES,
    GatewayRegistry,
    build_registry,
    get_gateway_registry,
)

__all__ = [
    "GATEWAY_CLASSES",
    "CreditCardGateway",
    "GatewayRegistry",
    "GatewayTransportError",
    "PayPalGateway",
    "PaymentGateway",
    "build_registry",
    "get_gateway_registry",
]
