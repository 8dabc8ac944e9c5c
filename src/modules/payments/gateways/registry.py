"""Payment method -> gateway registry.

The registry is the only place that knows which gateway serves which
payment method; ``PaymentService`` never switches on the method name.
It is built once per process from the ``PAYMENT_GATEWAYS`` and
``PAYMENT_GATEWAY_CONFIG`` settings.  A method that names an unknown
gateway is a fatal misconfiguration (``ImproperlyConfigured``).
"""

from __future__ import annotations

import random
from functools import lru_cache
from typing import Any, Dict, Iterator, Mapping, Optional, Type

import structlog
from django.conf import settings
from django.core.exceptions import ImproperlyConfigured

from modules.payments.exceptions import UnsupportedPaymentMethod
from modules.payments.gateways.base import PaymentGateway
from modules.payments.gateways.credit_card import CreditCardGateway
from modules.payments.gateways.paypal import PayPalGateway

logger = structlog.get_logger(__name__)

# Gateway name (as used in settings) -> implementation.
GATEWAY_CLASSES: Dict[str, Type[PaymentGateway]] = {
    CreditCardGateway.name: CreditCardGateway,
    PayPalGateway.name: PayPalGateway,
}


class GatewayRegistry:
    """Maps payment-method identifiers to gateway instances."""

    def __init__(self) -> None:
        self._gateways: Dict[str, PaymentGateway] = {}

    def register(self, method: str, gateway: PaymentGateway) -> None:
        self._gateways[method] = gateway

    def resolve(self, method: str) -> PaymentGateway:
        """Return the gateway for *method*.

        Raises:
            UnsupportedPaymentMethod: no gateway is registered for it.
        """
        try:
            return self._gateways[method]
        except KeyError:
            raise UnsupportedPaymentMethod(method) from None

    @property
    def methods(self) -> list[str]:
        return sorted(self._gateways)

    def __contains__(self, method: object) -> bool:
        return method in self._gateways

    def __iter__(self) -> Iterator[str]:
        return iter(self.methods)

    def __len__(self) -> int:
        return len(self._gateways)


def build_registry(
    method_map: Mapping[str, str],
    gateway_config: Optional[Mapping[str, Mapping[str, Any]]] = None,
    rng: Optional[random.Random] = None,
) -> GatewayRegistry:
    """Build a registry from ``{method: gateway_name}`` and per-gateway config.

    Methods mapped to the same gateway name share one gateway instance.
    """
    gateway_config = gateway_config or {}
    instances: Dict[str, PaymentGateway] = {}
    registry = GatewayRegistry()

    for method, gateway_name in method_map.items():
        gateway_class = GATEWAY_CLASSES.get(gateway_name)
        if gateway_class is None:
            raise ImproperlyConfigured(
                f"PAYMENT_GATEWAYS maps {method!r} to unknown gateway "
                f"{gateway_name!r}. Known gateways: {', '.join(sorted(GATEWAY_CLASSES))}."
            )
        if gateway_name not in instances:
            instances[gateway_name] = gateway_class(
                config=gateway_config.get(gateway_name, {}), rng=rng
            )
        registry.register(method, instances[gateway_name])

    logger.info("payment.registry_built", methods=registry.methods)
    return registry


@lru_cache(maxsize=1)
def get_gateway_registry() -> GatewayRegistry:
    """Process-wide registry built from Django settings."""
    return build_registry(
        getattr(settings, "PAYMENT_GATEWAYS", {}),
        getattr(settings, "PAYMENT_GATEWAY_CONFIG", {}),
    )
