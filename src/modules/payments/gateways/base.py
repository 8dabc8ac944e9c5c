"""Payment gateway contract.

A gateway turns ``(order, payment_data)`` into a ``PaymentResult``.  The
public entry point is ``process()``, which wraps the subclass hook
``charge()`` with a per-call timeout, bounded retries on transport errors
and conversion of unexpected faults into FAILED results.  ``process()``
never raises for declines or faults.
"""

from __future__ import annotations

import random
import secrets
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional

import structlog
from django.core.exceptions import ImproperlyConfigured

from modules.payments.constants import (
    GATEWAY_FAULT_MESSAGE,
    GATEWAY_TIMEOUT_MESSAGE,
    GATEWAY_UNAVAILABLE_MESSAGE,
)
from modules.payments.dtos import PaymentResult

if TYPE_CHECKING:
    from modules.orders.models import Order

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class GatewayTransportError(Exception):
    """The gateway could not be reached; the call may be retried."""


class PaymentGateway(ABC):
    """Base class for payment gateways.

    Config keys understood by every gateway: ``timeout`` (seconds),
    ``latency`` (simulated processing delay, seconds) and ``max_retries``
    (extra attempts after a transport error).  Credentials and endpoint
    are kept in ``config`` for the concrete gateway.
    """

    name: str = ""
    transaction_prefix: str = ""
    default_latency: float = 0.0

    def __init__(
        self,
        config: Optional[Mapping[str, Any]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config: Dict[str, Any] = dict(config or {})
        timeout = self.config.get("timeout")
        self.timeout = DEFAULT_TIMEOUT_SECONDS if timeout is None else float(timeout)
        if self.timeout <= 0:
            raise ImproperlyConfigured(
                f"{self.__class__.__name__} timeout must be positive, got {timeout!r}."
            )
        self.max_retries = int(self.config.get("max_retries") or 0)
        latency = self.config.get("latency")
        self.latency = self.default_latency if latency is None else float(latency)
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def process(self, order: Order, payment_data: Mapping[str, Any]) -> PaymentResult:
        """Charge *order* and return the outcome; never raises."""
        log = logger.bind(gateway=self.name, order_id=str(order.id))
        attempts = self.max_retries + 1

        for attempt in range(1, attempts + 1):
            try:
                result = self._charge_with_timeout(order, payment_data)
            except FutureTimeoutError:
                log.warning("gateway.timeout", timeout=self.timeout, attempt=attempt)
                return PaymentResult.failed(GATEWAY_TIMEOUT_MESSAGE)
            except GatewayTransportError as exc:
                log.warning(
                    "gateway.transport_error",
                    attempt=attempt,
                    max_attempts=attempts,
                    error=str(exc),
                )
                continue
            except Exception:
                log.exception("gateway.unexpected_error", attempt=attempt)
                return PaymentResult.failed(GATEWAY_FAULT_MESSAGE)

            log.info("gateway.charged", status=result.status, attempt=attempt)
            return result

        log.error("gateway.unavailable", attempts=attempts)
        return PaymentResult.failed(GATEWAY_UNAVAILABLE_MESSAGE)

    # ------------------------------------------------------------------
    # Subclass hook
    # ------------------------------------------------------------------

    @abstractmethod
    def charge(self, order: Order, payment_data: Mapping[str, Any]) -> PaymentResult:
        """Perform the charge.

        May raise ``GatewayTransportError`` for retryable transport
        failures; declines are returned as FAILED results.
        """

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _charge_with_timeout(
        self, order: Order, payment_data: Mapping[str, Any]
    ) -> PaymentResult:
        # A timed-out call keeps running in its worker thread; its result
        # is discarded.
        executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix=f"gateway-{self.name}"
        )
        try:
            future = executor.submit(self.charge, order, payment_data)
            return future.result(timeout=self.timeout)
        finally:
            executor.shutdown(wait=False)

    def simulate_latency(self) -> None:
        if self.latency > 0:
            time.sleep(self.latency)

    def generate_transaction_id(self) -> str:
        """``<PREFIX>_<RANDOM TOKEN>_<unix timestamp>``."""
        token = secrets.token_hex(8).upper()
        return f"{self.transaction_prefix}_{token}_{int(time.time())}"

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
