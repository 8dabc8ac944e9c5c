"""Payment DTOs.

- ``PaymentResult``: the outcome every gateway returns.  Its invariants
  (transaction id iff successful, error message iff failed) are checked
  on construction.
- ``ProcessPaymentDTO``: input of ``PaymentService.process_payment``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from modules.payments.constants import PaymentStatus


class PaymentResult(BaseModel):
    """Immutable gateway outcome."""

    model_config = ConfigDict(frozen=True)

    status: PaymentStatus
    transaction_id: Optional[str] = None
    error_message: Optional[str] = None

    @model_validator(mode="after")
    def fields_match_status(self) -> PaymentResult:
        if self.status == PaymentStatus.SUCCESSFUL:
            if not self.transaction_id:
                raise ValueError("A successful result requires a transaction_id.")
            if self.error_message is not None:
                raise ValueError("A successful result cannot carry an error_message.")
        elif self.status == PaymentStatus.FAILED:
            if not self.error_message:
                raise ValueError("A failed result requires an error_message.")
            if self.transaction_id is not None:
                raise ValueError("A failed result cannot carry a transaction_id.")
        elif self.transaction_id is not None or self.error_message is not None:
            raise ValueError(
                "A pending result carries neither transaction_id nor error_message."
            )
        return self

    @classmethod
    def successful(cls, transaction_id: str) -> PaymentResult:
        return cls(status=PaymentStatus.SUCCESSFUL, transaction_id=transaction_id)

    @classmethod
    def failed(cls, error_message: str) -> PaymentResult:
        return cls(status=PaymentStatus.FAILED, error_message=error_message)

    @property
    def is_successful(self) -> bool:
        return self.status == PaymentStatus.SUCCESSFUL

    @property
    def is_failed(self) -> bool:
        return self.status == PaymentStatus.FAILED

    @property
    def is_pending(self) -> bool:
        return self.status == PaymentStatus.PENDING


class ProcessPaymentDTO(BaseModel):
    """Immutable input for a payment attempt.

    ``payment_data`` carries the method-specific fields (``card_number``,
    ``paypal_email``) and is handed to the gateway untouched.
    """

    model_config = ConfigDict(frozen=True)

    order_id: UUID
    user_id: int
    payment_method: str
    payment_data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("payment_method")
    @classmethod
    def payment_method_must_be_present(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Payment method is required.")
        return v
