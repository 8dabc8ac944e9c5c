"""Payment API views.

Exposes the ``PaymentService`` via HTTP using DRF ViewSets.
Domain exceptions are translated into ``{"detail": ...}`` responses.
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderAccessDenied,
    OrderNotFound,
)
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.payments.dtos import ProcessPaymentDTO
from modules.payments.exceptions import (
    DuplicatePayment,
    PaymentAccessDenied,
    PaymentNotFound,
    UnsupportedPaymentMethod,
)
from modules.payments.gateways.registry import get_gateway_registry
from modules.payments.models import Payment
from modules.payments.repositories.django_repository import PaymentDjangoRepository
from modules.payments.serializers import CreatePaymentSerializer, PaymentSerializer
from modules.payments.services import PaymentService

ERROR_STATUS = {
    OrderNotFound: status.HTTP_404_NOT_FOUND,
    PaymentNotFound: status.HTTP_404_NOT_FOUND,
    OrderAccessDenied: status.HTTP_403_FORBIDDEN,
    PaymentAccessDenied: status.HTTP_403_FORBIDDEN,
    InvalidOrderStatus: status.HTTP_422_UNPROCESSABLE_ENTITY,
    DuplicatePayment: status.HTTP_422_UNPROCESSABLE_ENTITY,
    UnsupportedPaymentMethod: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def error_response(exc: Exception) -> Response:
    for exc_class, http_status in ERROR_STATUS.items():
        if isinstance(exc, exc_class):
            return Response({"detail": str(exc)}, status=http_status)
    raise exc


class PaymentViewSet(GenericViewSet):
    """ViewSet for Payment operations, scoped to the caller's orders."""

    queryset = Payment.objects.none()
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = PaymentService(
            order_repository=OrderDjangoRepository(),
            payment_repository=PaymentDjangoRepository(),
            registry=get_gateway_registry(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Pick the throttle scope for the current action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "payment_processing"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Payment.objects.none()
        return self._service.list_payments(user_id=self.request.user.id)

    def create(self, request: Request) -> Response:
        """POST /api/v1/payments/

        Returns 201 for both SUCCESSFUL and FAILED outcomes.
        """
        serializer = CreatePaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        dto = ProcessPaymentDTO(
            order_id=serializer.validated_data["order_id"],
            user_id=request.user.id,
            payment_method=serializer.validated_data["payment_method"],
            payment_data=serializer.payment_data(),
        )

        try:
            payment = self._service.process_payment(dto)
        except (
            OrderNotFound,
            OrderAccessDenied,
            InvalidOrderStatus,
            DuplicatePayment,
            UnsupportedPaymentMethod,
        ) as exc:
            return error_response(exc)

        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    def list(self, request: Request) -> Response:
        """GET /api/v1/payments/"""
        page = self.paginate_queryset(self.get_queryset())
        serializer = PaymentSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/payments/{pk}/"""
        try:
            payment = self._service.get_payment(pk, request.user.id)
        except (PaymentNotFound, PaymentAccessDenied) as exc:
            return error_response(exc)
        return Response(PaymentSerializer(payment).data)
