"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as DTOValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.pagination import StandardResultsSetPagination
from modules.orders.dtos import CreateOrderDTO, OrderItemDTO, ReplaceOrderItemsDTO
from modules.orders.exceptions import (
    InvalidOrderStatus,
    OrderAccessDenied,
    OrderHasPayment,
    OrderNotFound,
)
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CreateOrderSerializer,
    OrderListSerializer,
    OrderSerializer,
    ReplaceOrderItemsSerializer,
)
from modules.orders.services import OrderService
from modules.payments.exceptions import PaymentNotFound
from modules.payments.gateways.registry import get_gateway_registry
from modules.payments.repositories.django_repository import PaymentDjangoRepository
from modules.payments.serializers import PaymentSerializer
from modules.payments.services import PaymentService

ERROR_STATUS = {
    OrderNotFound: status.HTTP_404_NOT_FOUND,
    PaymentNotFound: status.HTTP_404_NOT_FOUND,
    OrderAccessDenied: status.HTTP_403_FORBIDDEN,
    OrderHasPayment: status.HTTP_409_CONFLICT,
    InvalidOrderStatus: status.HTTP_422_UNPROCESSABLE_ENTITY,
}


def error_response(exc: Exception) -> Response:
    """Translate a domain exception into a ``{"detail": ...}`` response."""
    for exc_class, http_status in ERROR_STATUS.items():
        if isinstance(exc, exc_class):
            return Response({"detail": str(exc)}, status=http_status)
    raise exc


def items_from(validated_data: dict) -> list[OrderItemDTO]:
    return [
        OrderItemDTO(
            product_name=item["product_name"],
            quantity=item["quantity"],
            unit_price=item["unit_price"],
        )
        for item in validated_data["items"]
    ]


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Does **not** extend ``ModelViewSet``: all ORM access goes through
    the service/repository layer.  Every order is scoped to its owner.
    """

    queryset = Order.objects.none()
    filterset_class = OrderFilter
    ordering_fields = ["created_at", "total_amount", "status"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, OrderingFilter]
    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        order_repository = OrderDjangoRepository()
        self._service = OrderService(order_repository=order_repository)
        self._payment_service = PaymentService(
            order_repository=order_repository,
            payment_repository=PaymentDjangoRepository(),
            registry=get_gateway_registry(),
        )

    def get_throttles(self) -> list[BaseThrottle]:
        """Pick the throttle scope for the current action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve", "payment"}:
            throttle_scope = "order_listing"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    def get_queryset(self):
        if getattr(self, "swagger_fake_view", False):
            return Order.objects.none()
        return self._service.list_orders(user_id=self.request.user.id)

    # ------------------------------------------------------------------
    # Create / Replace items
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateOrderDTO(
                owner_id=request.user.id,
                items=items_from(serializer.validated_data),
            )
        except DTOValidationError as exc:
            return Response(
                {"items": [err["msg"] for err in exc.errors()]},
                status=status.HTTP_400_BAD_REQUEST,
            )

        order = self._service.create_order(dto)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT /api/v1/orders/{pk}/

        Replaces the whole item set; partial item updates do not exist.
        """
        serializer = ReplaceOrderItemsSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = ReplaceOrderItemsDTO(items=items_from(serializer.validated_data))
        except DTOValidationError as exc:
            return Response(
                {"items": [err["msg"] for err in exc.errors()]},
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            order = self._service.replace_items(pk, request.user.id, dto)
        except (OrderNotFound, OrderAccessDenied, InvalidOrderStatus) as exc:
            return error_response(exc)

        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # List / Retrieve / Delete
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering (status, date range, total range) is handled by
        ``OrderFilter``; ordering by ``OrderingFilter``.  Paginated with
        ``page`` / ``per_page``.
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        try:
            order = self._service.get_order(pk, request.user.id)
        except (OrderNotFound, OrderAccessDenied) as exc:
            return error_response(exc)
        return Response(OrderSerializer(order).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/"""
        try:
            self._service.delete_order(pk, request.user.id)
        except (OrderNotFound, OrderAccessDenied, OrderHasPayment) as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    @action(detail=True, methods=["patch", "post"])
    def confirm(self, request: Request, pk: str | None = None) -> Response:
        """PATCH|POST /api/v1/orders/{pk}/confirm/"""
        try:
            order = self._service.confirm_order(pk, request.user.id)
        except (OrderNotFound, OrderAccessDenied, InvalidOrderStatus) as exc:
            return error_response(exc)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["patch", "post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """PATCH|POST /api/v1/orders/{pk}/cancel/"""
        notes = request.data.get("notes", "") if hasattr(request.data, "get") else ""
        try:
            order = self._service.cancel_order(pk, request.user.id, notes=notes)
        except (OrderNotFound, OrderAccessDenied, InvalidOrderStatus) as exc:
            return error_response(exc)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Payment of an order
    # ------------------------------------------------------------------

    @action(detail=True, methods=["get"])
    def payment(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/payment/"""
        try:
            payment = self._payment_service.get_payment_for_order(pk, request.user.id)
        except (OrderNotFound, OrderAccessDenied, PaymentNotFound) as exc:
            return error_response(exc)
        return Response(PaymentSerializer(payment).data)
