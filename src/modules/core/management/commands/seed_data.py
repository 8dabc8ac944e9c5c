from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand

from modules.orders.dtos import CreateOrderDTO, OrderItemDTO
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.payments.dtos import ProcessPaymentDTO
from modules.payments.gateways.registry import get_gateway_registry
from modules.payments.repositories.django_repository import PaymentDjangoRepository
from modules.payments.services import PaymentService

SAMPLE_ITEMS = [
    ("Mechanical keyboard", 1, Decimal("89.90")),
    ("USB-C cable", 3, Decimal("9.99")),
    ("27in monitor", 1, Decimal("249.00")),
    ("Laptop stand", 2, Decimal("34.50")),
    ("Webcam", 1, Decimal("59.00")),
]


class Command(BaseCommand):
    help = "Seed the database with a demo user and orders in every lifecycle state."

    def add_arguments(self, parser) -> None:
        parser.add_argument("--username", default="demo")
        parser.add_argument("--password", default="demo12345")

    def handle(self, *args, **options):
        self.stdout.write("Seeding development data...")

        user = self._seed_user(options["username"], options["password"])
        if Order.objects.alive().filter(owner=user).exists():
            self.stdout.write(self.style.WARNING("Demo orders already exist; skipping."))
            return

        order_repository = OrderDjangoRepository()
        self.orders = OrderService(order_repository=order_repository)
        self.payments = PaymentService(
            order_repository=order_repository,
            payment_repository=PaymentDjangoRepository(),
            registry=get_gateway_registry(),
        )

        pending = self._create(user.id, SAMPLE_ITEMS[:2])
        confirmed = self._create(user.id, SAMPLE_ITEMS[2:3])
        self.orders.confirm_order(confirmed.id, user.id)
        cancelled = self._create(user.id, SAMPLE_ITEMS[3:4])
        self.orders.cancel_order(cancelled.id, user.id, notes="Cancelled by seed data")

        paid = self._create(user.id, SAMPLE_ITEMS[1:4])
        self.orders.confirm_order(paid.id, user.id)
        self._pay(paid, user.id, "4111111111110000")

        declined = self._create(user.id, SAMPLE_ITEMS[4:])
        self.orders.confirm_order(declined.id, user.id)
        self._pay(declined, user.id, "4000000000009999")

        self.stdout.write(
            self.style.SUCCESS(
                f"Seed completed: user={user.get_username()}, "
                f"orders={Order.objects.alive().filter(owner=user).count()} "
                f"(pending={pending.order_number})"
            )
        )

    def _seed_user(self, username: str, password: str):
        User = get_user_model()
        user, created = User.objects.get_or_create(username=username)
        if created:
            user.set_password(password)
            user.save()
            self.stdout.write(f"Created user {username!r}.")
        return user

    def _create(self, user_id: int, items) -> Order:
        return self.orders.create_order(
            CreateOrderDTO(
                owner_id=user_id,
                items=[
                    OrderItemDTO(product_name=name, quantity=qty, unit_price=price)
                    for name, qty, price in items
                ],
            )
        )

    def _pay(self, order: Order, user_id: int, card_number: str) -> None:
        payment = self.payments.process_payment(
            ProcessPaymentDTO(
                order_id=order.id,
                user_id=user_id,
                payment_method="credit_card",
                payment_data={"card_number": card_number},
            )
        )
        self.stdout.write(f"Order {order.order_number}: payment {payment.status}")
