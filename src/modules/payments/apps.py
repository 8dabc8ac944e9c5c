from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.payments"
    label = "payments"

    def ready(self) -> None:
        from modules.payments.events import PaymentProcessed
        from modules.payments.gateways.registry import get_gateway_registry
        from modules.payments.handlers import payment_processed_handler
        from shared.infrastructure.bus import event_bus

        # Misconfigured gateways must fail at startup, not on first payment.
        get_gateway_registry()
        event_bus.subscribe(PaymentProcessed, payment_processed_handler)
