from django.apps import AppConfig


class CartConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.cart"
    label = "cart"

    def ready(self) -> None:
        from modules.cart.handlers import SUBSCRIPTIONS
        from shared.infrastructure.bus import event_bus

        for event_class, handler in SUBSCRIPTIONS:
            event_bus.subscribe(event_class, handler)
