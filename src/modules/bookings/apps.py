from django.apps import AppConfig


class BookingsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.bookings"
    label = "bookings"

    def ready(self) -> None:
        from modules.bookings.handlers import SUBSCRIPTIONS
        from shared.infrastructure.bus import event_bus

        for event_class, handler in SUBSCRIPTIONS:
            event_bus.subscribe(event_class, handler)
