from django.apps import AppConfig


class LearningConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.learning"
    label = "learning"

    def ready(self) -> None:
        from modules.learning.handlers import SUBSCRIPTIONS
        from shared.infrastructure.bus import event_bus

        for event_class, handler in SUBSCRIPTIONS:
            event_bus.subscribe(event_class, handler)
