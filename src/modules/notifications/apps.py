from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.notifications"
    label = "notifications"

    def ready(self) -> None:
        from modules.notifications.handlers import transaction_status_changed_handler
        from modules.transactions.events import TransactionStatusChanged
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(TransactionStatusChanged, transaction_status_changed_handler)
