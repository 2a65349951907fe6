from django.apps import AppConfig


class SubscriptiondeskConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'subscriptionDesk'

    def ready(self):
        # Import signals so handlers register
        from . import signals  # noqa: F401
