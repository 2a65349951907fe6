from django.apps import AppConfig


class TopupdeskConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'topupDesk'

    def ready(self):
        # Import signals so handlers register
        from . import signals  # noqa: F401
