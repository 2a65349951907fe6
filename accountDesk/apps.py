from django.apps import AppConfig


class AccountdeskConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'accountDesk'
