from django.apps import AppConfig


class WalletdeskConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'walletDesk'
