from django.core.cache import cache
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .models import TOPUP_OPTIONS_CACHE_KEY, CreditPackage, PaymentSetting


@receiver(post_save, sender=CreditPackage)
@receiver(post_delete, sender=CreditPackage)
@receiver(post_save, sender=PaymentSetting)
@receiver(post_delete, sender=PaymentSetting)
def invalidate_topup_options(sender, **kwargs):
    cache.delete(TOPUP_OPTIONS_CACHE_KEY)
