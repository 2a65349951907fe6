from django.core.cache import cache
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver

from .models import PLANS_CACHE_KEY, SubscriptionPlan


@receiver(post_save, sender=SubscriptionPlan)
@receiver(post_delete, sender=SubscriptionPlan)
def invalidate_public_plans(sender, **kwargs):
    cache.delete(PLANS_CACHE_KEY)
