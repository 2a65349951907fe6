from django.db import models


PLANS_CACHE_KEY = 'subscription_plans_public'


class SubscriptionPlan(models.Model):
    slug = models.CharField(max_length=50, unique=True, help_text="Upper-case identifier, e.g. FREE, GOLD")
    name = models.CharField(max_length=100)
    description = models.TextField(null=True, blank=True)

    # Tier parameters copied onto the user when the plan is assigned
    free_credits = models.PositiveIntegerField(default=0)
    wallet_limit = models.PositiveIntegerField(default=5)
    redeem_credits = models.PositiveIntegerField(default=1)
    redeem_cycle_days = models.PositiveIntegerField(default=15)
    profile_limit = models.PositiveIntegerField(default=1)

    price_monthly = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    price_yearly = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    yearly_discount_pct = models.PositiveIntegerField(default=0)

    sort_order = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)
    is_default = models.BooleanField(default=False)
    color = models.CharField(max_length=32, null=True, blank=True)
    features = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', 'id']
        indexes = [
            models.Index(fields=['is_active', 'sort_order'], name='plan_active_sort_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.slug})"

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        # Ensure only one default plan
        if self.is_default:
            SubscriptionPlan.objects.filter(is_default=True).exclude(id=self.id).update(is_default=False)
