from django.contrib import admin

from .models import SubscriptionPlan


@admin.register(SubscriptionPlan)
class SubscriptionPlanAdmin(admin.ModelAdmin):
    list_display = (
        'slug', 'name', 'free_credits', 'wallet_limit', 'redeem_cycle_days',
        'price_monthly', 'is_active', 'is_default', 'sort_order',
    )
    list_filter = ('is_active', 'is_default')
    search_fields = ('slug', 'name')
    ordering = ('sort_order',)
