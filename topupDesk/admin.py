from django.contrib import admin

from .models import CreditPackage, PaymentSetting, TopUpRequest


# ---------- Catalog ----------
@admin.register(CreditPackage)
class CreditPackageAdmin(admin.ModelAdmin):
    list_display = ('slug', 'name', 'credits', 'bonus_credits', 'price', 'is_popular', 'is_active', 'sort_order')
    list_filter = ('is_active', 'is_popular')
    search_fields = ('slug', 'name')


@admin.register(PaymentSetting)
class PaymentSettingAdmin(admin.ModelAdmin):
    list_display = ('method', 'label', 'account_title', 'is_active', 'sort_order')
    list_filter = ('is_active',)
    search_fields = ('method', 'label')


# ---------- Requests ----------
@admin.register(TopUpRequest)
class TopUpRequestAdmin(admin.ModelAdmin):
    list_display = ('request_number', 'user', 'credits', 'bonus_credits', 'amount', 'payment_method', 'status', 'created_at')
    list_filter = ('status', 'payment_method')
    search_fields = ('request_number', 'user__email', 'user__name')
    # Approval must go through the API so the wallet and ledger move together
    readonly_fields = (
        'request_number', 'user', 'package', 'credits', 'bonus_credits', 'amount',
        'payment_method', 'status', 'processed_by', 'processed_at', 'created_at', 'updated_at',
    )

    def has_add_permission(self, request):
        return False
