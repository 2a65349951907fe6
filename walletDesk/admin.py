from django.contrib import admin

from .models import FundingWallet, RedeemWallet, Transaction, WalletAdjustment


class ReadOnlyAdmin(admin.ModelAdmin):
    """Balances and ledger rows only move through the API services."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        # view permission still opens the detail page
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def save_model(self, request, obj, form, change):
        return

    def get_readonly_fields(self, request, obj=None):
        return [field.name for field in self.model._meta.fields]


# ---------- Wallets ----------
@admin.register(FundingWallet)
class FundingWalletAdmin(ReadOnlyAdmin):
    list_display = ('user', 'balance', 'total_purchased', 'total_spent', 'updated_at')
    search_fields = ('user__email', 'user__name')


@admin.register(RedeemWallet)
class RedeemWalletAdmin(ReadOnlyAdmin):
    list_display = ('user', 'balance', 'limit', 'next_redemption', 'updated_at')
    search_fields = ('user__email', 'user__name')


# ---------- Ledger ----------
@admin.register(Transaction)
class TransactionAdmin(ReadOnlyAdmin):
    list_display = ('id', 'user', 'type', 'wallet_type', 'amount', 'reference_type', 'created_at')
    list_filter = ('type', 'wallet_type')
    search_fields = ('user__email', 'description', 'reference_id')
    date_hierarchy = 'created_at'


@admin.register(WalletAdjustment)
class WalletAdjustmentAdmin(ReadOnlyAdmin):
    list_display = ('user', 'wallet_type', 'previous_balance', 'new_balance', 'created_by', 'created_at')
    list_filter = ('wallet_type',)
    search_fields = ('user__email', 'reason')
