from django.contrib import admin
from django.contrib.auth.admin import UserAdmin

from .forms import CustomUserChangeForm, CustomUserCreationForm
from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    model = CustomUser
    add_form = CustomUserCreationForm
    form = CustomUserChangeForm

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Personal info', {'fields': ('name', 'phone')}),
        ('Access', {'fields': ('role', 'status', 'is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Subscription', {
            'fields': (
                'subscription', 'subscription_plan',
                'tier_free_credits', 'tier_wallet_limit', 'tier_redeem_credits',
                'tier_redeem_cycle_days', 'tier_profile_limit',
                'tier_price_monthly', 'tier_price_yearly',
            )
        }),
        ('Important dates', {'fields': ('last_login', 'last_login_at', 'created_at', 'updated_at')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'name', 'phone', 'role', 'usable_password', 'password1', 'password2'),
        }),
    )

    list_display = ('email', 'name', 'phone', 'role', 'status', 'subscription', 'is_staff', 'created_at')
    list_filter = ('role', 'status', 'subscription', 'is_staff')
    search_fields = ('email', 'name', 'phone')
    ordering = ('-created_at',)

    # Tier values only change through plan assignment
    readonly_fields = (
        'subscription', 'subscription_plan',
        'tier_free_credits', 'tier_wallet_limit', 'tier_redeem_credits',
        'tier_redeem_cycle_days', 'tier_profile_limit',
        'tier_price_monthly', 'tier_price_yearly',
        'last_login_at', 'created_at', 'updated_at',
    )
