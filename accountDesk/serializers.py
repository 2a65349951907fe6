from rest_framework import serializers

from walletDesk.serializers import FundingWalletSerializer, RedeemWalletSerializer
from .models import CustomUser


class RegularUserSerializer(serializers.ModelSerializer):
    joined = serializers.DateTimeField(source='created_at')
    lastActive = serializers.DateTimeField(source='last_login_at')

    class Meta:
        model = CustomUser
        fields = ['id', 'name', 'email', 'phone', 'subscription', 'status', 'joined', 'lastActive']
        read_only_fields = fields


class UserDetailSerializer(serializers.ModelSerializer):
    subscriptionPlan = serializers.SerializerMethodField()
    tier = serializers.SerializerMethodField()
    fundingWallet = serializers.SerializerMethodField()
    redeemWallet = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')
    lastLoginAt = serializers.DateTimeField(source='last_login_at')

    class Meta:
        model = CustomUser
        fields = [
            'id', 'name', 'email', 'phone', 'role', 'status',
            'subscription', 'subscriptionPlan', 'tier',
            'fundingWallet', 'redeemWallet',
            'createdAt', 'updatedAt', 'lastLoginAt',
        ]
        read_only_fields = fields

    def get_subscriptionPlan(self, obj):
        plan = obj.subscription_plan
        return {'id': plan.id, 'slug': plan.slug, 'name': plan.name} if plan else None

    def get_tier(self, obj):
        return {
            'freeCredits': obj.tier_free_credits,
            'walletLimit': obj.tier_wallet_limit,
            'redeemCredits': obj.tier_redeem_credits,
            'redeemCycleDays': obj.tier_redeem_cycle_days,
            'profileLimit': obj.tier_profile_limit,
            'priceMonthly': float(obj.tier_price_monthly),
            'priceYearly': float(obj.tier_price_yearly),
        }

    def get_fundingWallet(self, obj):
        wallet = getattr(obj, 'funding_wallet', None)
        return FundingWalletSerializer(wallet).data if wallet else None

    def get_redeemWallet(self, obj):
        wallet = getattr(obj, 'redeem_wallet', None)
        return RedeemWalletSerializer(wallet).data if wallet else None
