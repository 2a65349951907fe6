from rest_framework import serializers

from accountDesk.models import CustomUser
from .models import FundingWallet, RedeemWallet, Transaction


class TransactionUserSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['id', 'name', 'email']


class TransactionSerializer(serializers.ModelSerializer):
    walletType = serializers.CharField(source='wallet_type')
    paymentMethod = serializers.CharField(source='payment_method', allow_null=True)
    referenceType = serializers.CharField(source='reference_type', allow_null=True)
    referenceId = serializers.CharField(source='reference_id', allow_null=True)
    createdAt = serializers.DateTimeField(source='created_at')

    class Meta:
        model = Transaction
        fields = [
            'id', 'type', 'walletType', 'amount', 'description',
            'paymentMethod', 'referenceType', 'referenceId', 'createdAt',
        ]
        read_only_fields = fields


class AdminTransactionSerializer(TransactionSerializer):
    user = TransactionUserSerializer(read_only=True)
    createdBy = TransactionUserSerializer(source='created_by', read_only=True)

    class Meta(TransactionSerializer.Meta):
        fields = TransactionSerializer.Meta.fields + ['user', 'createdBy']
        read_only_fields = fields


class FundingWalletSerializer(serializers.ModelSerializer):
    totalPurchased = serializers.IntegerField(source='total_purchased')
    totalSpent = serializers.IntegerField(source='total_spent')

    class Meta:
        model = FundingWallet
        fields = ['id', 'balance', 'totalPurchased', 'totalSpent']
        read_only_fields = fields


class RedeemWalletSerializer(serializers.ModelSerializer):
    redeemCredits = serializers.IntegerField(source='redeem_credits')
    redeemCycleDays = serializers.IntegerField(source='redeem_cycle_days')
    lastRedeemed = serializers.DateTimeField(source='last_redeemed')
    nextRedemption = serializers.DateTimeField(source='next_redemption')
    totalEarned = serializers.IntegerField(source='total_earned')
    totalSpent = serializers.IntegerField(source='total_spent')

    class Meta:
        model = RedeemWallet
        fields = [
            'id', 'balance', 'limit', 'redeemCredits', 'redeemCycleDays',
            'lastRedeemed', 'nextRedemption', 'totalEarned', 'totalSpent',
        ]
        read_only_fields = fields
