from rest_framework import serializers

from .models import SubscriptionPlan


class SubscriptionPlanSerializer(serializers.ModelSerializer):
    slug = serializers.CharField(max_length=50)
    freeCredits = serializers.IntegerField(source='free_credits', min_value=0, required=False)
    walletLimit = serializers.IntegerField(source='wallet_limit', min_value=0, required=False)
    redeemCredits = serializers.IntegerField(source='redeem_credits', min_value=0, required=False)
    redeemCycleDays = serializers.IntegerField(source='redeem_cycle_days', min_value=1, required=False)
    profileLimit = serializers.IntegerField(source='profile_limit', min_value=0, required=False)
    priceMonthly = serializers.DecimalField(
        source='price_monthly', max_digits=10, decimal_places=2, min_value=0,
        coerce_to_string=False, required=False,
    )
    priceYearly = serializers.DecimalField(
        source='price_yearly', max_digits=10, decimal_places=2, min_value=0,
        coerce_to_string=False, required=False,
    )
    yearlyDiscountPct = serializers.IntegerField(source='yearly_discount_pct', min_value=0, max_value=100, required=False)
    sortOrder = serializers.IntegerField(source='sort_order', required=False)
    isActive = serializers.BooleanField(source='is_active', required=False)
    isDefault = serializers.BooleanField(source='is_default', required=False)
    features = serializers.ListField(child=serializers.CharField(), required=False)

    class Meta:
        model = SubscriptionPlan
        fields = [
            'id', 'slug', 'name', 'description',
            'freeCredits', 'walletLimit', 'redeemCredits', 'redeemCycleDays', 'profileLimit',
            'priceMonthly', 'priceYearly', 'yearlyDiscountPct',
            'sortOrder', 'isActive', 'isDefault', 'color', 'features',
        ]
        read_only_fields = ['id']

    def validate_slug(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError("Slug cannot be empty.")
        clashes = SubscriptionPlan.objects.filter(slug=value)
        if self.instance is not None:
            clashes = clashes.exclude(pk=self.instance.pk)
        if clashes.exists():
            raise serializers.ValidationError("A plan with this slug already exists")
        return value


class AdminSubscriptionPlanSerializer(SubscriptionPlanSerializer):
    userCount = serializers.SerializerMethodField()

    class Meta(SubscriptionPlanSerializer.Meta):
        fields = SubscriptionPlanSerializer.Meta.fields + ['userCount']

    def get_userCount(self, obj):
        count = getattr(obj, 'user_count', None)
        return count if count is not None else obj.users.count()
