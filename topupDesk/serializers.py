from rest_framework import serializers

from accountDesk.models import CustomUser
from .models import CreditPackage, PaymentSetting, TopUpRequest


# -------------------------
# Catalog
# -------------------------
class CreditPackageSerializer(serializers.ModelSerializer):
    bonusCredits = serializers.IntegerField(source='bonus_credits', min_value=0, required=False)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, coerce_to_string=False)
    savingsPercent = serializers.IntegerField(
        source='savings_percent', min_value=0, max_value=100, required=False, allow_null=True,
    )
    isPopular = serializers.BooleanField(source='is_popular', required=False)
    isActive = serializers.BooleanField(source='is_active', required=False)
    sortOrder = serializers.IntegerField(source='sort_order', required=False)

    class Meta:
        model = CreditPackage
        fields = [
            'id', 'slug', 'name', 'credits', 'bonusCredits', 'price',
            'savingsPercent', 'isPopular', 'isActive', 'sortOrder',
        ]
        read_only_fields = ['id']
        extra_kwargs = {
            'credits': {'min_value': 1},
            'slug': {'validators': []},
        }

    def validate_slug(self, value):
        value = value.strip().upper()
        clashes = CreditPackage.objects.filter(slug=value)
        if self.instance is not None:
            clashes = clashes.exclude(pk=self.instance.pk)
        if clashes.exists():
            raise serializers.ValidationError("A package with this slug already exists")
        return value


class PaymentSettingSerializer(serializers.ModelSerializer):
    accountTitle = serializers.CharField(source='account_title', required=False, allow_null=True, allow_blank=True)
    accountNumber = serializers.CharField(source='account_number', required=False, allow_null=True, allow_blank=True)
    bankName = serializers.CharField(source='bank_name', required=False, allow_null=True, allow_blank=True)
    branchCode = serializers.CharField(source='branch_code', required=False, allow_null=True, allow_blank=True)
    iban = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    mobileNumber = serializers.CharField(source='mobile_number', required=False, allow_null=True, allow_blank=True)
    isActive = serializers.BooleanField(source='is_active', required=False)
    sortOrder = serializers.IntegerField(source='sort_order', required=False)

    class Meta:
        model = PaymentSetting
        fields = [
            'id', 'method', 'label', 'instructions', 'accountTitle', 'accountNumber',
            'bankName', 'branchCode', 'iban', 'mobileNumber', 'isActive', 'sortOrder',
        ]
        read_only_fields = ['id']
        # uniqueness is checked on the normalized value below
        extra_kwargs = {
            'method': {'validators': []},
        }

    def validate_method(self, value):
        value = value.strip().upper()
        if not value:
            raise serializers.ValidationError("Method cannot be empty.")
        clashes = PaymentSetting.objects.filter(method=value)
        if self.instance is not None:
            clashes = clashes.exclude(pk=self.instance.pk)
        if clashes.exists():
            raise serializers.ValidationError("A setting for this payment method already exists")
        return value


# -------------------------
# Requests
# -------------------------
class PackageBriefSerializer(serializers.ModelSerializer):
    bonusCredits = serializers.IntegerField(source='bonus_credits')
    price = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False)

    class Meta:
        model = CreditPackage
        fields = ['id', 'name', 'credits', 'bonusCredits', 'price']


class PersonBriefSerializer(serializers.ModelSerializer):
    class Meta:
        model = CustomUser
        fields = ['id', 'name', 'email']


class TopUpRequestSerializer(serializers.ModelSerializer):
    requestNumber = serializers.CharField(source='request_number')
    package = PackageBriefSerializer(read_only=True)
    bonusCredits = serializers.IntegerField(source='bonus_credits')
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False)
    paymentMethod = serializers.CharField(source='payment_method')
    processedAt = serializers.DateTimeField(source='processed_at')
    adminNotes = serializers.CharField(source='admin_notes')
    rejectionReason = serializers.CharField(source='rejection_reason')
    createdAt = serializers.DateTimeField(source='created_at')
    updatedAt = serializers.DateTimeField(source='updated_at')

    class Meta:
        model = TopUpRequest
        fields = [
            'id', 'requestNumber', 'package', 'credits', 'bonusCredits', 'amount',
            'paymentMethod', 'status', 'processedAt', 'adminNotes', 'rejectionReason',
            'createdAt', 'updatedAt',
        ]
        read_only_fields = fields


class AdminTopUpRequestSerializer(TopUpRequestSerializer):
    user = PersonBriefSerializer(read_only=True)
    processor = PersonBriefSerializer(source='processed_by', read_only=True)

    class Meta(TopUpRequestSerializer.Meta):
        fields = TopUpRequestSerializer.Meta.fields + ['user', 'processor']
        read_only_fields = fields


def payment_details(setting):
    return {
        'method': setting.method,
        'label': setting.label,
        'accountTitle': setting.account_title,
        'accountNumber': setting.account_number,
        'bankName': setting.bank_name,
        'iban': setting.iban,
        'mobileNumber': setting.mobile_number,
    }
