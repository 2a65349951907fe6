from django.conf import settings
from django.db import models
from django.db.models import Q


TOPUP_OPTIONS_CACHE_KEY = 'topup_options'


class CreditPackage(models.Model):
    slug = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=100)
    credits = models.PositiveIntegerField()
    bonus_credits = models.PositiveIntegerField(default=0)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    savings_percent = models.PositiveIntegerField(null=True, blank=True)
    is_popular = models.BooleanField(default=False)
    is_active = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', 'id']
        constraints = [
            models.CheckConstraint(condition=Q(price__gte=0), name='credit_package_price_non_negative'),
        ]

    def __str__(self):
        return f"{self.name} ({self.credits} credits)"

    @property
    def total_credits(self):
        return self.credits + self.bonus_credits

    def save(self, *args, **kwargs):
        super().save(*args, **kwargs)
        # At most one package is highlighted
        if self.is_popular:
            CreditPackage.objects.filter(is_popular=True).exclude(id=self.id).update(is_popular=False)


class PaymentSetting(models.Model):
    method = models.CharField(max_length=32, unique=True, help_text="Upper-case method code, e.g. BANK_TRANSFER")
    label = models.CharField(max_length=100)
    instructions = models.TextField()
    account_title = models.CharField(max_length=150, null=True, blank=True)
    account_number = models.CharField(max_length=64, null=True, blank=True)
    bank_name = models.CharField(max_length=150, null=True, blank=True)
    branch_code = models.CharField(max_length=32, null=True, blank=True)
    iban = models.CharField(max_length=64, null=True, blank=True)
    mobile_number = models.CharField(max_length=20, null=True, blank=True)
    is_active = models.BooleanField(default=True)
    sort_order = models.IntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', 'id']

    def __str__(self):
        return f"{self.label} ({self.method})"

    def save(self, *args, **kwargs):
        self.method = (self.method or '').strip().upper()
        super().save(*args, **kwargs)


class TopUpRequest(models.Model):
    PENDING = 'PENDING'
    COMPLETED = 'COMPLETED'
    REJECTED = 'REJECTED'
    CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (PENDING, 'Pending'),
        (COMPLETED, 'Completed'),
        (REJECTED, 'Rejected'),
        (CANCELLED, 'Cancelled'),
    ]

    # TXN-YYYY-NNNNN, sequence restarts every calendar year
    request_number = models.CharField(max_length=32, unique=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='topup_requests')
    package = models.ForeignKey(CreditPackage, on_delete=models.SET_NULL, null=True, blank=True, related_name='requests')

    # Snapshot of the package at request time
    credits = models.PositiveIntegerField()
    bonus_credits = models.PositiveIntegerField(default=0)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    payment_method = models.CharField(max_length=32)

    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=PENDING, db_index=True)
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='processed_topups',
    )
    processed_at = models.DateTimeField(null=True, blank=True)
    admin_notes = models.TextField(null=True, blank=True)
    rejection_reason = models.TextField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'status'], name='topup_user_status_idx'),
        ]

    def __str__(self):
        return f"{self.request_number} - {self.user} ({self.status})"

    @property
    def total_credits(self):
        return self.credits + self.bonus_credits
