from django.conf import settings
from django.db import models
from django.db.models import Q


class FundingWallet(models.Model):
    """Purchased credits. One per user, created lazily by the first writer."""
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='funding_wallet')
    balance = models.PositiveIntegerField(default=0)
    total_purchased = models.PositiveIntegerField(default=0)
    total_spent = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=Q(balance__gte=0), name='funding_balance_non_negative'),
        ]

    def __str__(self):
        return f"{self.user} funding: {self.balance}"


class RedeemWallet(models.Model):
    """Free/earned credits granted by the user's tier."""
    user = models.OneToOneField(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='redeem_wallet')
    balance = models.PositiveIntegerField(default=0)
    # Stored and shown, not enforced on writes
    limit = models.PositiveIntegerField(default=50)
    redeem_credits = models.PositiveIntegerField(default=1)
    redeem_cycle_days = models.PositiveIntegerField(default=15)

    last_redeemed = models.DateTimeField(null=True, blank=True)
    next_redemption = models.DateTimeField(null=True, blank=True)
    last_reset_at = models.DateTimeField(null=True, blank=True)

    total_earned = models.PositiveIntegerField(default=0)
    total_spent = models.PositiveIntegerField(default=0)
    credits_wasted = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.CheckConstraint(condition=Q(balance__gte=0), name='redeem_balance_non_negative'),
        ]

    def __str__(self):
        return f"{self.user} redeem: {self.balance}/{self.limit}"


class Transaction(models.Model):
    CREDIT = 'CREDIT'
    DEBIT = 'DEBIT'
    TOP_UP = 'TOP_UP'
    PURCHASE = 'PURCHASE'
    REDEMPTION = 'REDEMPTION'
    REFUND = 'REFUND'
    BONUS = 'BONUS'
    TYPE_CHOICES = [
        (CREDIT, 'Credit'),
        (DEBIT, 'Debit'),
        (TOP_UP, 'Top Up'),
        (PURCHASE, 'Purchase'),
        (REDEMPTION, 'Redemption'),
        (REFUND, 'Refund'),
        (BONUS, 'Bonus'),
    ]
    CREDIT_TYPES = (CREDIT, TOP_UP, BONUS, REFUND)
    DEBIT_TYPES = (DEBIT, PURCHASE)

    FUNDING = 'FUNDING'
    REDEEM = 'REDEEM'
    WALLET_CHOICES = [
        (FUNDING, 'Funding'),
        (REDEEM, 'Redeem'),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='transactions')
    type = models.CharField(max_length=16, choices=TYPE_CHOICES)
    wallet_type = models.CharField(max_length=8, choices=WALLET_CHOICES)
    # Always a magnitude; direction comes from ``type``
    amount = models.PositiveIntegerField()
    DESCRIPTION_MAX_LENGTH = 500
    description = models.CharField(max_length=DESCRIPTION_MAX_LENGTH, blank=True, default='')
    payment_method = models.CharField(max_length=32, null=True, blank=True)
    reference_type = models.CharField(max_length=64, null=True, blank=True)
    reference_id = models.CharField(max_length=64, null=True, blank=True)
    # Funding balance right after a credit grant, so replays can report it
    balance_after = models.PositiveIntegerField(null=True, blank=True)

    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recorded_transactions',
    )
    idempotency_key = models.CharField(max_length=64, null=True, blank=True, unique=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['user', 'created_at'], name='txn_user_created_idx'),
            models.Index(fields=['type'], name='txn_type_idx'),
            models.Index(fields=['wallet_type'], name='txn_wallet_type_idx'),
        ]

    def __str__(self):
        return f"{self.user}: {self.type} {self.amount} ({self.wallet_type})"

    def save(self, *args, **kwargs):
        # Ledger rows are append-only
        if not self._state.adding:
            raise ValueError("Transactions are immutable once recorded")
        super().save(*args, **kwargs)


class WalletAdjustment(models.Model):
    """
    One row per admin adjustment call, written even when the balance did not
    move. Holds the Idempotency-Key so a replay can answer from here.
    """
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='wallet_adjustments')
    wallet_type = models.CharField(max_length=8, choices=Transaction.WALLET_CHOICES)
    previous_balance = models.PositiveIntegerField()
    new_balance = models.PositiveIntegerField()
    previous_limit = models.PositiveIntegerField(null=True, blank=True)
    new_limit = models.PositiveIntegerField(null=True, blank=True)
    reason = models.CharField(max_length=255, blank=True, default='')
    transaction = models.ForeignKey(Transaction, on_delete=models.SET_NULL, null=True, blank=True, related_name='+')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='performed_adjustments',
    )
    idempotency_key = models.CharField(max_length=64, null=True, blank=True, unique=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.user} {self.wallet_type}: {self.previous_balance} -> {self.new_balance}"
