from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.db import models


class CustomUserManager(BaseUserManager):
    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('The Email field must be set')
        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('role', CustomUser.SUPER_ADMIN)
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        return self.create_user(email, password, **extra_fields)


class CustomUser(AbstractBaseUser, PermissionsMixin):
    USER = 'USER'
    SUPPORT_AGENT = 'SUPPORT_AGENT'
    CONTENT_EDITOR = 'CONTENT_EDITOR'
    CONSULTANT = 'CONSULTANT'
    SUPERVISOR = 'SUPERVISOR'
    SUPER_ADMIN = 'SUPER_ADMIN'
    ROLE_CHOICES = [
        (USER, 'Member'),
        (SUPPORT_AGENT, 'Support Agent'),
        (CONTENT_EDITOR, 'Content Editor'),
        (CONSULTANT, 'Consultant'),
        (SUPERVISOR, 'Supervisor'),
        (SUPER_ADMIN, 'Super Admin'),
    ]

    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'
    SUSPENDED = 'SUSPENDED'
    BANNED = 'BANNED'
    STATUS_CHOICES = [
        (ACTIVE, 'Active'),
        (INACTIVE, 'Inactive'),
        (SUSPENDED, 'Suspended'),
        (BANNED, 'Banned'),
    ]

    FREE_PLAN = 'FREE'

    email = models.EmailField(unique=True)
    name = models.CharField(max_length=255, blank=True, default='')
    phone = models.CharField(max_length=20, null=True, blank=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=USER)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=ACTIVE)

    # Plan slug plus a snapshot of the plan's tier values at assignment time
    subscription = models.CharField(max_length=50, default=FREE_PLAN)
    subscription_plan = models.ForeignKey(
        'subscriptionDesk.SubscriptionPlan',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='users',
    )
    tier_free_credits = models.PositiveIntegerField(default=3)
    tier_wallet_limit = models.PositiveIntegerField(default=5)
    tier_redeem_credits = models.PositiveIntegerField(default=1)
    tier_redeem_cycle_days = models.PositiveIntegerField(default=15)
    tier_profile_limit = models.PositiveIntegerField(default=1)
    tier_price_monthly = models.DecimalField(max_digits=10, decimal_places=2, default=0)
    tier_price_yearly = models.DecimalField(max_digits=10, decimal_places=2, default=0)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)
    last_login_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = CustomUserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['role'], name='user_role_idx'),
            models.Index(fields=['subscription'], name='user_subscription_idx'),
            models.Index(fields=['status'], name='user_status_idx'),
        ]

    def __str__(self):
        return self.email

    @property
    def display_name(self):
        return self.name or self.email
