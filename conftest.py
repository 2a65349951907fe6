from decimal import Decimal
from itertools import count

import pytest
from django.core.cache import cache
from rest_framework.test import APIClient

from accountDesk.models import CustomUser
from subscriptionDesk.models import SubscriptionPlan
from topupDesk.models import CreditPackage, PaymentSetting

_emails = count(1)


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def make_user(db):
    def _make_user(role=CustomUser.USER, email=None, name=None, password='Str0ng-Passw0rd!', **extra):
        n = next(_emails)
        return CustomUser.objects.create_user(
            email=email or f"user{n}@example.com",
            password=password,
            name=name if name is not None else f"User {n}",
            role=role,
            **extra,
        )
    return _make_user


@pytest.fixture
def member(make_user):
    return make_user(name='Ayesha Khan')


@pytest.fixture
def supervisor(make_user):
    return make_user(role=CustomUser.SUPERVISOR, name='Sana Supervisor')


@pytest.fixture
def super_admin(make_user):
    return make_user(role=CustomUser.SUPER_ADMIN, name='Root Admin')


@pytest.fixture
def support_agent(make_user):
    return make_user(role=CustomUser.SUPPORT_AGENT, name='Sam Support')


@pytest.fixture
def client_for():
    """APIClient already authenticated as the given user."""
    def _client_for(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client
    return _client_for


@pytest.fixture
def free_plan(db):
    return SubscriptionPlan.objects.create(
        slug='FREE', name='Free', free_credits=3, wallet_limit=5, redeem_credits=1,
        redeem_cycle_days=15, profile_limit=1, sort_order=0, is_default=True,
    )


@pytest.fixture
def gold_plan(db):
    return SubscriptionPlan.objects.create(
        slug='GOLD', name='Gold', free_credits=25, wallet_limit=25, redeem_credits=5,
        redeem_cycle_days=30, profile_limit=5, price_monthly=Decimal('15'),
        price_yearly=Decimal('160.20'), yearly_discount_pct=11, sort_order=3,
    )


@pytest.fixture
def package(db):
    return CreditPackage.objects.create(
        slug='PACK_11', name='Value Pack', credits=11, bonus_credits=2,
        price=Decimal('20'), savings_percent=39, is_popular=True, sort_order=2,
    )


@pytest.fixture
def bank_transfer(db):
    return PaymentSetting.objects.create(
        method='BANK_TRANSFER', label='Bank Transfer',
        instructions='Include your request number in the transfer reference.',
        account_title='NikahFirst Services', account_number='1234567890123',
        bank_name='HBL', iban='PK00HABB0001234567890123',
    )
