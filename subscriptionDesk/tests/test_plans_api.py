import pytest
from django.core.cache import cache
from django.core.management import call_command

from subscriptionDesk.models import PLANS_CACHE_KEY, SubscriptionPlan
from subscriptionDesk.services import assign_plan
from topupDesk.models import CreditPackage, PaymentSetting

pytestmark = pytest.mark.django_db

ADMIN_URL = '/api/admin/global-settings/subscription-plans/'


class TestPublicPlans:
    def test_lists_active_plans_in_order(self, api_client, free_plan, gold_plan):
        SubscriptionPlan.objects.create(slug='LEGACY', name='Legacy', is_active=False)

        response = api_client.get('/api/subscription-plans/')

        assert response.status_code == 200
        assert [p['slug'] for p in response.json()['plans']] == ['FREE', 'GOLD']

    def test_cached_until_a_plan_changes(self, api_client, free_plan):
        api_client.get('/api/subscription-plans/')
        assert cache.get(PLANS_CACHE_KEY) is not None

        SubscriptionPlan.objects.create(slug='SILVER', name='Silver', sort_order=2)
        assert cache.get(PLANS_CACHE_KEY) is None

        slugs = [p['slug'] for p in api_client.get('/api/subscription-plans/').json()['plans']]
        assert slugs == ['FREE', 'SILVER']


class TestUserPlan:
    def test_without_plan(self, client_for, member):
        body = client_for(member).get('/api/user/plan/').json()
        assert body == {'planName': 'Free Plan', 'planSlug': 'FREE', 'isFree': True}

    def test_on_gold(self, client_for, member, gold_plan):
        assign_plan(member, 'GOLD')
        member.refresh_from_db()

        body = client_for(member).get('/api/user/plan/').json()
        assert body == {'planName': 'Gold', 'planSlug': 'GOLD', 'isFree': False}


class TestPlanSettings:
    def test_create_normalizes_slug(self, client_for, super_admin):
        response = client_for(super_admin).post(ADMIN_URL, {
            'slug': 'silver', 'name': 'Silver', 'freeCredits': 15, 'walletLimit': 15,
            'redeemCredits': 5, 'redeemCycleDays': 30, 'priceMonthly': 9, 'features': ['3 Active Profiles'],
        }, format='json')

        assert response.status_code == 201
        plan = response.json()['plan']
        assert plan['slug'] == 'SILVER'
        assert plan['userCount'] == 0
        assert SubscriptionPlan.objects.get(slug='SILVER').features == ['3 Active Profiles']

    def test_duplicate_slug(self, client_for, super_admin, gold_plan):
        response = client_for(super_admin).post(ADMIN_URL, {'slug': 'Gold', 'name': 'Gold again'}, format='json')
        assert response.status_code == 400
        assert response.json() == {'error': 'slug: A plan with this slug already exists'}

    def test_list_includes_user_count(self, client_for, super_admin, member, gold_plan):
        assign_plan(member, 'GOLD')

        plans = client_for(super_admin).get(ADMIN_URL).json()['plans']

        assert {p['slug']: p['userCount'] for p in plans} == {'GOLD': 1}

    def test_single_default(self, client_for, super_admin, free_plan, gold_plan):
        response = client_for(super_admin).patch(f'{ADMIN_URL}{gold_plan.id}/', {'isDefault': True}, format='json')

        assert response.status_code == 200
        free_plan.refresh_from_db()
        assert free_plan.is_default is False
        assert SubscriptionPlan.objects.filter(is_default=True).get() == gold_plan

    def test_delete_refused_while_in_use(self, client_for, super_admin, member, gold_plan):
        assign_plan(member, 'GOLD')

        response = client_for(super_admin).delete(f'{ADMIN_URL}{gold_plan.id}/')

        assert response.status_code == 400
        assert response.json() == {'error': 'Cannot delete plan. 1 users are currently on this plan.'}

    def test_delete_refused_for_default(self, client_for, super_admin, free_plan):
        response = client_for(super_admin).delete(f'{ADMIN_URL}{free_plan.id}/')
        assert response.status_code == 400

    def test_delete(self, client_for, super_admin, gold_plan):
        response = client_for(super_admin).delete(f'{ADMIN_URL}{gold_plan.id}/')
        assert response.status_code == 200
        assert not SubscriptionPlan.objects.exists()

    def test_supervisor_cannot_manage(self, client_for, supervisor):
        response = client_for(supervisor).get(ADMIN_URL)
        assert response.status_code == 401
        assert response.json() == {'error': 'Unauthorized'}


class TestSeedCatalog:
    def test_seeds_defaults(self):
        call_command('seed_catalog')

        assert list(SubscriptionPlan.objects.values_list('slug', flat=True)) == [
            'FREE', 'STANDARD', 'SILVER', 'GOLD', 'PLATINUM', 'PRO',
        ]
        assert SubscriptionPlan.objects.get(is_default=True).slug == 'FREE'
        assert CreditPackage.objects.count() == 5
        assert CreditPackage.objects.get(is_popular=True).slug == 'PACK_11'
        assert set(PaymentSetting.objects.values_list('method', flat=True)) == {'BANK_TRANSFER', 'JAZZCASH', 'EASYPAISA'}

    def test_rerun_updates_in_place(self):
        call_command('seed_catalog')
        SubscriptionPlan.objects.filter(slug='GOLD').update(free_credits=1)

        call_command('seed_catalog')

        assert SubscriptionPlan.objects.count() == 6
        assert SubscriptionPlan.objects.get(slug='GOLD').free_credits == 25
