import pytest
from django.utils import timezone

from accountDesk import permissions
from accountDesk.models import CustomUser
from walletDesk.models import RedeemWallet, Transaction
from walletDesk.services import seed_free_tier_wallets

pytestmark = pytest.mark.django_db

LIST_URL = '/api/admin/users/regular/'


def detail_url(user):
    return f'/api/admin/users/{user.id}/'


class TestRegularUserList:
    def test_stats_and_users(self, client_for, supervisor, make_user):
        active = make_user(name='Active Today', last_login_at=timezone.now())
        make_user(name='Gold Member', subscription='GOLD')
        make_user(name='Quiet One', status=CustomUser.SUSPENDED)

        response = client_for(supervisor).get(LIST_URL)

        assert response.status_code == 200
        body = response.json()
        assert body['stats'] == {'totalUsers': 3, 'activeToday': 1, 'premiumUsers': 1, 'newThisMonth': 3}
        ids = {row['id'] for row in body['users']}
        assert active.id in ids
        assert supervisor.id not in ids

    def test_filters(self, client_for, supervisor, make_user):
        make_user(name='Bilal Ahmed', email='bilal@example.com')
        make_user(name='Hina', subscription='GOLD', status=CustomUser.SUSPENDED)

        client = client_for(supervisor)
        assert [u['name'] for u in client.get(LIST_URL, {'search': 'bilal'}).json()['users']] == ['Bilal Ahmed']
        assert [u['name'] for u in client.get(LIST_URL, {'subscription': 'gold'}).json()['users']] == ['Hina']
        assert [u['name'] for u in client.get(LIST_URL, {'status': 'suspended'}).json()['users']] == ['Hina']

    def test_member_is_refused(self, client_for, member):
        response = client_for(member).get(LIST_URL)
        assert response.status_code == 401
        assert response.json() == {'error': 'Unauthorized'}

    def test_anonymous_is_refused(self, api_client):
        response = api_client.get(LIST_URL)
        assert response.status_code == 401
        assert 'error' in response.json()


class TestUserDetail:
    def test_detail_includes_wallets_and_tier(self, client_for, supervisor, member):
        seed_free_tier_wallets(member)

        response = client_for(supervisor).get(detail_url(member))

        assert response.status_code == 200
        body = response.json()
        assert body['email'] == member.email
        assert body['tier']['walletLimit'] == 5
        assert body['fundingWallet']['balance'] == 0
        assert body['redeemWallet']['balance'] == 3

    def test_unknown_user(self, client_for, supervisor):
        response = client_for(supervisor).get('/api/admin/users/999999/')
        assert response.status_code == 404
        assert response.json() == {'error': 'User not found'}


class TestUserUpdate:
    def test_update_profile_fields(self, client_for, supervisor, member):
        response = client_for(supervisor).patch(
            detail_url(member), {'name': 'Ayesha K.', 'status': CustomUser.SUSPENDED}, format='json',
        )

        assert response.status_code == 200
        assert response.json()['message'] == 'User updated successfully'
        member.refresh_from_db()
        assert member.name == 'Ayesha K.'
        assert member.status == CustomUser.SUSPENDED

    def test_unsupported_field(self, client_for, supervisor, member):
        response = client_for(supervisor).patch(detail_url(member), {'email': 'x@example.com'}, format='json')
        assert response.status_code == 400
        assert response.json() == {'error': 'Unsupported fields: email'}

    def test_invalid_status_and_role(self, client_for, supervisor, member):
        client = client_for(supervisor)
        assert client.patch(detail_url(member), {'status': 'ASLEEP'}, format='json').status_code == 400
        assert client.patch(detail_url(member), {'role': 'EMPEROR'}, format='json').status_code == 400

    def test_supervisor_can_make_support_agent(self, client_for, supervisor, member):
        response = client_for(supervisor).patch(detail_url(member), {'role': CustomUser.SUPPORT_AGENT}, format='json')

        assert response.status_code == 200
        member.refresh_from_db()
        assert member.role == CustomUser.SUPPORT_AGENT

    def test_supervisor_cannot_make_supervisor(self, client_for, supervisor, member):
        response = client_for(supervisor).patch(detail_url(member), {'role': CustomUser.SUPERVISOR}, format='json')

        assert response.status_code == 403
        member.refresh_from_db()
        assert member.role == CustomUser.USER

    def test_subscription_change_syncs_tier(self, client_for, supervisor, member, free_plan, gold_plan):
        seed_free_tier_wallets(member)

        response = client_for(supervisor).patch(detail_url(member), {'subscription': 'gold'}, format='json')

        assert response.status_code == 200
        body = response.json()['user']
        assert body['subscription'] == 'GOLD'
        assert body['subscriptionPlan']['slug'] == 'GOLD'
        assert body['tier']['redeemCycleDays'] == 30
        wallet = RedeemWallet.objects.get(user=member)
        assert wallet.balance == 3 + 25
        assert wallet.limit == 25
        assert not Transaction.objects.filter(user=member).exists()

    def test_subscription_change_needs_manage_subscriptions(self, monkeypatch, client_for, supervisor, member, gold_plan):
        monkeypatch.setitem(permissions.PERMISSIONS, 'manage_subscriptions', (CustomUser.SUPER_ADMIN,))

        response = client_for(supervisor).patch(
            detail_url(member), {'name': 'Changed', 'subscription': 'GOLD'}, format='json',
        )

        assert response.status_code == 403
        assert response.json() == {'error': 'You cannot change subscriptions'}
        member.refresh_from_db()
        assert member.subscription == CustomUser.FREE_PLAN
        assert member.name == 'Ayesha Khan'
        assert not RedeemWallet.objects.filter(user=member).exists()

    def test_unknown_plan_rolls_back_other_changes(self, client_for, supervisor, member):
        response = client_for(supervisor).patch(
            detail_url(member), {'name': 'Changed', 'subscription': 'DIAMOND'}, format='json',
        )

        assert response.status_code == 400
        assert response.json() == {'error': 'Invalid subscription plan: DIAMOND'}
        member.refresh_from_db()
        assert member.name == 'Ayesha Khan'
