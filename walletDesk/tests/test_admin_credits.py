import pytest

from accountDesk.models import CustomUser
from walletDesk import services
from walletDesk.models import FundingWallet, Transaction
from walletDesk.services import record_transaction, seed_free_tier_wallets, set_funding_balance

pytestmark = pytest.mark.django_db

ADD_URL = '/api/admin/credits/add/'


class TestAddCredits:
    def test_grant_creates_wallet_and_credit_row(self, client_for, supervisor, member):
        response = client_for(supervisor).post(
            ADD_URL, {'userId': member.id, 'amount': 50, 'reason': 'goodwill'}, format='json',
        )

        assert response.status_code == 200
        data = response.json()['data']
        assert data['newBalance'] == 50
        assert data['creditsAdded'] == 50
        wallet = FundingWallet.objects.get(user=member)
        assert (wallet.balance, wallet.total_purchased) == (50, 50)
        row = Transaction.objects.get(pk=data['transactionId'])
        assert row.type == Transaction.CREDIT
        assert row.wallet_type == 'FUNDING'
        assert row.description == 'Admin credit: goodwill (by Sana Supervisor)'

    def test_grant_adds_to_existing_balance(self, client_for, supervisor, member):
        set_funding_balance(member, 7)

        response = client_for(supervisor).post(ADD_URL, {'userId': member.id, 'amount': 3}, format='json')

        assert response.json()['data']['newBalance'] == 10
        row = Transaction.objects.get(user=member)
        assert row.description == 'Admin credit addition (by Sana Supervisor)'

    @pytest.mark.parametrize('amount, message', [
        (0, 'Valid positive amount is required'),
        (-5, 'Valid positive amount is required'),
        ('10', 'Valid positive amount is required'),
        (10001, 'Amount cannot exceed 10,000 credits per transaction'),
    ])
    def test_invalid_amounts(self, client_for, supervisor, member, amount, message):
        response = client_for(supervisor).post(ADD_URL, {'userId': member.id, 'amount': amount}, format='json')

        assert response.status_code == 400
        assert response.json() == {'error': message}
        assert not Transaction.objects.exists()

    def test_upper_bound_is_inclusive(self, client_for, supervisor, member):
        response = client_for(supervisor).post(ADD_URL, {'userId': member.id, 'amount': 10000}, format='json')
        assert response.status_code == 200

    def test_replay(self, client_for, supervisor, member):
        client = client_for(supervisor)

        first = client.post(ADD_URL, {'userId': member.id, 'amount': 5}, format='json', HTTP_IDEMPOTENCY_KEY='grant-1')
        second = client.post(ADD_URL, {'userId': member.id, 'amount': 5}, format='json', HTTP_IDEMPOTENCY_KEY='grant-1')

        assert second.json()['idempotent'] is True
        assert second.json()['data']['transactionId'] == first.json()['data']['transactionId']
        assert FundingWallet.objects.get(user=member).balance == 5
        assert Transaction.objects.count() == 1

    def test_replay_reports_the_original_balance(self, client_for, supervisor, member):
        client = client_for(supervisor)
        first = client.post(ADD_URL, {'userId': member.id, 'amount': 5}, format='json', HTTP_IDEMPOTENCY_KEY='grant-2')
        client.post(ADD_URL, {'userId': member.id, 'amount': 20}, format='json')

        second = client.post(ADD_URL, {'userId': member.id, 'amount': 5}, format='json', HTTP_IDEMPOTENCY_KEY='grant-2')

        assert first.json()['data']['newBalance'] == 5
        assert second.json()['data']['newBalance'] == 5
        assert FundingWallet.objects.get(user=member).balance == 25

    def test_concurrent_first_use_replays_the_winner(self, monkeypatch, client_for, supervisor, member):
        client = client_for(supervisor)
        first = client.post(ADD_URL, {'userId': member.id, 'amount': 5}, format='json', HTTP_IDEMPOTENCY_KEY='grant-3')

        real_lookup = services._find_replay
        calls = []

        def lookup_misses_once(model, idempotency_key, actor):
            calls.append(idempotency_key)
            if len(calls) == 1:
                return None
            return real_lookup(model, idempotency_key, actor)

        monkeypatch.setattr(services, '_find_replay', lookup_misses_once)
        second = client.post(ADD_URL, {'userId': member.id, 'amount': 5}, format='json', HTTP_IDEMPOTENCY_KEY='grant-3')

        assert second.status_code == 200
        assert second.json()['idempotent'] is True
        assert second.json()['data'] == first.json()['data']
        assert FundingWallet.objects.get(user=member).balance == 5
        assert Transaction.objects.count() == 1

    @pytest.mark.parametrize('reason, message', [
        (42, 'Reason must be a string'),
        ('x' * 256, 'Reason must be at most 255 characters'),
    ])
    def test_invalid_reason(self, client_for, supervisor, member, reason, message):
        response = client_for(supervisor).post(
            ADD_URL, {'userId': member.id, 'amount': 5, 'reason': reason}, format='json',
        )

        assert response.status_code == 400
        assert response.json() == {'error': message}
        assert not FundingWallet.objects.exists()

    def test_member_cannot_grant(self, client_for, member):
        response = client_for(member).post(ADD_URL, {'userId': member.id, 'amount': 5}, format='json')
        assert response.status_code == 401


class TestCreditOverview:
    def test_overview_stats(self, client_for, supervisor, member, make_user):
        seed_free_tier_wallets(member)
        set_funding_balance(member, 12)
        make_user()

        response = client_for(supervisor).get('/api/admin/credits/overview/')

        assert response.status_code == 200
        body = response.json()
        assert body['stats'] == {
            'totalUsers': 2,
            'totalFundingCredits': 12,
            'totalRedeemCredits': 3,
            'usersWithCredits': 1,
        }
        row = next(u for u in body['users'] if u['id'] == member.id)
        assert (row['fundingBalance'], row['redeemBalance']) == (12, 3)

    def test_support_agent_cannot_view(self, client_for, make_user):
        agent = make_user(role=CustomUser.SUPPORT_AGENT)
        assert client_for(agent).get('/api/admin/credits/overview/').status_code == 401

    def test_user_credits(self, client_for, supervisor, member):
        seed_free_tier_wallets(member)
        record_transaction(member, Transaction.CREDIT, 'FUNDING', 4, description='grant')
        record_transaction(member, Transaction.TOP_UP, 'FUNDING', 11, description='top-up')

        response = client_for(supervisor).get(f'/api/admin/credits/user/{member.id}/')

        body = response.json()
        assert body['user']['redeemWallet']['balance'] == 3
        assert [t['type'] for t in body['transactions']] == ['CREDIT']

    def test_user_credits_unknown_user(self, client_for, supervisor):
        response = client_for(supervisor).get('/api/admin/credits/user/424242/')
        assert response.status_code == 404
        assert response.json() == {'error': 'User not found'}
