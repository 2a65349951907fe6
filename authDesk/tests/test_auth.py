from datetime import timedelta

import pytest
from django.utils import timezone

from accountDesk.models import CustomUser
from walletDesk.models import FundingWallet, RedeemWallet, Transaction

pytestmark = pytest.mark.django_db

SIGNUP_URL = '/api/auth/signup/'
LOGIN_URL = '/api/auth/login/'
PASSWORD = 'Str0ng-Passw0rd!'


class TestSignup:
    def test_creates_member_with_seeded_wallets(self, api_client):
        before = timezone.now()

        response = api_client.post(SIGNUP_URL, {
            'name': 'Fatima Noor', 'email': 'Fatima@Example.com', 'phone': '+923001234567', 'password': PASSWORD,
        }, format='json')

        assert response.status_code == 201
        body = response.json()
        assert body['token'] and body['refresh_token']
        assert body['email'] == 'fatima@example.com'
        assert body['role'] == CustomUser.USER

        user = CustomUser.objects.get(email='fatima@example.com')
        assert user.subscription == CustomUser.FREE_PLAN
        assert FundingWallet.objects.get(user=user).balance == 0
        redeem = RedeemWallet.objects.get(user=user)
        assert (redeem.balance, redeem.limit, redeem.redeem_cycle_days) == (3, 5, 15)
        assert redeem.next_redemption >= before + timedelta(days=15)
        assert not Transaction.objects.filter(user=user).exists()

    def test_links_the_free_plan(self, api_client, free_plan):
        api_client.post(SIGNUP_URL, {'name': 'Omar', 'email': 'omar@example.com', 'password': PASSWORD}, format='json')

        user = CustomUser.objects.get(email='omar@example.com')
        assert user.subscription_plan == free_plan
        assert user.tier_free_credits == 3

    def test_duplicate_email(self, api_client, member):
        response = api_client.post(SIGNUP_URL, {
            'name': 'Copy', 'email': member.email.upper(), 'password': PASSWORD,
        }, format='json')

        assert response.status_code == 400
        assert response.json() == {'error': 'email: This email is already registered.'}
        assert CustomUser.objects.count() == 1

    def test_weak_password(self, api_client):
        response = api_client.post(SIGNUP_URL, {'name': 'Weak', 'email': 'weak@example.com', 'password': '1234'}, format='json')

        assert response.status_code == 400
        assert response.json()['error'].startswith('password: ')
        assert not FundingWallet.objects.exists()

    def test_bad_phone(self, api_client):
        response = api_client.post(SIGNUP_URL, {
            'name': 'Phone', 'email': 'phone@example.com', 'phone': 'call me', 'password': PASSWORD,
        }, format='json')
        assert response.status_code == 400


class TestLogin:
    def test_returns_tokens_and_stamps_login(self, api_client, member):
        response = api_client.post(LOGIN_URL, {'email': member.email, 'password': PASSWORD}, format='json')

        assert response.status_code == 200
        assert response.json()['userId'] == member.id
        member.refresh_from_db()
        assert member.last_login_at is not None

    def test_wrong_password(self, api_client, member):
        response = api_client.post(LOGIN_URL, {'email': member.email, 'password': 'nope'}, format='json')

        assert response.status_code == 400
        assert response.json() == {'error': 'Invalid email or password.'}

    def test_suspended_account(self, api_client, make_user):
        user = make_user(status=CustomUser.SUSPENDED)

        response = api_client.post(LOGIN_URL, {'email': user.email, 'password': PASSWORD}, format='json')

        assert response.json() == {'error': 'User account is disabled.'}

    def test_access_token_authenticates(self, api_client, member):
        token = api_client.post(LOGIN_URL, {'email': member.email, 'password': PASSWORD}, format='json').json()['token']

        api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
        response = api_client.get('/api/wallet/balance/')

        assert response.status_code == 200


class TestLogout:
    def test_blacklists_refresh_token(self, api_client, member):
        tokens = api_client.post(LOGIN_URL, {'email': member.email, 'password': PASSWORD}, format='json').json()

        response = api_client.post('/api/auth/logout/', {'refresh_token': tokens['refresh_token']}, format='json')
        assert response.status_code == 200

        refresh = api_client.post('/api/auth/token/refresh/', {'refresh': tokens['refresh_token']}, format='json')
        assert refresh.status_code == 401

    def test_missing_token(self, api_client):
        response = api_client.post('/api/auth/logout/', {}, format='json')
        assert response.status_code == 400
        assert response.json() == {'error': 'Refresh token is required'}

    def test_get_not_allowed(self, api_client):
        assert api_client.get('/api/auth/logout/').status_code == 405
