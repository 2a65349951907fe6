from decimal import Decimal

import pytest
from django.core.cache import cache

from topupDesk.models import TOPUP_OPTIONS_CACHE_KEY, CreditPackage, PaymentSetting

pytestmark = pytest.mark.django_db

PACKAGES_URL = '/api/admin/global-settings/credit-packages/'
SETTINGS_URL = '/api/admin/global-settings/payment-settings/'


class TestTopUpOptions:
    def test_active_catalog(self, client_for, member, package, bank_transfer):
        CreditPackage.objects.create(slug='PACK_5', name='Starter Pack', credits=5, price=Decimal('15'), is_active=False)

        body = client_for(member).get('/api/topup/options/').json()

        assert [p['slug'] for p in body['packages']] == ['PACK_11']
        assert body['packages'][0]['bonusCredits'] == 2
        assert [m['method'] for m in body['paymentMethods']] == ['BANK_TRANSFER']

    def test_cache_is_invalidated_on_change(self, client_for, member, package, bank_transfer):
        client = client_for(member)
        client.get('/api/topup/options/')
        assert cache.get(TOPUP_OPTIONS_CACHE_KEY) is not None

        package.is_active = False
        package.save()

        assert cache.get(TOPUP_OPTIONS_CACHE_KEY) is None
        assert client.get('/api/topup/options/').json()['packages'] == []

    def test_payment_setting_delete_invalidates(self, client_for, member, bank_transfer):
        client = client_for(member)
        client.get('/api/topup/options/')

        bank_transfer.delete()

        assert client.get('/api/topup/options/').json()['paymentMethods'] == []

    def test_requires_login(self, api_client):
        assert api_client.get('/api/topup/options/').status_code == 401


class TestPackageSettings:
    def test_create(self, client_for, super_admin):
        response = client_for(super_admin).post(PACKAGES_URL, {
            'slug': 'pack_17', 'name': 'Premium Pack', 'credits': 17, 'price': '25.00', 'savingsPercent': 51,
        }, format='json')

        assert response.status_code == 201
        package = response.json()['package']
        assert package['slug'] == 'PACK_17'
        assert package['price'] == 25.0
        assert CreditPackage.objects.get(slug='PACK_17').bonus_credits == 0

    def test_rejects_negative_price_and_zero_credits(self, client_for, super_admin):
        client = client_for(super_admin)

        negative = client.post(PACKAGES_URL, {'slug': 'BAD', 'name': 'Bad', 'credits': 5, 'price': '-1'}, format='json')
        empty = client.post(PACKAGES_URL, {'slug': 'BAD', 'name': 'Bad', 'credits': 0, 'price': '1'}, format='json')

        assert negative.status_code == empty.status_code == 400
        assert not CreditPackage.objects.exists()

    def test_duplicate_slug(self, client_for, super_admin, package):
        response = client_for(super_admin).post(
            PACKAGES_URL, {'slug': 'pack_11', 'name': 'Copy', 'credits': 1, 'price': '1'}, format='json',
        )
        assert response.status_code == 400
        assert response.json() == {'error': 'slug: A package with this slug already exists'}

    def test_single_popular(self, client_for, super_admin, package):
        other = CreditPackage.objects.create(slug='PACK_23', name='Ultimate Pack', credits=23, price=Decimal('30'))

        response = client_for(super_admin).patch(f'{PACKAGES_URL}{other.id}/', {'isPopular': True}, format='json')

        assert response.status_code == 200
        package.refresh_from_db()
        assert package.is_popular is False
        assert CreditPackage.objects.get(is_popular=True) == other

    def test_delete(self, client_for, super_admin, package):
        response = client_for(super_admin).delete(f'{PACKAGES_URL}{package.id}/')
        assert response.json() == {'success': True, 'message': 'Package deleted successfully'}
        assert not CreditPackage.objects.exists()

    def test_supervisor_refused(self, client_for, supervisor):
        response = client_for(supervisor).get(PACKAGES_URL)
        assert response.status_code == 401


class TestPaymentSettings:
    def test_create_normalizes_method(self, client_for, super_admin):
        response = client_for(super_admin).post(SETTINGS_URL, {
            'method': 'jazzcash', 'label': 'JazzCash', 'instructions': 'Send to our JazzCash account.',
            'mobileNumber': '03001234567',
        }, format='json')

        assert response.status_code == 201
        assert response.json()['setting']['method'] == 'JAZZCASH'
        assert PaymentSetting.objects.get().mobile_number == '03001234567'

    def test_duplicate_method(self, client_for, super_admin, bank_transfer):
        response = client_for(super_admin).post(SETTINGS_URL, {
            'method': 'Bank_Transfer', 'label': 'Again', 'instructions': '-',
        }, format='json')

        assert response.status_code == 400
        assert response.json() == {'error': 'method: A setting for this payment method already exists'}

    def test_list_and_update(self, client_for, super_admin, bank_transfer):
        client = client_for(super_admin)

        assert [s['method'] for s in client.get(SETTINGS_URL).json()['settings']] == ['BANK_TRANSFER']

        response = client.patch(f'{SETTINGS_URL}{bank_transfer.id}/', {'isActive': False}, format='json')
        assert response.json()['setting']['isActive'] is False
