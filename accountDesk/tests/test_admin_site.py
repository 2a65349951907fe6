import pytest

from walletDesk.models import Transaction
from walletDesk.services import record_transaction, seed_free_tier_wallets

pytestmark = pytest.mark.django_db


class TestAdminSite:
    @pytest.mark.parametrize('url', [
        '/admin/accountDesk/customuser/',
        '/admin/accountDesk/customuser/add/',
        '/admin/subscriptionDesk/subscriptionplan/',
        '/admin/walletDesk/fundingwallet/',
        '/admin/walletDesk/transaction/',
        '/admin/topupDesk/topuprequest/',
    ])
    def test_pages_load(self, admin_client, url):
        assert admin_client.get(url).status_code == 200

    def test_user_change_page(self, admin_client, member):
        response = admin_client.get(f'/admin/accountDesk/customuser/{member.id}/change/')
        assert response.status_code == 200

    def test_ledger_rows_are_view_only(self, admin_client, member):
        seed_free_tier_wallets(member)
        txn = record_transaction(member, Transaction.BONUS, 'REDEEM', 2, description='Welcome')

        page = admin_client.get(f'/admin/walletDesk/transaction/{txn.id}/change/')
        delete = admin_client.post(f'/admin/walletDesk/transaction/{txn.id}/delete/', {'post': 'yes'})

        assert page.status_code == 200
        assert delete.status_code == 403
        assert Transaction.objects.filter(pk=txn.pk).exists()
