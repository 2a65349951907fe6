from django.urls import path

from .views import (
    AdminCreditAddView,
    AdminCreditAdjustView,
    AdminCreditOverviewView,
    AdminTransactionDetailView,
    AdminTransactionListView,
    AdminUserCreditsView,
    TransactionListView,
    WalletBalanceView,
)

urlpatterns = [
    path('wallet/balance/', WalletBalanceView.as_view(), name='wallet-balance'),
    path('transactions/', TransactionListView.as_view(), name='transaction-list'),

    # Admin
    path('admin/transactions/', AdminTransactionListView.as_view(), name='admin-transaction-list'),
    path('admin/transactions/<int:pk>/', AdminTransactionDetailView.as_view(), name='admin-transaction-detail'),
    path('admin/credits/adjust/', AdminCreditAdjustView.as_view(), name='admin-credits-adjust'),
    path('admin/credits/add/', AdminCreditAddView.as_view(), name='admin-credits-add'),
    path('admin/credits/overview/', AdminCreditOverviewView.as_view(), name='admin-credits-overview'),
    path('admin/credits/user/<int:pk>/', AdminUserCreditsView.as_view(), name='admin-credits-user'),
]
