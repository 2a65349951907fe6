from django.urls import path

from .views import (
    AdminCreditPackageDetailView,
    AdminCreditPackageListCreateView,
    AdminPaymentSettingDetailView,
    AdminPaymentSettingListCreateView,
    AdminTopUpPendingCountView,
    AdminTopUpRequestDetailView,
    AdminTopUpRequestListView,
    TopUpCancelView,
    TopUpOptionsView,
    TopUpRequestView,
)

urlpatterns = [
    path('topup/', TopUpRequestView.as_view(), name='topup-requests'),
    path('topup/options/', TopUpOptionsView.as_view(), name='topup-options'),
    path('topup/<int:pk>/cancel/', TopUpCancelView.as_view(), name='topup-cancel'),

    # Admin review
    path('admin/topup-requests/', AdminTopUpRequestListView.as_view(), name='admin-topup-list'),
    path('admin/topup-requests/pending-count/', AdminTopUpPendingCountView.as_view(), name='admin-topup-pending-count'),
    path('admin/topup-requests/<int:pk>/', AdminTopUpRequestDetailView.as_view(), name='admin-topup-detail'),

    # Global settings
    path('admin/global-settings/credit-packages/', AdminCreditPackageListCreateView.as_view(), name='admin-package-list'),
    path('admin/global-settings/credit-packages/<int:pk>/', AdminCreditPackageDetailView.as_view(), name='admin-package-detail'),
    path('admin/global-settings/payment-settings/', AdminPaymentSettingListCreateView.as_view(), name='admin-payment-setting-list'),
    path('admin/global-settings/payment-settings/<int:pk>/', AdminPaymentSettingDetailView.as_view(), name='admin-payment-setting-detail'),
]
