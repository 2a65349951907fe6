from django.urls import path

from .views import (
    AdminPlanDetailView,
    AdminPlanListCreateView,
    SubscriptionPlanListView,
    UserPlanView,
)

urlpatterns = [
    path('subscription-plans/', SubscriptionPlanListView.as_view(), name='subscription-plans'),
    path('user/plan/', UserPlanView.as_view(), name='user-plan'),
    path('admin/global-settings/subscription-plans/', AdminPlanListCreateView.as_view(), name='admin-plan-list'),
    path('admin/global-settings/subscription-plans/<int:pk>/', AdminPlanDetailView.as_view(), name='admin-plan-detail'),
]
