from django.urls import path

from .views import AdminUserDetailView, RegularUserListView

urlpatterns = [
    path('admin/users/regular/', RegularUserListView.as_view(), name='admin-regular-users'),
    path('admin/users/<int:pk>/', AdminUserDetailView.as_view(), name='admin-user-detail'),
]
