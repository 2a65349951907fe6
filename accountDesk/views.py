import logging

from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from nikahFirst.exceptions import BadRequest, Forbidden, NotFound
from subscriptionDesk.services import assign_plan
from .models import CustomUser
from .permissions import CanViewUserDetails, can_change_role, has_permission
from .serializers import RegularUserSerializer, UserDetailSerializer

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'phone', 'status', 'role', 'subscription')


class RegularUserListView(APIView):
    """
    GET /api/admin/users/regular/?search=&subscription=&status=
    Returns: { stats: { totalUsers, activeToday, premiumUsers, newThisMonth }, users: [...] }
    """
    permission_classes = [CanViewUserDetails]

    def get(self, request):
        members = CustomUser.objects.filter(role=CustomUser.USER)

        now = timezone.localtime()
        start_of_today = now.replace(hour=0, minute=0, second=0, microsecond=0)
        start_of_month = start_of_today.replace(day=1)
        stats = {
            'totalUsers': members.count(),
            'activeToday': members.filter(last_login_at__gte=start_of_today).count(),
            'premiumUsers': members.exclude(subscription=CustomUser.FREE_PLAN).count(),
            'newThisMonth': members.filter(created_at__gte=start_of_month).count(),
        }

        users = members
        search = request.query_params.get('search')
        if search:
            users = users.filter(Q(name__icontains=search) | Q(email__icontains=search) | Q(phone__icontains=search))
        subscription = request.query_params.get('subscription')
        if subscription:
            users = users.filter(subscription=subscription.upper())
        user_status = request.query_params.get('status')
        if user_status:
            users = users.filter(status=user_status.upper())

        return Response({'stats': stats, 'users': RegularUserSerializer(users, many=True).data})


class AdminUserDetailView(APIView):
    permission_classes = [CanViewUserDetails]

    def _get_user(self, pk, lock=False):
        queryset = CustomUser.objects.select_for_update() if lock else CustomUser.objects.select_related('subscription_plan')
        try:
            return queryset.get(pk=pk)
        except CustomUser.DoesNotExist:
            raise NotFound("User not found")

    def get(self, request, pk):
        """GET /api/admin/users/<id>/ → profile, tier snapshot and both wallets."""
        return Response(UserDetailSerializer(self._get_user(pk)).data)

    @transaction.atomic
    def patch(self, request, pk):
        """
        Body (all optional): { "name", "phone", "status", "role", "subscription" }
        A subscription change re-syncs the tier snapshot and the redeem wallet
        inside the same database transaction.
        """
        user = self._get_user(pk, lock=True)
        data = request.data

        unknown = set(data.keys()) - set(EDITABLE_FIELDS)
        if unknown:
            raise BadRequest(f"Unsupported fields: {', '.join(sorted(unknown))}")
        if data.get('subscription') and not has_permission(request.user.role, 'manage_subscriptions'):
            raise Forbidden("You cannot change subscriptions")

        changed = []
        if 'name' in data:
            user.name = (data.get('name') or '').strip()
            changed.append('name')
        if 'phone' in data:
            user.phone = data.get('phone') or None
            changed.append('phone')

        if 'status' in data:
            new_status = data.get('status')
            if new_status not in dict(CustomUser.STATUS_CHOICES):
                raise BadRequest("Invalid status")
            user.status = new_status
            changed.append('status')

        if 'role' in data:
            new_role = data.get('role')
            if new_role not in dict(CustomUser.ROLE_CHOICES):
                raise BadRequest("Invalid role")
            if new_role != user.role:
                if not can_change_role(request.user.role, new_role):
                    raise Forbidden(f"You cannot assign the {new_role} role")
                user.role = new_role
                changed.append('role')

        if changed:
            user.save(update_fields=changed + ['updated_at'])
            logger.info("User %s updated by %s: %s", user.id, request.user.id, ', '.join(changed))

        new_plan = data.get('subscription')
        if new_plan:
            assign_plan(user, str(new_plan).strip().upper(), actor=request.user)

        user = self._get_user(pk)
        return Response({
            'success': True,
            'message': 'User updated successfully',
            'user': UserDetailSerializer(user).data,
        }, status=status.HTTP_200_OK)
