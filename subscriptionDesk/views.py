import logging

from django.conf import settings
from django.core.cache import cache
from django.db.models import Count
from rest_framework import generics, status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accountDesk.models import CustomUser
from accountDesk.permissions import CanManageGlobalSettings
from .models import PLANS_CACHE_KEY, SubscriptionPlan
from .serializers import AdminSubscriptionPlanSerializer, SubscriptionPlanSerializer

logger = logging.getLogger(__name__)


class SubscriptionPlanListView(APIView):
    """
    GET /api/subscription-plans/
    Public pricing data: active plans ordered by sort_order, served from cache.
    """
    permission_classes = [AllowAny]

    def get(self, request):
        cached = cache.get(PLANS_CACHE_KEY)
        if cached is not None:
            return Response(cached)

        plans = SubscriptionPlan.objects.filter(is_active=True)
        payload = {"plans": SubscriptionPlanSerializer(plans, many=True).data}
        cache.set(PLANS_CACHE_KEY, payload, timeout=settings.CATALOG_CACHE_TIMEOUT)
        return Response(payload)


class UserPlanView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        plan = request.user.subscription_plan
        plan_slug = plan.slug if plan else CustomUser.FREE_PLAN
        return Response({
            "planName": plan.name if plan else "Free Plan",
            "planSlug": plan_slug,
            "isFree": plan is None or plan_slug == CustomUser.FREE_PLAN,
        })


# -----------------------------
# Global settings (super admin)
# -----------------------------
class AdminPlanListCreateView(generics.ListCreateAPIView):
    permission_classes = [CanManageGlobalSettings]
    serializer_class = AdminSubscriptionPlanSerializer
    pagination_class = None

    def get_queryset(self):
        return SubscriptionPlan.objects.annotate(user_count=Count('users'))

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return Response({"plans": serializer.data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        plan = serializer.save()
        logger.info("Plan %s created by %s", plan.slug, request.user.id)
        return Response({"plan": self.get_serializer(plan).data}, status=status.HTTP_201_CREATED)


class AdminPlanDetailView(generics.RetrieveUpdateDestroyAPIView):
    """
    GET/PATCH/DELETE /api/admin/global-settings/subscription-plans/<id>/
    Delete is refused while users are on the plan or while it is the default.
    """
    permission_classes = [CanManageGlobalSettings]
    serializer_class = AdminSubscriptionPlanSerializer
    http_method_names = ['get', 'patch', 'delete', 'head', 'options']

    def get_queryset(self):
        return SubscriptionPlan.objects.annotate(user_count=Count('users'))

    def retrieve(self, request, *args, **kwargs):
        return Response({"plan": self.get_serializer(self.get_object()).data})

    def update(self, request, *args, **kwargs):
        plan = self.get_object()
        serializer = self.get_serializer(plan, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        plan = serializer.save()
        logger.info("Plan %s updated by %s", plan.slug, request.user.id)
        return Response({"plan": self.get_serializer(plan).data})

    def destroy(self, request, *args, **kwargs):
        plan = self.get_object()
        if plan.user_count > 0:
            return Response(
                {"error": f"Cannot delete plan. {plan.user_count} users are currently on this plan."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        if plan.is_default:
            return Response(
                {"error": "Cannot delete the default plan. Set another plan as default first."},
                status=status.HTTP_400_BAD_REQUEST,
            )
        plan.delete()
        logger.info("Plan %s deleted by %s", plan.slug, request.user.id)
        return Response({"success": True, "message": "Plan deleted successfully"})
