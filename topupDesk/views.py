import logging

from django.conf import settings
from django.core.cache import cache
from django.db.models import Count
from rest_framework import generics, status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accountDesk.permissions import CanManageGlobalSettings, CanReviewTopUps
from nikahFirst.exceptions import NotFound
from nikahFirst.validators import optional_text
from . import services
from .models import TOPUP_OPTIONS_CACHE_KEY, CreditPackage, PaymentSetting, TopUpRequest
from .serializers import (
    AdminTopUpRequestSerializer,
    CreditPackageSerializer,
    PaymentSettingSerializer,
    TopUpRequestSerializer,
    payment_details,
)

logger = logging.getLogger(__name__)


# -----------------------------
# Member: top-up requests
# -----------------------------
class TopUpRequestView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        """GET /api/topup/ → { requests: [...] } newest first."""
        requests = TopUpRequest.objects.filter(user=request.user).select_related('package')
        return Response({"requests": TopUpRequestSerializer(requests, many=True).data})

    def post(self, request):
        """
        Body: { "packageId": <id>, "paymentMethod": "BANK_TRANSFER" }
        Returns 201: { request, paymentInstructions, paymentDetails }
        """
        topup, payment_setting = services.create_request(
            request.user,
            request.data.get('packageId'),
            request.data.get('paymentMethod'),
        )
        return Response({
            "request": TopUpRequestSerializer(topup).data,
            "paymentInstructions": payment_setting.instructions,
            "paymentDetails": payment_details(payment_setting),
        }, status=status.HTTP_201_CREATED)


class TopUpOptionsView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        """GET /api/topup/options/ → { packages, paymentMethods } (active only, cached)."""
        cached = cache.get(TOPUP_OPTIONS_CACHE_KEY)
        if cached is not None:
            return Response(cached)

        packages = CreditPackage.objects.filter(is_active=True)
        methods = PaymentSetting.objects.filter(is_active=True)
        payload = {
            "packages": CreditPackageSerializer(packages, many=True).data,
            "paymentMethods": PaymentSettingSerializer(methods, many=True).data,
        }
        cache.set(TOPUP_OPTIONS_CACHE_KEY, payload, timeout=settings.CATALOG_CACHE_TIMEOUT)
        return Response(payload)


class TopUpCancelView(APIView):
    permission_classes = [IsAuthenticated]

    def post(self, request, pk):
        topup = services.cancel_request(pk, request.user)
        return Response({
            "success": True,
            "message": "Top-up request cancelled successfully",
            "request": TopUpRequestSerializer(topup).data,
        })


# -----------------------------
# Admin: review queue
# -----------------------------
class AdminTopUpRequestListView(APIView):
    permission_classes = [CanReviewTopUps]

    def get(self, request):
        """
        GET /api/admin/topup-requests/?status=PENDING
        Returns: { requests, stats: { pending, completed, rejected, cancelled, total } }
        Stats always cover every request regardless of the filter.
        """
        requests = TopUpRequest.objects.select_related('user', 'package', 'processed_by')
        status_filter = request.query_params.get('status')
        if status_filter:
            requests = requests.filter(status=status_filter.upper())

        stats = {'pending': 0, 'completed': 0, 'rejected': 0, 'cancelled': 0, 'total': 0}
        for row in TopUpRequest.objects.values('status').annotate(count=Count('id')):
            stats[row['status'].lower()] = row['count']
            stats['total'] += row['count']

        return Response({
            "requests": AdminTopUpRequestSerializer(requests, many=True).data,
            "stats": stats,
        })


class AdminTopUpPendingCountView(APIView):
    permission_classes = [CanReviewTopUps]

    def get(self, request):
        return Response({"count": TopUpRequest.objects.filter(status=TopUpRequest.PENDING).count()})


class AdminTopUpRequestDetailView(APIView):
    permission_classes = [CanReviewTopUps]

    def get(self, request, pk):
        try:
            topup = TopUpRequest.objects.select_related('user', 'package', 'processed_by').get(pk=pk)
        except TopUpRequest.DoesNotExist:
            raise NotFound("Top-up request not found")

        data = AdminTopUpRequestSerializer(topup).data
        funding = getattr(topup.user, 'funding_wallet', None)
        data['user']['fundingBalance'] = funding.balance if funding else 0
        return Response({"request": data})

    def put(self, request, pk):
        """
        Body: { "action": "approve", "adminNotes"?: str }
           or { "action": "reject", "rejectionReason": str, "adminNotes"?: str }
        Approve credits the funding wallet and writes one TOP_UP ledger row;
        reject leaves wallet and ledger untouched.
        """
        action = request.data.get('action')
        admin_notes = optional_text(request.data, 'adminNotes', "Admin notes")

        if action == 'approve':
            topup, wallet = services.approve_request(pk, request.user, admin_notes=admin_notes)
            return Response({
                "success": True,
                "message": f"Top-up approved. {topup.total_credits} credits added to user's wallet.",
                "request": AdminTopUpRequestSerializer(topup).data,
                "newBalance": wallet.balance,
            })

        if action == 'reject':
            topup = services.reject_request(
                pk,
                request.user,
                rejection_reason=optional_text(request.data, 'rejectionReason', "Rejection reason"),
                admin_notes=admin_notes,
            )
            return Response({
                "success": True,
                "message": "Top-up request rejected.",
                "request": AdminTopUpRequestSerializer(topup).data,
            })

        return Response(
            {"error": "Invalid action. Must be 'approve' or 'reject'"},
            status=status.HTTP_400_BAD_REQUEST,
        )


# -----------------------------
# Global settings (super admin)
# -----------------------------
class AdminCreditPackageListCreateView(generics.ListCreateAPIView):
    permission_classes = [CanManageGlobalSettings]
    serializer_class = CreditPackageSerializer
    queryset = CreditPackage.objects.all()
    pagination_class = None

    def list(self, request, *args, **kwargs):
        return Response({"packages": self.get_serializer(self.get_queryset(), many=True).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        package = serializer.save()
        logger.info("Credit package %s created by %s", package.slug, request.user.id)
        return Response({"package": serializer.data}, status=status.HTTP_201_CREATED)


class AdminCreditPackageDetailView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = [CanManageGlobalSettings]
    serializer_class = CreditPackageSerializer
    queryset = CreditPackage.objects.all()
    http_method_names = ['get', 'patch', 'delete', 'head', 'options']

    def retrieve(self, request, *args, **kwargs):
        return Response({"package": self.get_serializer(self.get_object()).data})

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"package": serializer.data})

    def destroy(self, request, *args, **kwargs):
        package = self.get_object()
        package.delete()
        logger.info("Credit package %s deleted by %s", package.slug, request.user.id)
        return Response({"success": True, "message": "Package deleted successfully"})


class AdminPaymentSettingListCreateView(generics.ListCreateAPIView):
    permission_classes = [CanManageGlobalSettings]
    serializer_class = PaymentSettingSerializer
    queryset = PaymentSetting.objects.all()
    pagination_class = None

    def list(self, request, *args, **kwargs):
        return Response({"settings": self.get_serializer(self.get_queryset(), many=True).data})

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        setting = serializer.save()
        logger.info("Payment setting %s created by %s", setting.method, request.user.id)
        return Response({"setting": serializer.data}, status=status.HTTP_201_CREATED)


class AdminPaymentSettingDetailView(generics.RetrieveUpdateDestroyAPIView):
    permission_classes = [CanManageGlobalSettings]
    serializer_class = PaymentSettingSerializer
    queryset = PaymentSetting.objects.all()
    http_method_names = ['get', 'patch', 'delete', 'head', 'options']

    def retrieve(self, request, *args, **kwargs):
        return Response({"setting": self.get_serializer(self.get_object()).data})

    def update(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_object(), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response({"setting": serializer.data})

    def destroy(self, request, *args, **kwargs):
        setting = self.get_object()
        setting.delete()
        logger.info("Payment setting %s deleted by %s", setting.method, request.user.id)
        return Response({"success": True, "message": "Setting deleted successfully"})
