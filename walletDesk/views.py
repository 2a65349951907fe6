import logging

from django.db.models import Count, Q, Sum
from django.utils.dateparse import parse_date
from rest_framework import generics, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accountDesk.models import CustomUser
from accountDesk.permissions import (
    CanAdjustCredits,
    CanDeleteTransactions,
    CanViewTransactions,
    CanViewWalletDetails,
)
from nikahFirst.exceptions import BadRequest, NotFound
from nikahFirst.validators import optional_text
from . import constants, services
from .models import FundingWallet, RedeemWallet, Transaction
from .serializers import (
    AdminTransactionSerializer,
    FundingWalletSerializer,
    RedeemWalletSerializer,
    TransactionSerializer,
)

logger = logging.getLogger(__name__)


# -----------------------------
# Pagination / helpers
# -----------------------------
class LedgerPagination(PageNumberPagination):
    page_size = constants.TRANSACTIONS_PAGE_SIZE
    page_size_query_param = 'limit'
    max_page_size = constants.TRANSACTIONS_MAX_PAGE_SIZE

    def get_paginated_response(self, data, **extra):
        paginator = self.page.paginator
        return Response({
            'transactions': data,
            'pagination': {
                'page': self.page.number,
                'limit': paginator.per_page,
                'total': paginator.count,
                'totalPages': paginator.num_pages if paginator.count else 0,
            },
            **extra,
        })


def _non_negative_int(value):
    """JSON numbers only; booleans and numeric strings are refused."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if value < 0 or (isinstance(value, float) and not value.is_integer()):
        return None
    return int(value)


def _idempotency_key(request):
    key = request.headers.get('Idempotency-Key')
    if key and len(key) > 64:
        raise BadRequest("Idempotency-Key must be at most 64 characters")
    return key or None


def _filter_by_type(queryset, params):
    tx_type = params.get('type')
    wallet_type = params.get('walletType')
    if tx_type:
        queryset = queryset.filter(type=tx_type)
    if wallet_type:
        queryset = queryset.filter(wallet_type=wallet_type)
    return queryset


# -----------------------------
# Member endpoints
# -----------------------------
class TransactionListView(generics.ListAPIView):
    """
    GET /api/transactions/?page=&limit=&type=&walletType=
    Returns: { transactions: [...], pagination: {...}, summary: {...} }
    Summary always covers the caller's whole history, ignoring filters.
    """
    permission_classes = [IsAuthenticated]
    serializer_class = TransactionSerializer
    pagination_class = LedgerPagination

    def get_queryset(self):
        queryset = Transaction.objects.filter(user=self.request.user)
        return _filter_by_type(queryset, self.request.query_params)

    def list(self, request, *args, **kwargs):
        page = self.paginate_queryset(self.get_queryset())
        data = self.get_serializer(page, many=True).data
        return self.paginator.get_paginated_response(data, summary=self._summary(request.user))

    @staticmethod
    def _summary(user):
        summary = {
            'totalCredits': 0,
            'totalDebits': 0,
            'totalTopUps': 0,
            'totalPurchases': 0,
            'totalRedemptions': 0,
        }
        rows = (
            Transaction.objects.filter(user=user)
            .values('type')
            .annotate(total=Sum('amount'), count=Count('id'))
        )
        for row in rows:
            if row['type'] in Transaction.CREDIT_TYPES:
                summary['totalCredits'] += row['total'] or 0
            elif row['type'] in Transaction.DEBIT_TYPES:
                summary['totalDebits'] += row['total'] or 0

            if row['type'] == Transaction.TOP_UP:
                summary['totalTopUps'] = row['count']
            elif row['type'] == Transaction.PURCHASE:
                summary['totalPurchases'] = row['count']
            elif row['type'] == Transaction.REDEMPTION:
                summary['totalRedemptions'] = row['count']
        return summary


class WalletBalanceView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        """GET /api/wallet/balance/ → both balances, their sum, and a short view of each wallet (null when absent)."""
        funding = services.get_wallet(request.user, constants.FUNDING)
        redeem = services.get_wallet(request.user, constants.REDEEM)
        funding_balance = funding.balance if funding else 0
        redeem_balance = redeem.balance if redeem else 0

        return Response({
            'fundingBalance': funding_balance,
            'redeemBalance': redeem_balance,
            'totalCredits': funding_balance + redeem_balance,
            'fundingWallet': {
                'balance': funding.balance,
                'totalPurchased': funding.total_purchased,
                'totalSpent': funding.total_spent,
            } if funding else None,
            'redeemWallet': {
                'balance': redeem.balance,
                'limit': redeem.limit,
                'nextRedemption': redeem.next_redemption,
            } if redeem else None,
        })


# -----------------------------
# Admin: ledger
# -----------------------------
class AdminTransactionListView(generics.ListAPIView):
    """
    GET /api/admin/transactions/
    Filters: type, walletType, userId, search, startDate, endDate (YYYY-MM-DD, end day inclusive)
    Returns: { transactions, pagination, stats: { total, byType, byWalletType } }
    """
    permission_classes = [CanViewTransactions]
    serializer_class = AdminTransactionSerializer
    pagination_class = LedgerPagination

    def get_queryset(self):
        params = self.request.query_params
        queryset = _filter_by_type(Transaction.objects.select_related('user', 'created_by'), params)

        user_id = params.get('userId')
        if user_id:
            queryset = queryset.filter(user_id=user_id)

        start_date = self._date_param('startDate')
        end_date = self._date_param('endDate')
        if start_date:
            queryset = queryset.filter(created_at__date__gte=start_date)
        if end_date:
            queryset = queryset.filter(created_at__date__lte=end_date)

        search = params.get('search')
        if search:
            queryset = queryset.filter(
                Q(description__icontains=search)
                | Q(user__name__icontains=search)
                | Q(user__email__icontains=search)
                | Q(reference_type__icontains=search)
            )
        return queryset

    def _date_param(self, name):
        raw = self.request.query_params.get(name)
        if not raw:
            return None
        try:
            value = parse_date(raw)
        except ValueError:
            value = None
        if value is None:
            raise BadRequest(f"{name} must be a date (YYYY-MM-DD)")
        return value

    def list(self, request, *args, **kwargs):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        data = self.get_serializer(page, many=True).data

        def grouped(field):
            rows = Transaction.objects.values(field).annotate(count=Count('id'), totalAmount=Sum('amount'))
            return {
                row[field]: {'count': row['count'], 'totalAmount': row['totalAmount'] or 0}
                for row in rows
            }

        stats = {
            'total': self.paginator.page.paginator.count,
            'byType': grouped('type'),
            'byWalletType': grouped('wallet_type'),
        }
        return self.paginator.get_paginated_response(data, stats=stats)


class AdminTransactionDetailView(APIView):
    """
    GET    /api/admin/transactions/<id>/ → { transaction, relatedTransactions, walletInfo }
    DELETE /api/admin/transactions/<id>/ → super admin only; the wallet balance is left untouched.
    """

    def get_permissions(self):
        if self.request.method == 'DELETE':
            return [CanDeleteTransactions()]
        return [CanViewTransactions()]

    def _get_transaction(self, pk):
        try:
            return Transaction.objects.select_related('user', 'created_by').get(pk=pk)
        except Transaction.DoesNotExist:
            raise NotFound("Transaction not found")

    def get(self, request, pk):
        txn = self._get_transaction(pk)
        related = Transaction.objects.filter(user_id=txn.user_id).exclude(pk=txn.pk)[:5]
        funding = FundingWallet.objects.filter(user_id=txn.user_id).first()
        redeem = RedeemWallet.objects.filter(user_id=txn.user_id).first()

        return Response({
            'transaction': AdminTransactionSerializer(txn).data,
            'relatedTransactions': TransactionSerializer(related, many=True).data,
            'walletInfo': {
                'funding': FundingWalletSerializer(funding).data if funding else None,
                'redeem': RedeemWalletSerializer(redeem).data if redeem else None,
            },
        })

    def delete(self, request, pk):
        txn = self._get_transaction(pk)
        snapshot = {
            'id': txn.id,
            'type': txn.type,
            'amount': txn.amount,
            'description': txn.description,
        }
        txn.delete()
        logger.warning(
            "Transaction %s (%s %s on %s of user %s) deleted by %s; balance not reversed",
            snapshot['id'], txn.type, txn.amount, txn.wallet_type, txn.user_id, request.user.id,
        )
        return Response({
            'success': True,
            'message': 'Transaction deleted successfully',
            'deletedTransaction': snapshot,
        })


# -----------------------------
# Admin: credits
# -----------------------------
class AdminCreditAdjustView(APIView):
    permission_classes = [CanAdjustCredits]

    def post(self, request):
        """
        Body: { "userId": <id>, "walletType": "FUNDING"|"REDEEM", "newBalance"?: int, "newLimit"?: int, "reason"?: str }
        Header: Idempotency-Key (optional); a replay returns the first result without writing again.
        Sets absolute values; the ledger records the difference.
        """
        data = request.data
        user_id = data.get('userId')
        wallet_type = data.get('walletType')

        if not user_id:
            return Response({"error": "User ID is required"}, status=status.HTTP_400_BAD_REQUEST)
        if wallet_type not in constants.WALLET_TYPES:
            return Response(
                {"error": "Valid wallet type (FUNDING or REDEEM) is required"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        new_balance = None
        if data.get('newBalance') is not None:
            new_balance = _non_negative_int(data.get('newBalance'))
            if new_balance is None:
                return Response({"error": "Balance must be a non-negative number"}, status=status.HTTP_400_BAD_REQUEST)
            if new_balance > constants.MAX_WALLET_VALUE:
                return Response(
                    {"error": f"Balance cannot exceed {constants.MAX_WALLET_VALUE:,}"},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        new_limit = None
        if wallet_type == constants.REDEEM and data.get('newLimit') is not None:
            new_limit = _non_negative_int(data.get('newLimit'))
            if new_limit is None:
                return Response({"error": "Limit must be a non-negative number"}, status=status.HTTP_400_BAD_REQUEST)
            if new_limit > constants.MAX_WALLET_VALUE:
                return Response(
                    {"error": f"Limit cannot exceed {constants.MAX_WALLET_VALUE:,}"},
                    status=status.HTTP_400_BAD_REQUEST,
                )

        reason = optional_text(data, 'reason', "Reason", max_length=constants.MAX_REASON_LENGTH)
        adjustment, replayed = services.adjust_wallet(
            user_id=user_id,
            wallet_type=wallet_type,
            actor=request.user,
            new_balance=new_balance,
            new_limit=new_limit,
            reason=reason,
            idempotency_key=_idempotency_key(request),
        )
        user_name = adjustment.user.display_name
        return Response({
            "success": True,
            "message": f"Successfully adjusted {user_name}'s {adjustment.wallet_type.lower()} wallet",
            "data": services.adjustment_result(adjustment),
            "idempotent": replayed,
        }, status=status.HTTP_200_OK)


class AdminCreditAddView(APIView):
    permission_classes = [CanAdjustCredits]

    def post(self, request):
        """
        Body: { "userId": <id>, "amount": 1..10000, "reason"?: str }
        Grants purchased credits to the funding wallet and records one CREDIT row.
        """
        data = request.data
        user_id = data.get('userId')
        amount = data.get('amount')

        if not user_id:
            return Response({"error": "User ID is required"}, status=status.HTTP_400_BAD_REQUEST)
        amount = _non_negative_int(amount)
        if not amount:
            return Response({"error": "Valid positive amount is required"}, status=status.HTTP_400_BAD_REQUEST)
        if amount > constants.MAX_ADMIN_CREDIT_GRANT:
            return Response(
                {"error": f"Amount cannot exceed {constants.MAX_ADMIN_CREDIT_GRANT:,} credits per transaction"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        reason = optional_text(data, 'reason', "Reason", max_length=constants.MAX_REASON_LENGTH)
        _, ledger_row, replayed = services.add_credits(
            user_id=user_id,
            amount=amount,
            actor=request.user,
            reason=reason,
            idempotency_key=_idempotency_key(request),
        )
        user = ledger_row.user
        return Response({
            "success": True,
            "message": f"Successfully added {ledger_row.amount} credits to {user.display_name}'s funding wallet",
            "data": {
                "userId": user.id,
                "userName": user.display_name,
                "newBalance": ledger_row.balance_after,
                "creditsAdded": ledger_row.amount,
                "transactionId": ledger_row.id,
            },
            "idempotent": replayed,
        }, status=status.HTTP_200_OK)


class AdminCreditOverviewView(APIView):
    permission_classes = [CanViewWalletDetails]

    def get(self, request):
        """GET /api/admin/credits/overview/ → { stats, users } for the 100 newest members."""
        members = CustomUser.objects.filter(role=CustomUser.USER)
        users = members.select_related('funding_wallet', 'redeem_wallet').order_by('-created_at')[:100]

        rows = []
        for user in users:
            funding = getattr(user, 'funding_wallet', None)
            redeem = getattr(user, 'redeem_wallet', None)
            rows.append({
                'id': user.id,
                'name': user.name,
                'email': user.email,
                'phone': user.phone,
                'subscription': user.subscription,
                'fundingBalance': funding.balance if funding else 0,
                'redeemBalance': redeem.balance if redeem else 0,
            })

        with_funding = FundingWallet.objects.filter(balance__gt=0).count()
        with_redeem = RedeemWallet.objects.filter(balance__gt=0).count()
        stats = {
            'totalUsers': members.count(),
            'totalFundingCredits': FundingWallet.objects.aggregate(total=Sum('balance'))['total'] or 0,
            'totalRedeemCredits': RedeemWallet.objects.aggregate(total=Sum('balance'))['total'] or 0,
            'usersWithCredits': max(with_funding, with_redeem),
        }
        return Response({'stats': stats, 'users': rows})


class AdminUserCreditsView(APIView):
    permission_classes = [CanViewWalletDetails]

    def get(self, request, pk):
        """GET /api/admin/credits/user/<id>/ → { user (with wallets), transactions (10 latest credit-type rows) }"""
        try:
            user = CustomUser.objects.get(pk=pk)
        except CustomUser.DoesNotExist:
            return Response({"error": "User not found"}, status=status.HTTP_404_NOT_FOUND)

        funding = services.get_wallet(user, constants.FUNDING)
        redeem = services.get_wallet(user, constants.REDEEM)
        recent = Transaction.objects.filter(
            user=user,
            type__in=[Transaction.CREDIT, Transaction.BONUS, Transaction.PURCHASE],
        )[:10]

        return Response({
            'user': {
                'id': user.id,
                'name': user.name,
                'email': user.email,
                'subscription': user.subscription,
                'fundingWallet': FundingWalletSerializer(funding).data if funding else None,
                'redeemWallet': RedeemWalletSerializer(redeem).data if redeem else None,
            },
            'transactions': TransactionSerializer(recent, many=True).data,
        })
