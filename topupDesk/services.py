"""
Manual top-up workflow: a member files a PENDING request for a credit
package, pays off-platform, and a supervisor approves or rejects it.
Only approval touches the funding wallet and the ledger.
"""
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.utils import timezone

from nikahFirst.exceptions import BadRequest, Conflict, NotFound, Unauthorized
from walletDesk.models import Transaction
from walletDesk.services import credit_funding_wallet
from .models import CreditPackage, PaymentSetting, TopUpRequest

logger = logging.getLogger(__name__)

REQUEST_PREFIX = getattr(settings, 'TOPUP_REQUEST_PREFIX', 'TXN')
REQUEST_NUMBER_ATTEMPTS = 5
REFERENCE_TYPE = 'TOP_UP_REQUEST'


def next_request_number(now=None):
    """Highest number issued this year plus one, e.g. TXN-2025-00042."""
    now = timezone.localtime(now or timezone.now())
    prefix = f"{REQUEST_PREFIX}-{now.year}-"
    last = (
        TopUpRequest.objects
        .filter(request_number__startswith=prefix)
        .order_by('-request_number')
        .values_list('request_number', flat=True)
        .first()
    )
    next_number = int(last.rsplit('-', 1)[1]) + 1 if last else 1
    return f"{prefix}{next_number:05d}"


def create_request(user, package_id, payment_method):
    """
    Returns ``(topup_request, payment_setting)``.

    The pending-request check and the insert run under a lock on the user
    row, so two submissions from one member cannot both pass the check. A
    request-number collision with another member is retried.
    """
    if not package_id or not payment_method:
        raise BadRequest("Package and payment method are required")

    try:
        package = CreditPackage.objects.get(pk=package_id)
    except (CreditPackage.DoesNotExist, ValueError, TypeError):
        raise BadRequest("Invalid package selected")
    if not package.is_active:
        raise BadRequest("This package is no longer available")

    method = str(payment_method).strip().upper()
    payment_setting = PaymentSetting.objects.filter(method=method, is_active=True).first()
    if payment_setting is None:
        raise BadRequest("Invalid or inactive payment method")

    User = get_user_model()
    for attempt in range(1, REQUEST_NUMBER_ATTEMPTS + 1):
        try:
            with transaction.atomic():
                User.objects.select_for_update().get(pk=user.pk)
                if TopUpRequest.objects.filter(user=user, status=TopUpRequest.PENDING).exists():
                    raise BadRequest(
                        "You already have a pending top-up request. "
                        "Please wait for it to be processed or cancel it."
                    )
                topup = TopUpRequest.objects.create(
                    request_number=next_request_number(),
                    user=user,
                    package=package,
                    credits=package.credits,
                    bonus_credits=package.bonus_credits,
                    amount=package.price,
                    payment_method=method,
                    status=TopUpRequest.PENDING,
                )
        except IntegrityError:
            logger.warning("Request number collision for user %s (attempt %s)", user.id, attempt)
            continue

        logger.info("Top-up request %s created by user %s for package %s", topup.request_number, user.id, package.slug)
        return topup, payment_setting

    raise Conflict("Could not allocate a request number, please try again")


def _get_for_update(request_id):
    try:
        return TopUpRequest.objects.select_for_update().get(pk=request_id)
    except (TopUpRequest.DoesNotExist, ValueError, TypeError):
        raise NotFound("Top-up request not found")


def _ensure_pending(topup):
    if topup.status != TopUpRequest.PENDING:
        logger.warning("Refused to process %s: already %s", topup.request_number, topup.status)
        raise BadRequest("This request has already been processed")


@transaction.atomic
def approve_request(request_id, actor, admin_notes=None):
    """Returns ``(topup_request, funding_wallet)``."""
    topup = _get_for_update(request_id)
    _ensure_pending(topup)

    topup.status = TopUpRequest.COMPLETED
    topup.processed_by = actor
    topup.processed_at = timezone.now()
    topup.admin_notes = admin_notes or None
    topup.save(update_fields=['status', 'processed_by', 'processed_at', 'admin_notes', 'updated_at'])

    total = topup.total_credits
    package_name = topup.package.name if topup.package else 'Credit Package'
    wallet, _ = credit_funding_wallet(
        topup.user,
        total,
        type=Transaction.TOP_UP,
        description=f"Top-up: {package_name} ({total} credits)",
        payment_method=topup.payment_method,
        reference_type=REFERENCE_TYPE,
        reference_id=topup.id,
        actor=actor,
    )
    logger.info("Approved %s: +%s funding credits for user %s by %s", topup.request_number, total, topup.user_id, actor.id)
    return topup, wallet


@transaction.atomic
def reject_request(request_id, actor, rejection_reason, admin_notes=None):
    topup = _get_for_update(request_id)
    _ensure_pending(topup)
    if not rejection_reason:
        raise BadRequest("Rejection reason is required")

    topup.status = TopUpRequest.REJECTED
    topup.processed_by = actor
    topup.processed_at = timezone.now()
    topup.admin_notes = admin_notes or None
    topup.rejection_reason = rejection_reason
    topup.save(update_fields=[
        'status', 'processed_by', 'processed_at', 'admin_notes', 'rejection_reason', 'updated_at',
    ])
    logger.info("Rejected %s by %s", topup.request_number, actor.id)
    return topup


@transaction.atomic
def cancel_request(request_id, user):
    topup = _get_for_update(request_id)
    if topup.user_id != user.id:
        raise Unauthorized()
    if topup.status != TopUpRequest.PENDING:
        logger.warning("Refused to cancel %s: already %s", topup.request_number, topup.status)
        raise BadRequest("Only pending requests can be cancelled")

    topup.status = TopUpRequest.CANCELLED
    topup.save(update_fields=['status', 'updated_at'])
    logger.info("Top-up request %s cancelled by its owner", topup.request_number)
    return topup
