"""
Wallet store and ledger writes.

Every balance change goes through ``apply_delta`` so it is issued as a single
conditional UPDATE against the row, and every writer obtains its wallet from
``upsert_wallet``. Callers own the surrounding ``transaction.atomic`` block.
"""
import logging
from datetime import timedelta

from django.contrib.auth import get_user_model
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from nikahFirst.exceptions import BadRequest, Conflict, NotFound
from . import constants
from .models import FundingWallet, RedeemWallet, Transaction, WalletAdjustment

logger = logging.getLogger(__name__)

WALLET_MODELS = {
    constants.FUNDING: FundingWallet,
    constants.REDEEM: RedeemWallet,
}


def wallet_model(wallet_type):
    try:
        return WALLET_MODELS[wallet_type]
    except KeyError:
        raise BadRequest("Valid wallet type (FUNDING or REDEEM) is required")


def get_wallet(user, wallet_type):
    """Read-only lookup; never creates a wallet."""
    return wallet_model(wallet_type).objects.filter(user=user).first()


def upsert_wallet(user, wallet_type, defaults=None, lock=True):
    """
    Fetch the user's wallet, creating it with ``defaults`` when missing.

    Returns ``(wallet, created)``. With ``lock`` the existing row is taken
    with SELECT ... FOR UPDATE, so it must run inside a transaction. A
    concurrent creator losing the one-to-one race falls back to the row the
    winner inserted.
    """
    model = wallet_model(wallet_type)
    manager = model.objects.select_for_update() if lock else model.objects

    wallet = manager.filter(user=user).first()
    if wallet is not None:
        return wallet, False

    try:
        with transaction.atomic():
            wallet = model.objects.create(user=user, **(defaults or {}))
    except IntegrityError:
        return manager.get(user=user), False
    return wallet, True


def apply_delta(wallet, delta, **extra_increments):
    """
    balance = balance + delta, plus any extra counters (e.g. total_purchased).

    A negative delta only applies while the stored balance covers it; the
    database row is the source of truth, not the in-memory instance.
    """
    model = type(wallet)
    updates = {field: F(field) + value for field, value in extra_increments.items() if value}
    if delta:
        updates['balance'] = F('balance') + delta
    if not updates:
        return wallet

    queryset = model.objects.filter(pk=wallet.pk)
    if delta < 0:
        queryset = queryset.filter(balance__gte=-delta)

    updates['updated_at'] = timezone.now()
    if not queryset.update(**updates):
        raise BadRequest("Insufficient balance")

    wallet.refresh_from_db()
    return wallet


def set_funding_balance(user, new_balance):
    """Returns ``(wallet, previous_balance)`` after moving the balance to ``new_balance``."""
    wallet, _ = upsert_wallet(user, constants.FUNDING, defaults={'balance': 0, 'total_purchased': 0, 'total_spent': 0})
    previous = wallet.balance
    apply_delta(wallet, new_balance - previous)
    return wallet, previous


def set_redeem_balance(user, new_balance=None, new_limit=None):
    """
    Returns ``(wallet, previous_balance, previous_limit, created)``.
    A wallet created here starts at limit ``DEFAULT_REDEEM_LIMIT`` unless a limit is supplied.
    """
    wallet, created = upsert_wallet(
        user,
        constants.REDEEM,
        defaults={
            'balance': 0,
            'limit': new_limit if new_limit is not None else constants.DEFAULT_REDEEM_LIMIT,
            'last_reset_at': timezone.now(),
        },
    )
    previous_balance = wallet.balance
    previous_limit = 0 if created else wallet.limit

    if new_balance is not None:
        apply_delta(wallet, new_balance - previous_balance)
    if new_limit is not None and wallet.limit != new_limit:
        wallet.limit = new_limit
        wallet.save(update_fields=['limit', 'updated_at'])
    return wallet, previous_balance, previous_limit, created


# -----------------------------
# Ledger
# -----------------------------
def record_transaction(user, type, wallet_type, amount, description='', actor=None,
                       payment_method=None, reference_type=None, reference_id=None,
                       idempotency_key=None, balance_after=None):
    return Transaction.objects.create(
        user=user,
        type=type,
        wallet_type=wallet_type,
        amount=amount,
        description=description[:Transaction.DESCRIPTION_MAX_LENGTH],
        payment_method=payment_method,
        reference_type=reference_type,
        reference_id=str(reference_id) if reference_id is not None else None,
        created_by=actor,
        idempotency_key=idempotency_key,
        balance_after=balance_after,
    )


def record_adjustment(user, wallet_type, previous_balance, new_balance, reason, actor):
    """One CREDIT/DEBIT row for the signed difference, or nothing when it is zero."""
    delta = new_balance - previous_balance
    if delta == 0:
        return None

    actor_name = actor.display_name if actor else 'system'
    if reason:
        description = f"Admin adjustment: {reason} (by {actor_name})"
    else:
        description = f"Admin balance adjustment (by {actor_name})"

    return record_transaction(
        user=user,
        type=Transaction.CREDIT if delta > 0 else Transaction.DEBIT,
        wallet_type=wallet_type,
        amount=abs(delta),
        description=description,
        actor=actor,
    )


# -----------------------------
# Admin operations
# -----------------------------
def adjustment_result(adjustment):
    data = {
        'userId': adjustment.user_id,
        'userName': adjustment.user.display_name,
        'walletType': adjustment.wallet_type,
        'previousBalance': adjustment.previous_balance,
        'newBalance': adjustment.new_balance,
    }
    if adjustment.wallet_type == constants.REDEEM:
        data['previousLimit'] = adjustment.previous_limit
        data['newLimit'] = adjustment.new_limit
    return data


def _find_replay(model, idempotency_key, actor):
    if not idempotency_key:
        return None
    existing = model.objects.filter(idempotency_key=idempotency_key).first()
    if existing is not None and existing.created_by_id != actor.id:
        raise Conflict("Idempotency key already used by another user")
    return existing


def _get_user(user_id):
    User = get_user_model()
    try:
        return User.objects.get(pk=user_id)
    except (User.DoesNotExist, ValueError, TypeError):
        raise NotFound("User not found")


def _replay_after_race(model, idempotency_key, actor):
    """
    A concurrent first use of the same key won the unique index. Answer from
    its row, or return None when the IntegrityError had another cause.
    """
    existing = _find_replay(model, idempotency_key, actor)
    if existing is not None:
        logger.info("Key %s was claimed concurrently; replaying %s %s", idempotency_key, model.__name__, existing.id)
    return existing


@transaction.atomic
def adjust_wallet(user_id, wallet_type, actor, new_balance=None, new_limit=None, reason=None,
                  idempotency_key=None):
    """
    Set a wallet's balance (and, for REDEEM, its limit) to absolute values.

    The difference is computed against the locked row and applied as an
    increment, so a concurrent writer between read and write cannot be lost.
    Returns ``(adjustment, replayed)``.
    """
    existing = _find_replay(WalletAdjustment, idempotency_key, actor)
    if existing is not None:
        logger.info("Replayed adjustment %s for key %s", existing.id, idempotency_key)
        return existing, True

    user = _get_user(user_id)
    try:
        with transaction.atomic():
            adjustment = _apply_adjustment(user, wallet_type, actor, new_balance, new_limit, reason, idempotency_key)
    except IntegrityError:
        existing = _replay_after_race(WalletAdjustment, idempotency_key, actor)
        if existing is None:
            raise
        return existing, True
    return adjustment, False


def _apply_adjustment(user, wallet_type, actor, new_balance, new_limit, reason, idempotency_key):
    previous_limit = new_limit_value = None

    if wallet_type == constants.FUNDING:
        if new_balance is None:
            wallet = get_wallet(user, constants.FUNDING)
            previous_balance = wallet.balance if wallet else 0
            resulting_balance = previous_balance
        else:
            wallet, previous_balance = set_funding_balance(user, new_balance)
            resulting_balance = wallet.balance
    elif wallet_type == constants.REDEEM:
        wallet, previous_balance, previous_limit, _ = set_redeem_balance(user, new_balance, new_limit)
        resulting_balance = wallet.balance
        new_limit_value = wallet.limit
    else:
        raise BadRequest("Valid wallet type (FUNDING or REDEEM) is required")

    ledger_row = record_adjustment(user, wallet_type, previous_balance, resulting_balance, reason, actor)

    adjustment = WalletAdjustment.objects.create(
        user=user,
        wallet_type=wallet_type,
        previous_balance=previous_balance,
        new_balance=resulting_balance,
        previous_limit=previous_limit,
        new_limit=new_limit_value,
        reason=reason or '',
        transaction=ledger_row,
        created_by=actor,
        idempotency_key=idempotency_key or None,
    )
    logger.info(
        "Adjusted %s wallet of user %s: %s -> %s (delta %s) by %s",
        wallet_type, user.id, previous_balance, resulting_balance,
        resulting_balance - previous_balance, actor.id,
    )
    return adjustment


@transaction.atomic
def add_credits(user_id, amount, actor, reason=None, idempotency_key=None):
    """
    Grant ``amount`` purchased credits. Returns ``(wallet, ledger_row, replayed)``.
    ``ledger_row.balance_after`` holds the funding balance this grant produced,
    which is what a replay reports.
    """
    existing = _find_replay(Transaction, idempotency_key, actor)
    if existing is not None:
        return get_wallet(existing.user, constants.FUNDING), existing, True

    user = _get_user(user_id)
    try:
        with transaction.atomic():
            wallet, ledger_row = _grant_credits(user, amount, actor, reason, idempotency_key)
    except IntegrityError:
        existing = _replay_after_race(Transaction, idempotency_key, actor)
        if existing is None:
            raise
        return get_wallet(existing.user, constants.FUNDING), existing, True
    return wallet, ledger_row, False


def _grant_credits(user, amount, actor, reason, idempotency_key):
    wallet, _ = upsert_wallet(user, constants.FUNDING, defaults={'balance': 0, 'total_purchased': 0, 'total_spent': 0})
    apply_delta(wallet, amount, total_purchased=amount)

    actor_name = actor.display_name
    if reason:
        description = f"Admin credit: {reason} (by {actor_name})"
    else:
        description = f"Admin credit addition (by {actor_name})"

    ledger_row = record_transaction(
        user=user,
        type=Transaction.CREDIT,
        wallet_type=constants.FUNDING,
        amount=amount,
        description=description,
        actor=actor,
        idempotency_key=idempotency_key or None,
        balance_after=wallet.balance,
    )
    logger.info("Added %s credits to funding wallet of user %s by %s", amount, user.id, actor.id)
    return wallet, ledger_row


def credit_funding_wallet(user, amount, **ledger_fields):
    """
    Top-up style credit: balance and total_purchased both grow by ``amount``.
    Must run inside the caller's transaction. Returns ``(wallet, ledger_row)``.
    """
    wallet, _ = upsert_wallet(user, constants.FUNDING, defaults={'balance': 0, 'total_purchased': 0, 'total_spent': 0})
    apply_delta(wallet, amount, total_purchased=amount)
    ledger_row = record_transaction(
        user=user, wallet_type=constants.FUNDING, amount=amount, balance_after=wallet.balance, **ledger_fields,
    )
    return wallet, ledger_row


def seed_free_tier_wallets(user, initial_credits=None, credit_limit=None):
    """Wallets for a freshly registered account: empty funding, free-tier redeem."""
    now = timezone.now()
    FundingWallet.objects.create(user=user, balance=0, total_purchased=0, total_spent=0)
    RedeemWallet.objects.create(
        user=user,
        balance=constants.FREE_TIER_INITIAL_CREDITS if initial_credits is None else initial_credits,
        limit=constants.FREE_TIER_CREDIT_LIMIT if credit_limit is None else credit_limit,
        redeem_cycle_days=constants.FREE_TIER_REDEMPTION_DAYS,
        last_reset_at=now,
        next_redemption=now + timedelta(days=constants.FREE_TIER_REDEMPTION_DAYS),
    )
