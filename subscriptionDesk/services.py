import logging
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from accountDesk.models import CustomUser
from nikahFirst.exceptions import BadRequest
from walletDesk import constants as wallet_constants
from walletDesk.services import apply_delta, upsert_wallet
from .models import SubscriptionPlan

logger = logging.getLogger(__name__)

TIER_FIELDS = [
    'subscription', 'subscription_plan',
    'tier_free_credits', 'tier_wallet_limit', 'tier_redeem_credits',
    'tier_redeem_cycle_days', 'tier_profile_limit',
    'tier_price_monthly', 'tier_price_yearly',
]


def get_plan(slug):
    try:
        return SubscriptionPlan.objects.get(slug=slug)
    except SubscriptionPlan.DoesNotExist:
        raise BadRequest(f"Invalid subscription plan: {slug}")


def free_plan():
    return SubscriptionPlan.objects.filter(slug=CustomUser.FREE_PLAN).first()


def apply_tier_snapshot(user, plan):
    """Copy the plan's tier values onto ``user`` (unsaved)."""
    user.subscription = plan.slug
    user.subscription_plan = plan
    user.tier_free_credits = plan.free_credits
    user.tier_wallet_limit = plan.wallet_limit
    user.tier_redeem_credits = plan.redeem_credits
    user.tier_redeem_cycle_days = plan.redeem_cycle_days
    user.tier_profile_limit = plan.profile_limit
    user.tier_price_monthly = plan.price_monthly
    user.tier_price_yearly = plan.price_yearly
    return user


@transaction.atomic
def assign_plan(user, slug, actor=None):
    """
    Move ``user`` onto the plan identified by ``slug``.

    The plan's free credits are added on top of the current redeem balance;
    limit, allowance and cycle are overwritten and the next redemption is
    rescheduled from now. No ledger row is written for the grant.
    """
    plan = get_plan(slug)

    apply_tier_snapshot(user, plan)
    user.save(update_fields=TIER_FIELDS + ['updated_at'])

    now = timezone.now()
    next_redemption = now + timedelta(days=plan.redeem_cycle_days)
    wallet, created = upsert_wallet(
        user,
        wallet_constants.REDEEM,
        defaults={
            'balance': plan.free_credits,
            'limit': plan.wallet_limit,
            'redeem_credits': plan.redeem_credits,
            'redeem_cycle_days': plan.redeem_cycle_days,
            'next_redemption': next_redemption,
            'last_reset_at': now,
        },
    )
    if not created:
        apply_delta(wallet, plan.free_credits)
        wallet.limit = plan.wallet_limit
        wallet.redeem_credits = plan.redeem_credits
        wallet.redeem_cycle_days = plan.redeem_cycle_days
        wallet.next_redemption = next_redemption
        wallet.save(update_fields=['limit', 'redeem_credits', 'redeem_cycle_days', 'next_redemption', 'updated_at'])

    logger.info(
        "User %s moved to plan %s: redeem wallet +%s (limit %s) by %s",
        user.id, plan.slug, plan.free_credits, plan.wallet_limit, getattr(actor, 'id', None),
    )
    return wallet
