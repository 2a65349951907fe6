from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from subscriptionDesk.models import SubscriptionPlan
from topupDesk.models import CreditPackage, PaymentSetting


PLANS = [
    {
        'slug': 'FREE', 'name': 'Free', 'description': 'Basic access to the platform with limited features',
        'free_credits': 3, 'wallet_limit': 5, 'redeem_credits': 1, 'redeem_cycle_days': 15, 'profile_limit': 1,
        'price_monthly': Decimal('0'), 'price_yearly': Decimal('0'), 'yearly_discount_pct': 0,
        'sort_order': 0, 'is_default': True, 'color': 'gray',
        'features': ['1 Active Profile', '3 Free Credits', 'Basic Search', 'Limited Messaging'],
    },
    {
        'slug': 'STANDARD', 'name': 'Standard', 'description': 'More credits for active members',
        'free_credits': 5, 'wallet_limit': 10, 'redeem_credits': 2, 'redeem_cycle_days': 20, 'profile_limit': 1,
        'price_monthly': Decimal('5'), 'price_yearly': Decimal('52.20'), 'yearly_discount_pct': 13,
        'sort_order': 1, 'is_default': False, 'color': 'blue',
        'features': ['1 Active Profile', '5 Free Credits', 'Enhanced Search', 'Priority Support'],
    },
    {
        'slug': 'SILVER', 'name': 'Silver', 'description': 'Manage several profiles with advanced filters',
        'free_credits': 15, 'wallet_limit': 15, 'redeem_credits': 5, 'redeem_cycle_days': 30, 'profile_limit': 3,
        'price_monthly': Decimal('9'), 'price_yearly': Decimal('93.96'), 'yearly_discount_pct': 13,
        'sort_order': 2, 'is_default': False, 'color': 'slate',
        'features': ['3 Active Profiles', '15 Free Credits', 'Advanced Filters', 'Profile Boost'],
    },
    {
        'slug': 'GOLD', 'name': 'Gold', 'description': 'Verified badge and profile insights',
        'free_credits': 25, 'wallet_limit': 25, 'redeem_credits': 5, 'redeem_cycle_days': 30, 'profile_limit': 5,
        'price_monthly': Decimal('15'), 'price_yearly': Decimal('160.20'), 'yearly_discount_pct': 11,
        'sort_order': 3, 'is_default': False, 'color': 'yellow',
        'features': ['5 Active Profiles', '25 Free Credits', 'Verified Badge', 'Who Viewed Me'],
    },
    {
        'slug': 'PLATINUM', 'name': 'Platinum', 'description': 'Top search priority with dedicated support',
        'free_credits': 50, 'wallet_limit': 50, 'redeem_credits': 5, 'redeem_cycle_days': 30, 'profile_limit': 10,
        'price_monthly': Decimal('25'), 'price_yearly': Decimal('267.00'), 'yearly_discount_pct': 11,
        'sort_order': 4, 'is_default': False, 'color': 'purple',
        'features': ['10 Active Profiles', '50 Free Credits', 'Top Search Priority', 'Dedicated Support'],
    },
    {
        'slug': 'PRO', 'name': 'Pro', 'description': 'Ultimate plan for consultants and matchmaking professionals',
        'free_credits': 50, 'wallet_limit': 50, 'redeem_credits': 5, 'redeem_cycle_days': 30, 'profile_limit': 50,
        'price_monthly': Decimal('99'), 'price_yearly': Decimal('1057.32'), 'yearly_discount_pct': 11,
        'sort_order': 5, 'is_default': False, 'color': 'emerald',
        'features': ['50 Active Profiles', 'Unlimited Credits', 'White Glove Service', 'API Access'],
    },
]

PACKAGES = [
    {'slug': 'PACK_5', 'name': 'Starter Pack', 'credits': 5, 'price': Decimal('15'), 'savings_percent': None, 'is_popular': False, 'sort_order': 0},
    {'slug': 'PACK_7', 'name': 'Basic Pack', 'credits': 7, 'price': Decimal('17'), 'savings_percent': 19, 'is_popular': False, 'sort_order': 1},
    {'slug': 'PACK_11', 'name': 'Value Pack', 'credits': 11, 'price': Decimal('20'), 'savings_percent': 39, 'is_popular': True, 'sort_order': 2},
    {'slug': 'PACK_17', 'name': 'Premium Pack', 'credits': 17, 'price': Decimal('25'), 'savings_percent': 51, 'is_popular': False, 'sort_order': 3},
    {'slug': 'PACK_23', 'name': 'Ultimate Pack', 'credits': 23, 'price': Decimal('30'), 'savings_percent': 57, 'is_popular': False, 'sort_order': 4},
]

PAYMENT_SETTINGS = [
    {
        'method': 'BANK_TRANSFER', 'label': 'Bank Transfer',
        'instructions': (
            "Please transfer the exact amount to our bank account. Include your request number "
            "in the transfer reference/description.\n\nProcessing time: 1-2 business days after payment confirmation."
        ),
        'bank_name': 'HBL (Habib Bank Limited)', 'account_title': 'NikahFirst Services',
        'account_number': '1234567890123', 'iban': 'PK00HABB0001234567890123', 'mobile_number': None, 'sort_order': 0,
    },
    {
        'method': 'JAZZCASH', 'label': 'JazzCash',
        'instructions': (
            "Send payment to our JazzCash account. Include your request number in the reference.\n\n"
            "Processing time: Same day after payment confirmation."
        ),
        'bank_name': None, 'account_title': 'NikahFirst Services',
        'account_number': None, 'iban': None, 'mobile_number': '03001234567', 'sort_order': 1,
    },
    {
        'method': 'EASYPAISA', 'label': 'EasyPaisa',
        'instructions': (
            "Send payment to our EasyPaisa account. Include your request number in the reference.\n\n"
            "Processing time: Same day after payment confirmation."
        ),
        'bank_name': None, 'account_title': 'NikahFirst Services',
        'account_number': None, 'iban': None, 'mobile_number': '03451234567', 'sort_order': 2,
    },
]


class Command(BaseCommand):
    help = "Create or update the default subscription plans, credit packages and payment settings."

    def handle(self, *args, **options):
        self.stdout.write("Seeding catalog…")
        with transaction.atomic():
            for plan in PLANS:
                defaults = {k: v for k, v in plan.items() if k != 'slug'}
                obj, created = SubscriptionPlan.objects.update_or_create(slug=plan['slug'], defaults=defaults)
                self.stdout.write(f"  {'created' if created else 'updated'} plan {obj.slug}")

            for package in PACKAGES:
                defaults = {k: v for k, v in package.items() if k != 'slug'}
                obj, created = CreditPackage.objects.update_or_create(slug=package['slug'], defaults=defaults)
                self.stdout.write(f"  {'created' if created else 'updated'} package {obj.slug} ({obj.credits} credits)")

            for setting in PAYMENT_SETTINGS:
                defaults = {k: v for k, v in setting.items() if k != 'method'}
                obj, created = PaymentSetting.objects.update_or_create(method=setting['method'], defaults=defaults)
                self.stdout.write(f"  {'created' if created else 'updated'} payment method {obj.method}")

        self.stdout.write(self.style.SUCCESS("Catalog seeding complete."))
