from django.conf import settings

# Free tier seeding for new accounts
FREE_TIER_INITIAL_CREDITS = getattr(settings, 'FREE_TIER_INITIAL_CREDITS', 3)
FREE_TIER_CREDIT_LIMIT = getattr(settings, 'FREE_TIER_CREDIT_LIMIT', 5)
FREE_TIER_REDEMPTION_DAYS = getattr(settings, 'FREE_TIER_REDEMPTION_DAYS', 15)

# Redeem wallet limit used when an admin write creates the wallet
DEFAULT_REDEEM_LIMIT = getattr(settings, 'DEFAULT_REDEEM_LIMIT', 50)

MAX_ADMIN_CREDIT_GRANT = getattr(settings, 'MAX_ADMIN_CREDIT_GRANT', 10000)

FUNDING = 'FUNDING'
REDEEM = 'REDEEM'
WALLET_TYPES = (FUNDING, REDEEM)

TRANSACTIONS_PAGE_SIZE = 20
TRANSACTIONS_MAX_PAGE_SIZE = 100

# Upper bound of the PositiveIntegerField balance and limit columns
MAX_WALLET_VALUE = 2147483647
MAX_REASON_LENGTH = 255
