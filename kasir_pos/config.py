# ==============================================================================
# CONFIGURATION
# ==============================================================================
# Every tunable value lives here. Values come from environment variables
# with development defaults, so the same code runs on a laptop and behind
# gunicorn.
#
#   export POS_SECRET_KEY="a_long_random_value"
#   export POS_PRODUCTION_MODE=1
# ==============================================================================

import os
from fractions import Fraction


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


BASE = os.path.dirname(os.path.abspath(__file__))

# ═══════════════════════════════════════════════════════════════════════════════
# PRODUCTION MODE
# ═══════════════════════════════════════════════════════════════════════════════
# True  = missing secrets are reported at startup
# False = development defaults are accepted silently
PRODUCTION_MODE = _env_flag('POS_PRODUCTION_MODE', False)

# ═══════════════════════════════════════════════════════════════════════════════
# SESSIONS
# ═══════════════════════════════════════════════════════════════════════════════
_DEFAULT_SECRET = "kasir_pos_dev_secret_key_change_in_production"
SECRET_KEY = os.environ.get("POS_SECRET_KEY")

if PRODUCTION_MODE and not SECRET_KEY:
    print("[WARNING] POS_PRODUCTION_MODE is on but POS_SECRET_KEY is not set")
    print("[WARNING] Define the environment variable before serving real traffic")

SECRET_KEY = SECRET_KEY or _DEFAULT_SECRET

# Key under which the logged-in session is stored (single-key contract)
SESSION_KEY = 'user'

FLASK_SETTINGS = {
    'SECRET_KEY': SECRET_KEY,
    'SESSION_COOKIE_HTTPONLY': True,
    'SESSION_COOKIE_SECURE': False,      # plain HTTP on the shop LAN
    'SESSION_COOKIE_SAMESITE': 'Lax',
    'PERMANENT_SESSION_LIFETIME': 86400,  # 24 hours
}

# ═══════════════════════════════════════════════════════════════════════════════
# PROFILING / LOG FILES
# ═══════════════════════════════════════════════════════════════════════════════
ENABLE_PROFILING = _env_flag('POS_ENABLE_PROFILING', True)
LOGS_DIR = os.environ.get('POS_LOGS_DIR') or os.path.join(BASE, 'logs')
THRESHOLD_WARNING = _env_int('POS_SLOW_WARNING_MS', 300)
THRESHOLD_CRITICAL = _env_int('POS_SLOW_CRITICAL_MS', 700)

# ═══════════════════════════════════════════════════════════════════════════════
# DOMAIN CONSTANTS
# ═══════════════════════════════════════════════════════════════════════════════
# Upper bound of the Medium band, as a multiple of min_stock (inclusive)
MEDIUM_STOCK_FACTOR = Fraction(3, 2)

# Category value that means "no filter" in stock searches
ALL_CATEGORIES = 'All'

# Audit entries kept in memory (newest first)
AUDIT_MAX_LOGS = 10000

CURRENCY_SYMBOL = 'Rp'

# Daily sales target shown on the cashier dashboard (whole Rupiah)
DAILY_SALES_TARGET = _env_int('POS_DAILY_TARGET', 3000000)

# Products listed in the owner's top-products ranking
TOP_PRODUCTS_LIMIT = 3

# Carts untouched for longer than this are discarded (sessions that expire
# without /logout). Matches the session cookie lifetime.
CART_IDLE_SECONDS = _env_int('POS_CART_IDLE_SECONDS', FLASK_SETTINGS['PERMANENT_SESSION_LIFETIME'])
