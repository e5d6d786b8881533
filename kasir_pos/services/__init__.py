# ==============================================================================
# SERVICES LAYER - business logic
# ==============================================================================
# All business rules live here.
#
# PRINCIPLES:
# 1. Services hold the rules and validations
# 2. Routes only call services and translate results to JSON
# 3. Services do not know how repositories store data
#
# STRUCTURE:
# ├── session_guard.py → Credentials, session persistence, logout
# ├── cart_ledger.py   → Sale in progress, payment, change, checkout
# ├── stock_ledger.py  → Boxes / pieces, stock health, search
# ├── audit_service.py → Activity log
# └── stats_service.py → Dashboard sales figures
# ==============================================================================

from kasir_pos.services.audit_service import AuditService
from kasir_pos.services.session_guard import SessionGuard
from kasir_pos.services.cart_ledger import CartLedger, parse_amount
from kasir_pos.services.stock_ledger import StockLedger, classify_record
from kasir_pos.services.stats_service import StatsService

__all__ = [
    'AuditService',
    'SessionGuard',
    'CartLedger',
    'parse_amount',
    'StockLedger',
    'classify_record',
    'StatsService',
]
