# ==============================================================================
# REPOSITORIES LAYER - data access
# ==============================================================================
# Everything the services read lives behind this layer. Today it is all
# in memory; a database backend only has to honour the interfaces.
#
# STRUCTURE:
# ├── interfaces.py          → Protocols (contracts for other backends)
# ├── demo_data.py           → Seed accounts, catalog and stock
# ├── catalog_repository.py  → Product catalog (find_by_id / search)
# ├── account_repository.py  → Login registry
# ├── session_store.py       → Single-key session stores (memory / Flask)
# ├── audit_repository.py    → Audit log (in memory)
# └── sales_journal.py       → Completed sales (dashboards)
# ==============================================================================

from .interfaces import (
    ICatalog,
    IAccountRepository,
    ISessionStore,
    IAuditRepository,
    ISalesJournal,
)

from .catalog_repository import CatalogRepository
from .account_repository import AccountRepository
from .session_store import MemorySessionStore, FlaskSessionStore
from .audit_repository import AuditRepository
from .sales_journal import SalesJournal

__all__ = [
    # Interfaces
    'ICatalog',
    'IAccountRepository',
    'ISessionStore',
    'IAuditRepository',
    'ISalesJournal',

    # Implementations
    'CatalogRepository',
    'AccountRepository',
    'MemorySessionStore',
    'FlaskSessionStore',
    'AuditRepository',
    'SalesJournal',
]
