# ==============================================================================
# DEPENDENCY CONTAINER - service wiring
# ==============================================================================
# Single place to obtain repositories and services. It makes it easy to:
#   - Inject dependencies into the Flask routes
#   - Test (a container can be built around fake repositories)
#   - Swap a repository without touching the services
#
# SESSION-SCOPED STATE:
# The stock ledger is shared by the whole shop. Each login gets its own
# CartLedger, keyed by the session's cart_key (a per-login token), created
# on first use and dropped at logout. Carts idle for longer than
# CART_IDLE_SECONDS are discarded, which covers sessions that simply expire.
# ==============================================================================

import threading
import time
from typing import Dict, Iterable, Optional

from kasir_pos.config import CART_IDLE_SECONDS
from kasir_pos.models import StockRecord
from kasir_pos.repositories import (
    AccountRepository,
    AuditRepository,
    CatalogRepository,
    FlaskSessionStore,
    SalesJournal,
)
from kasir_pos.repositories.demo_data import demo_stock_records
from kasir_pos.repositories.interfaces import (
    IAccountRepository,
    ICatalog,
    ISalesJournal,
    ISessionStore,
)
from kasir_pos.services import (
    AuditService,
    CartLedger,
    SessionGuard,
    StatsService,
    StockLedger,
)


class AppContainer:
    """
    Application dependency container.

    Singleton by default so every request sees the same ledgers.

    Usage:
        container = AppContainer.get_instance()
        stock = container.stock_ledger
        cart = container.cart_for(session.cart_key)
    """

    _instance: Optional['AppContainer'] = None

    def __init__(
        self,
        catalog_repo: ICatalog = None,
        account_repo: IAccountRepository = None,
        session_store: ISessionStore = None,
        stock_records: Iterable[StockRecord] = None,
        sales_journal: ISalesJournal = None,
        cart_idle_seconds: float = CART_IDLE_SECONDS
    ):
        """
        Args:
            catalog_repo: Product catalog (demo catalog by default)
            account_repo: Account registry (demo accounts by default)
            session_store: Session store (Flask session by default)
            stock_records: Initial stock (demo stock by default)
            sales_journal: Completed sales (in memory by default)
            cart_idle_seconds: Idle time after which a cart is discarded
        """
        self._catalog_repo = catalog_repo
        self._account_repo = account_repo
        self._session_store = session_store
        self._stock_records = stock_records
        self._sales_journal = sales_journal
        self.cart_idle_seconds = cart_idle_seconds

        self._audit_repo: Optional[AuditRepository] = None
        self._audit_service: Optional[AuditService] = None
        self._session_guard: Optional[SessionGuard] = None
        self._stock_ledger: Optional[StockLedger] = None
        self._stats_service: Optional[StatsService] = None

        # {cart_key: CartLedger} and {cart_key: last use (monotonic seconds)}
        self._carts: Dict[str, CartLedger] = {}
        self._cart_used: Dict[str, float] = {}
        self._carts_lock = threading.Lock()

    # =========================================================================
    # REPOSITORIES
    # =========================================================================

    @property
    def catalog_repo(self) -> ICatalog:
        if self._catalog_repo is None:
            self._catalog_repo = CatalogRepository()
        return self._catalog_repo

    @property
    def account_repo(self) -> IAccountRepository:
        if self._account_repo is None:
            self._account_repo = AccountRepository()
        return self._account_repo

    @property
    def session_store(self) -> ISessionStore:
        if self._session_store is None:
            self._session_store = FlaskSessionStore()
        return self._session_store

    @property
    def audit_repo(self) -> AuditRepository:
        if self._audit_repo is None:
            self._audit_repo = AuditRepository()
        return self._audit_repo

    @property
    def sales_journal(self) -> ISalesJournal:
        if self._sales_journal is None:
            self._sales_journal = SalesJournal()
        return self._sales_journal

    # =========================================================================
    # SERVICES
    # =========================================================================

    @property
    def audit_service(self) -> AuditService:
        if self._audit_service is None:
            self._audit_service = AuditService(self.audit_repo)
        return self._audit_service

    @property
    def session_guard(self) -> SessionGuard:
        if self._session_guard is None:
            self._session_guard = SessionGuard(
                self.account_repo,
                self.session_store,
                self.audit_service
            )
        return self._session_guard

    @property
    def stock_ledger(self) -> StockLedger:
        if self._stock_ledger is None:
            records = self._stock_records
            if records is None:
                records = demo_stock_records()
            self._stock_ledger = StockLedger(records, self.audit_service)
        return self._stock_ledger

    @property
    def stats_service(self) -> StatsService:
        if self._stats_service is None:
            self._stats_service = StatsService(self.sales_journal)
        return self._stats_service

    # =========================================================================
    # CARTS (one per login)
    # =========================================================================

    def cart_for(self, cart_key: str) -> CartLedger:
        """
        Cart of one login, created on first use.

        Args:
            cart_key: Session.cart_key of the logged-in session

        Returns:
            That login's CartLedger
        """
        now = time.monotonic()
        with self._carts_lock:
            self._prune_locked(now)
            cart = self._carts.get(cart_key)
            if cart is None:
                cart = CartLedger(
                    self.catalog_repo.find_by_id,
                    self.audit_service,
                    self.sales_journal
                )
                self._carts[cart_key] = cart
            self._cart_used[cart_key] = now
            return cart

    def drop_cart(self, cart_key: str) -> None:
        """Discards a login's cart (logout). Unknown keys are ignored."""
        with self._carts_lock:
            self._carts.pop(cart_key, None)
            self._cart_used.pop(cart_key, None)

    def has_cart(self, cart_key: str) -> bool:
        with self._carts_lock:
            return cart_key in self._carts

    def prune_carts(self, now: float = None) -> int:
        """
        Discards carts idle for longer than cart_idle_seconds.

        Args:
            now: time.monotonic() reading to compare against (default: now)

        Returns:
            Number of carts discarded
        """
        with self._carts_lock:
            return self._prune_locked(time.monotonic() if now is None else now)

    def _prune_locked(self, now: float) -> int:
        expired = [
            key for key, used in self._cart_used.items()
            if now - used > self.cart_idle_seconds
        ]
        for key in expired:
            self._carts.pop(key, None)
            self._cart_used.pop(key, None)
        return len(expired)

    # =========================================================================
    # SINGLETON
    # =========================================================================

    @classmethod
    def get_instance(cls) -> 'AppContainer':
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @classmethod
    def reset_instance(cls) -> None:
        """Drops the singleton (used by tests)."""
        cls._instance = None


def get_container() -> AppContainer:
    """Global container."""
    return AppContainer.get_instance()
