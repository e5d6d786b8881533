# ==============================================================================
# ACCOUNT REPOSITORY
# ==============================================================================
# Fixed registry of accounts that may log in: {email: Account}.
# Keys are stored lower-cased so lookups are case-insensitive.
# ==============================================================================

from typing import Dict, Iterable, Optional

from kasir_pos.models import Account
from kasir_pos.repositories.demo_data import DEMO_ACCOUNTS


class AccountRepository:
    """Read-only account registry."""

    def __init__(self, accounts: Iterable[Account] = DEMO_ACCOUNTS):
        self._accounts: Dict[str, Account] = {
            self.normalize_identifier(a.email): a for a in accounts
        }

    @staticmethod
    def normalize_identifier(identifier: str) -> str:
        return (identifier or '').strip().lower()

    def get_account(self, identifier: str) -> Optional[Account]:
        """
        Gets an account by login identifier.

        Args:
            identifier: Email in any casing

        Returns:
            The account or None
        """
        key = self.normalize_identifier(identifier)
        if not key:
            return None
        return self._accounts.get(key)
