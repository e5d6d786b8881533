# ==============================================================================
# SESSION GUARD
# ==============================================================================
# Checks credentials against the account registry and keeps the logged-in
# session in a single-key store.
#
# SECURITY NOTE:
# Demo accounts carry plain secrets compared by exact equality. Stored
# secrets that are werkzeug hashes (pbkdf2:/scrypt:) are verified with
# check_password_hash instead. Unknown user and wrong secret fail the same
# way, so the response never reveals which accounts exist.
# ==============================================================================

import uuid
from dataclasses import replace
from typing import Optional

from werkzeug.security import check_password_hash

from kasir_pos.config import SESSION_KEY
from kasir_pos.exceptions import AuthFailure
from kasir_pos.models import Account, Session
from kasir_pos.performance_logger import profile_function
from kasir_pos.repositories.interfaces import IAccountRepository, ISessionStore
from kasir_pos.services.audit_service import AuditService

HASH_PREFIXES = ('pbkdf2:', 'scrypt:')


class SessionGuard:
    """
    Authentication and session lifecycle.

    Responsibilities:
    - Validate credentials (authenticate)
    - Persist / restore / remove the session (login, current_session, end_session)
    """

    def __init__(
        self,
        account_repo: IAccountRepository,
        session_store: ISessionStore,
        audit_service: AuditService = None,
        session_key: str = SESSION_KEY
    ):
        """
        Args:
            account_repo: Account registry
            session_store: Key-value store for the session
            audit_service: Audit service (optional)
            session_key: Key used in the store
        """
        self.account_repo = account_repo
        self.session_store = session_store
        self.audit_service = audit_service
        self.session_key = session_key

    @staticmethod
    def _secret_matches(account: Account, secret: str) -> bool:
        stored = account.secret or ''
        if stored.startswith(HASH_PREFIXES):
            return check_password_hash(stored, secret)
        return stored == secret

    @profile_function(name='SessionGuard.authenticate')
    def authenticate(self, identifier: str, secret: str) -> Session:
        """
        Validates credentials.

        Args:
            identifier: Email, any casing
            secret: Password, compared exactly

        Returns:
            Session with the account's role (no secret)

        Raises:
            AuthFailure: unknown identifier, wrong secret or missing input
        """
        if not identifier or not secret:
            raise AuthFailure()

        account = self.account_repo.get_account(identifier)
        if account is None or not self._secret_matches(account, secret):
            raise AuthFailure()

        return Session(
            user_id=account.user_id,
            name=account.name,
            role=account.role,
            email=account.email,
            phone=account.phone,
        )

    def login(self, identifier: str, secret: str) -> Session:
        """
        Authenticates and stores the session.

        Each login gets its own random token, so two terminals signed in
        with the same account own separate carts.

        Raises:
            AuthFailure: see authenticate()
        """
        user_session = replace(
            self.authenticate(identifier, secret),
            token=uuid.uuid4().hex
        )
        self.session_store.set(self.session_key, user_session.to_dict())

        if self.audit_service:
            self.audit_service.log_login(
                user_session.user_id, user_session.name, user_session.role.value
            )
        return user_session

    def current_session(self) -> Optional[Session]:
        """
        Restores the stored session.

        Returns:
            The session, or None when logged out. A malformed stored value
            is removed.
        """
        data = self.session_store.get(self.session_key)
        if not data:
            return None
        try:
            return Session.from_dict(data)
        except (KeyError, ValueError, TypeError, AttributeError):
            self.session_store.remove(self.session_key)
            return None

    def end_session(self, user_session: Session = None) -> None:
        """
        Logs out. Calling it when already logged out does nothing.

        Args:
            user_session: Session being closed (defaults to the stored one)
        """
        user_session = user_session or self.current_session()
        had_session = self.session_store.get(self.session_key) is not None
        self.session_store.remove(self.session_key)

        if had_session and user_session and self.audit_service:
            self.audit_service.log_logout(user_session.user_id, user_session.name)
