import pytest
from werkzeug.security import generate_password_hash

from kasir_pos.exceptions import AuthFailure
from kasir_pos.models import Account, Session, UserRole
from kasir_pos.repositories import AccountRepository, MemorySessionStore
from kasir_pos.services import SessionGuard


@pytest.fixture
def store():
    return MemorySessionStore()


@pytest.fixture
def guard(store, audit_service):
    return SessionGuard(AccountRepository(), store, audit_service)


def test_authenticate_returns_session_with_role(guard):
    session = guard.authenticate('owner@pos.com', 'owner123')
    assert session.role == UserRole.OWNER
    assert session.user_id == '2'
    assert session.name == 'Jane Owner'
    assert session.dashboard == 'owner-dashboard'


def test_identifier_is_case_insensitive(guard):
    session = guard.authenticate('  Cashier@POS.com ', 'cashier123')
    assert session.role == UserRole.CASHIER
    assert session.dashboard == 'cashier-dashboard'


def test_session_never_contains_secret(guard):
    session = guard.authenticate('cashier@pos.com', 'cashier123')
    assert not hasattr(session, 'secret')
    assert 'cashier123' not in repr(session)
    assert 'password' not in session.to_dict()
    assert 'secret' not in session.to_dict()


@pytest.mark.parametrize('secret', ['Cashier123', 'cashier123 ', 'owner123', 'cashier'])
def test_secret_must_match_exactly(guard, secret):
    with pytest.raises(AuthFailure):
        guard.authenticate('cashier@pos.com', secret)


def test_unknown_user_and_wrong_secret_are_indistinguishable(guard):
    with pytest.raises(AuthFailure) as unknown:
        guard.authenticate('ghost@pos.com', 'cashier123')
    with pytest.raises(AuthFailure) as wrong:
        guard.authenticate('cashier@pos.com', 'nope')

    assert type(unknown.value) is type(wrong.value)
    assert str(unknown.value) == str(wrong.value)
    assert vars(unknown.value) == vars(wrong.value)


@pytest.mark.parametrize('identifier, secret', [('', 'x'), ('cashier@pos.com', ''), (None, None)])
def test_missing_credentials_fail(guard, identifier, secret):
    with pytest.raises(AuthFailure):
        guard.authenticate(identifier, secret)


def test_hashed_secret_is_verified(store):
    accounts = AccountRepository([
        Account(
            user_id='9', name='Hashed', role=UserRole.OWNER,
            email='hash@pos.com', secret=generate_password_hash('s3cret'),
        )
    ])
    guard = SessionGuard(accounts, store)

    assert guard.authenticate('hash@pos.com', 's3cret').user_id == '9'
    with pytest.raises(AuthFailure):
        guard.authenticate('hash@pos.com', 'wrong')


def test_authenticate_does_not_persist(guard, store):
    guard.authenticate('cashier@pos.com', 'cashier123')
    assert store.get('user') is None


def test_login_persists_and_restores(guard, store):
    session = guard.login('cashier@pos.com', 'cashier123')

    assert store.get('user') == session.to_dict()
    assert guard.current_session() == session


def test_failed_login_creates_no_session(guard, store):
    with pytest.raises(AuthFailure):
        guard.login('cashier@pos.com', 'bad')
    assert store.get('user') is None
    assert guard.current_session() is None


def test_end_session_is_idempotent(guard, audit_service):
    guard.login('owner@pos.com', 'owner123')
    guard.end_session()
    guard.end_session()

    assert guard.current_session() is None
    messages = [entry.message for entry in audit_service.get_logs(log_type='SESSION')]
    assert messages == ['Jane Owner logged out', 'Jane Owner logged in as owner']


def test_end_session_without_login(guard):
    guard.end_session()
    assert guard.current_session() is None


@pytest.mark.parametrize('stored', [
    {'foo': 1},
    {'id': '1', 'name': 'X', 'role': 'admin'},
    {'id': '1', 'role': 'owner'},
])
def test_malformed_stored_session_is_discarded(guard, store, stored):
    store.set('user', stored)
    assert guard.current_session() is None
    assert store.get('user') is None


def test_session_round_trip_keeps_optional_fields():
    session = Session(user_id='7', name='Sari', role=UserRole.CASHIER, phone='0812')
    data = session.to_dict()
    assert 'email' not in data
    assert Session.from_dict(data) == session


def test_each_login_gets_its_own_token(guard):
    first = guard.login('cashier@pos.com', 'cashier123')
    second = guard.login('cashier@pos.com', 'cashier123')

    assert first.token and second.token
    assert first.token != second.token
    assert first.cart_key != second.cart_key
    assert guard.current_session().token == second.token


def test_authenticate_alone_issues_no_token(guard):
    session = guard.authenticate('cashier@pos.com', 'cashier123')
    assert session.token is None
    assert session.cart_key == '1'
    assert 'token' not in session.to_dict()
