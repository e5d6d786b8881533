import pytest

from kasir_pos import config
from kasir_pos.app_container import AppContainer
from kasir_pos.main import create_app
from kasir_pos.performance_logger import reset_stats
from kasir_pos.repositories import AuditRepository, CatalogRepository
from kasir_pos.services import AuditService


@pytest.fixture(autouse=True)
def isolated_logs(tmp_path, monkeypatch):
    """Profiling logs go to a temporary directory; stats start empty."""
    monkeypatch.setattr(config, 'LOGS_DIR', str(tmp_path / 'logs'))
    reset_stats()
    AppContainer.reset_instance()
    yield
    reset_stats()
    AppContainer.reset_instance()


@pytest.fixture
def catalog():
    return CatalogRepository()


@pytest.fixture
def audit_service():
    return AuditService(AuditRepository())


@pytest.fixture
def container():
    return AppContainer()


@pytest.fixture
def app(container):
    return create_app(container, {'TESTING': True})


@pytest.fixture
def client(app):
    with app.test_client() as c:
        yield c


def login(client, email, password):
    return client.post('/login', json={'email': email, 'password': password})


@pytest.fixture
def cashier_client(client):
    r = login(client, 'cashier@pos.com', 'cashier123')
    assert r.status_code == 200
    return client


@pytest.fixture
def owner_client(client):
    r = login(client, 'owner@pos.com', 'owner123')
    assert r.status_code == 200
    return client
