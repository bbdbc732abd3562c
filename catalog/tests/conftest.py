# catalog/tests/conftest.py
import pytest
from django.core.cache import cache

from catalog.tests.fakes import FakeBackend, sign_in_client


@pytest.fixture(autouse=True)
def _clear_cache():
    """Кэш поставщиков не должен протекать между тестами."""
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def backend(monkeypatch) -> FakeBackend:
    """Подменяем клиент бэкенда во вьюхах на FakeBackend."""
    fake = FakeBackend()
    monkeypatch.setattr("catalog.views.client_for_request", lambda request: fake)
    monkeypatch.setattr("catalog.api_views.client_for_request", lambda request: fake)
    return fake


@pytest.fixture
def auth_client(client, backend):
    """Клиент с пользователем бэкенда в сессии."""
    return sign_in_client(client)
