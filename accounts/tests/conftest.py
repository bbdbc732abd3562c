# accounts/tests/conftest.py
import pytest

from catalog.tests.fakes import FakeBackend, sign_in_client


@pytest.fixture
def backend(monkeypatch) -> FakeBackend:
    """LoginView создаёт BackendClient() сам — подменяем класс."""
    fake = FakeBackend()
    monkeypatch.setattr("accounts.views.BackendClient", lambda *a, **kw: fake)
    return fake


@pytest.fixture
def auth_client(client):
    return sign_in_client(client)
