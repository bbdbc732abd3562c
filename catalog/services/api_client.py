# catalog/services/api_client.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import requests
from django.conf import settings
from requests.adapters import HTTPAdapter
from rest_framework.exceptions import ValidationError
from urllib3.util.retry import Retry

from catalog.serializers import (
    LoginResponseSerializer,
    ProductSerializer,
    ProviderSerializer,
    parse_meta,
    parse_record,
    parse_records,
)

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "User-Agent": "ProvPanel/1.0",
    "Accept": "application/json",
}


# ---------- ОШИБКИ ----------
class BackendError(Exception):
    """Любая неудача при обращении к бэкенду (сеть, 4xx/5xx, битый JSON)."""

    def __init__(self, message: str, *, status: Optional[int] = None,
                 errors: Optional[Dict[str, List[str]]] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail  # текст "message" из тела ответа, если бэкенд его прислал
        self.status = status
        self.errors = errors or {}


class BackendUnauthorized(BackendError):
    """401 — токен истёк или отозван."""


class BackendValidationError(BackendError):
    """422 с телом {message, errors: {field: [..]}}."""


@dataclass
class ResultPage:
    """Страница списка: записи + meta пагинации."""
    items: List[Dict[str, Any]] = field(default_factory=list)
    meta: Dict[str, Any] = field(default_factory=lambda: parse_meta({}))

    @property
    def current_page(self) -> int:
        return self.meta["current_page"]

    @property
    def last_page(self) -> int:
        return self.meta["last_page"]


def _build_session() -> requests.Session:
    s = requests.Session()
    # повторяем только идемпотентные запросы на временных ошибках шлюза
    retry = Retry(
        total=2,
        backoff_factor=0.3,
        status_forcelist=[502, 503, 504],
        allowed_methods=["GET"],
    )
    adapter = HTTPAdapter(max_retries=retry)
    s.mount("https://", adapter)
    s.mount("http://", adapter)
    s.headers.update(DEFAULT_HEADERS)
    return s


def _unwrap(payload: Any) -> Any:
    """Бэкенд иногда заворачивает одиночную запись в {"data": {...}}."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    return payload


class BackendClient:
    """Клиент REST-бэкенда поставщиков/продуктов."""

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None,
                 timeout: Optional[Tuple[float, float]] = None,
                 session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.BACKEND_API_URL).rstrip("/")
        self.token = token
        self.timeout = timeout or (3.0, float(settings.BACKEND_API_TIMEOUT))
        self.session = session or _build_session()

    # --- транспорт ---
    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, *, params: Optional[Dict[str, Any]] = None,
                 json: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            r = self.session.request(method, url, params=params, json=json,
                                     headers=self._headers(), timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise BackendError(f"Сервер недоступен: {exc}") from exc

        logger.debug("%s %s -> %s", method, path, r.status_code)

        if r.status_code == 204 or not r.content:
            body: Any = {}
        else:
            try:
                body = r.json()
            except ValueError:
                body = {}

        if r.ok:
            return body

        detail = body.get("message") if isinstance(body, dict) else None
        errors = body.get("errors") if isinstance(body, dict) else None
        if not isinstance(errors, dict):
            errors = {}
        message = detail or f"HTTP {r.status_code}"

        if r.status_code == 401:
            raise BackendUnauthorized(message, status=401, detail=detail)
        if r.status_code == 422 or errors:
            raise BackendValidationError(message, status=r.status_code, errors=errors, detail=detail)
        logger.warning("%s %s -> %s: %s", method, path, r.status_code, message)
        raise BackendError(message, status=r.status_code, detail=detail)

    def _page(self, path: str, serializer_class, page: int, limit: int) -> ResultPage:
        body = self._request("GET", path, params={"page": page, "limit": limit})
        if not isinstance(body, dict):
            raise BackendError(f"Неожиданный ответ {path}")
        return ResultPage(
            items=parse_records(serializer_class, body.get("data") or []),
            meta=parse_meta(body.get("meta")),
        )

    def _record(self, serializer_class, body: Any) -> Dict[str, Any]:
        try:
            return parse_record(serializer_class, _unwrap(body))
        except ValidationError as exc:
            raise BackendError(f"Неожиданный формат записи: {exc}") from exc

    # --- авторизация ---
    def login(self, email: str, password: str) -> Dict[str, Any]:
        """POST /auth/login -> {"message", "token", "user": {id, name, email}}."""
        body = self._request("POST", "/auth/login", json={"email": email, "password": password})
        ser = LoginResponseSerializer(data=body)
        if not ser.is_valid():
            raise BackendError("Login failed")
        return dict(ser.validated_data)

    # --- поставщики ---
    def list_providers(self, page: int = 1, limit: int = 10) -> ResultPage:
        return self._page("/providers", ProviderSerializer, page, limit)

    def search_providers(self, query: str = "", limit: int = 20) -> List[Dict[str, Any]]:
        body = self._request("GET", "/providers/search", params={"q": query, "limit": limit})
        rows = body.get("data") if isinstance(body, dict) else body
        return parse_records(ProviderSerializer, rows or [])

    def get_provider(self, provider_id: int) -> Dict[str, Any]:
        return self._record(ProviderSerializer, self._request("GET", f"/providers/{provider_id}"))

    def create_provider(self, data: Dict[str, Any]) -> Any:
        return self._request("POST", "/providers", json=data)

    def update_provider(self, provider_id: int, data: Dict[str, Any]) -> Any:
        return self._request("PUT", f"/providers/{provider_id}", json=data)

    def delete_provider(self, provider_id: int) -> None:
        self._request("DELETE", f"/providers/{provider_id}")

    # --- продукты ---
    def list_products(self, page: int = 1, limit: int = 10) -> ResultPage:
        return self._page("/products", ProductSerializer, page, limit)

    def get_product(self, product_id: int) -> Dict[str, Any]:
        return self._record(ProductSerializer, self._request("GET", f"/products/{product_id}"))

    def create_product(self, data: Dict[str, Any]) -> Any:
        return self._request("POST", "/products", json=data)

    def update_product(self, product_id: int, data: Dict[str, Any]) -> Any:
        return self._request("PUT", f"/products/{product_id}", json=data)

    def delete_product(self, product_id: int) -> None:
        self._request("DELETE", f"/products/{product_id}")


def client_for_request(request) -> BackendClient:
    """Клиент с токеном из сессии текущего запроса."""
    from accounts.session import get_token  # локальный импорт: accounts зависит от catalog

    return BackendClient(token=get_token(request))
