# catalog/services/provider_catalog.py
import hashlib
import logging
from typing import Dict, List

from django.core.cache import cache

from .api_client import BackendClient, BackendError, BackendUnauthorized

logger = logging.getLogger(__name__)

CHOICES_CACHE_KEY = "provider_choices_{token}_{query}"
CHOICES_TTL_SEC = 60  # список поставщиков меняется редко, минуты хватает
CHOICES_LIMIT = 20


def _cache_key(token: str, query: str) -> str:
    # токен в ключ кладём только хэшем
    digest = hashlib.sha256((token or "").encode("utf-8")).hexdigest()[:16]
    q = hashlib.sha256(query.encode("utf-8")).hexdigest()[:16]
    return CHOICES_CACHE_KEY.format(token=digest, query=q)


def get_provider_choices(client: BackendClient, query: str = "") -> List[Dict]:
    """Поставщики для выпадашки формы продукта. С кэшем; при ошибке бэкенда — пустой список."""
    query = (query or "").strip()
    key = _cache_key(client.token or "", query)
    cached = cache.get(key)
    if cached is not None:
        return cached

    try:
        rows = client.search_providers(query, limit=CHOICES_LIMIT)
    except BackendUnauthorized:
        raise
    except BackendError as e:
        logger.warning("Provider search failed for %r: %s", query, e)
        return []

    cache.set(key, rows, CHOICES_TTL_SEC)
    return rows


def ensure_choice(choices: List[Dict], provider: Dict) -> List[Dict]:
    """Добавить выбранного поставщика, если поиск его не вернул (форма редактирования)."""
    if provider and all(p["id"] != provider["id"] for p in choices):
        return [provider] + list(choices)
    return choices

