# catalog/serializers.py
# ─────────────────────────────────────────────────────────────────────────────
# Путь и имя файла: catalog/serializers.py
# Назначение: DRF-сериализаторы для ответов внешнего REST-бэкенда
#             (поставщики, продукты, мета-данные пагинации, пользователь)
# ─────────────────────────────────────────────────────────────────────────────

import logging
from typing import Any, Dict, Iterable, List  # типы для подсказок

from rest_framework import serializers  # базовые сериализаторы DRF

logger = logging.getLogger(__name__)


class ProviderSerializer(serializers.Serializer):
    """Поставщик в том виде, в каком его отдаёт бэкенд."""
    id = serializers.IntegerField()                                                   # первичный ключ
    name = serializers.CharField()                                                    # название
    email = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    created_at = serializers.CharField(required=False, allow_null=True, default=None)  # ISO-строка как есть
    updated_at = serializers.CharField(required=False, allow_null=True, default=None)


class ProductSerializer(serializers.Serializer):
    """Продукт: is_active приходит числом 0/1 — отдаём наружу bool."""
    id = serializers.IntegerField()
    name = serializers.CharField()
    slug = serializers.CharField(required=False, allow_blank=True, default="")
    price = serializers.DecimalField(max_digits=None, decimal_places=None, required=False, default=0)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True, default="")
    is_active = serializers.BooleanField(required=False, default=False)               # 1/0 -> True/False
    provider_id = serializers.IntegerField(required=False, allow_null=True, default=None)
    created_at = serializers.CharField(required=False, allow_null=True, default=None)
    updated_at = serializers.CharField(required=False, allow_null=True, default=None)


class PageMetaSerializer(serializers.Serializer):
    """Блок meta из постраничного ответа. Отсутствующие поля — безопасные дефолты."""
    current_page = serializers.IntegerField(required=False, default=1, min_value=1)
    last_page = serializers.IntegerField(required=False, default=1, min_value=1)
    total = serializers.IntegerField(required=False, default=0, min_value=0)
    per_page = serializers.IntegerField(required=False, default=10, min_value=1)
    path = serializers.CharField(required=False, allow_blank=True, default="")
    # from/to бэкенд отдаёт null на пустой странице
    from_item = serializers.IntegerField(required=False, allow_null=True, default=None)
    to_item = serializers.IntegerField(required=False, allow_null=True, default=None)


class LoginUserSerializer(serializers.Serializer):
    """Пользователь из ответа /auth/login — кладём в сессию только нужное."""
    id = serializers.IntegerField()
    name = serializers.CharField(required=False, allow_blank=True, default="")
    email = serializers.CharField(required=False, allow_blank=True, default="")


class LoginResponseSerializer(serializers.Serializer):
    message = serializers.CharField(required=False, allow_blank=True, default="")
    token = serializers.CharField()
    user = LoginUserSerializer()


def _plain(data: Dict[str, Any]) -> Dict[str, Any]:
    # validated_data — OrderedDict, наружу отдаём обычный dict
    return dict(data)


def parse_record(serializer_class, payload: Any) -> Dict[str, Any]:
    """Разобрать одну запись; невалидная запись -> ValidationError."""
    ser = serializer_class(data=payload)
    ser.is_valid(raise_exception=True)
    return _plain(ser.validated_data)


def parse_records(serializer_class, rows: Iterable[Any]) -> List[Dict[str, Any]]:
    """Разобрать список записей; битые строки пропускаем с предупреждением."""
    out: List[Dict[str, Any]] = []
    for row in rows or []:
        ser = serializer_class(data=row)
        if ser.is_valid():
            out.append(_plain(ser.validated_data))
        else:
            logger.warning("Skipping malformed %s row: %s", serializer_class.__name__, ser.errors)
    return out


def parse_meta(payload: Any) -> Dict[str, Any]:
    """Разобрать meta; если бэкенд прислал мусор — meta первой и единственной страницы."""
    raw = dict(payload) if isinstance(payload, dict) else {}
    # "from"/"to" — ключевые слова Python, в сериализаторе они from_item/to_item
    raw["from_item"] = raw.pop("from", None)
    raw["to_item"] = raw.pop("to", None)
    raw.pop("links", None)
    ser = PageMetaSerializer(data=raw)
    if ser.is_valid():
        data = _plain(ser.validated_data)
    else:
        logger.warning("Malformed pagination meta: %s", ser.errors)
        data = {"current_page": 1, "last_page": 1, "total": 0, "per_page": 10,
                "path": "", "from_item": None, "to_item": None}
    # номер текущей страницы не может быть больше последней
    data["current_page"] = min(data["current_page"], data["last_page"])
    return data
