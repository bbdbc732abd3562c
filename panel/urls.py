# panel/urls.py
# ─────────────────────────────────────────────────────────────────────────────
# Путь и имя файла: panel/urls.py
# Назначение: корневые URL-маршруты проекта + безопасное подключение debug_toolbar
# ─────────────────────────────────────────────────────────────────────────────

from django.urls import path, include       # функции для описания маршрутов
from django.conf import settings            # доступ к settings для проверки DEBUG

urlpatterns = [
    path("accounts/", include("accounts.urls")),                            # вход/выход
    path("", include(("catalog.urls", "catalog"), namespace="catalog")),   # поставщики и продукты
]

# Подключаем URL-ы тулбара только если включён DEBUG и тулбар активирован
if settings.DEBUG and getattr(settings, "ENABLE_DEBUG_TOOLBAR", False):
    import debug_toolbar  # импортируем пакет только при необходимости
    urlpatterns = [path("__debug__/", include(debug_toolbar.urls))] + urlpatterns

# Назначаем кастомный обработчик 403 (дублируем настройку как в settings)
handler403 = "catalog.views.custom_permission_denied"
