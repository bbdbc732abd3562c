# catalog/permissions.py
# ─────────────────────────────────────────────────────────────────────────────
# Путь и имя файла: catalog/permissions.py
# Назначение: Кастомные пермишены DRF
# ─────────────────────────────────────────────────────────────────────────────

from rest_framework.permissions import BasePermission  # базовый класс пермишена

from accounts.session import is_signed_in  # «вошёл» = в сессии есть userId бэкенда


class HasBackendSession(BasePermission):
    """Пускает только тех, кто вошёл через бэкенд (cookie-сессия с userId и токеном).

    Пользователей Django здесь нет, поэтому стандартный IsAuthenticated не подходит.
    """
    message = "Требуется вход."

    # метод has_permission — проверяет доступ на уровне вью/запроса
    def has_permission(self, request, view):
        return is_signed_in(request)
