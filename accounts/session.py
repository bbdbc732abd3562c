# accounts/session.py
# ─────────────────────────────────────────────────────────────────────────────
# Путь и имя файла: accounts/session.py
# Назначение: работа с сессией пользователя бэкенда (userId / user / token)
#             + миксин «нужен вход» для class-based views
# ─────────────────────────────────────────────────────────────────────────────

from typing import Any, Dict, Optional  # подсказки типов
from urllib.parse import urlencode      # сборка ?next=...

from django.conf import settings            # LOGIN_URL
from django.shortcuts import redirect       # редирект на логин
from django.urls import reverse             # разворачиваем имя маршрута в URL

# Ключи сессии — те же имена, что и у бэкенда
SESSION_USER_ID = "userId"
SESSION_USER = "user"
SESSION_TOKEN = "token"


def is_signed_in(request) -> bool:
    return SESSION_USER_ID in request.session


def get_token(request) -> Optional[str]:
    return request.session.get(SESSION_TOKEN)


def get_user(request) -> Optional[Dict[str, Any]]:
    return request.session.get(SESSION_USER)


def sign_in(request, user: Dict[str, Any], token: str) -> None:
    """Кладём в сессию пользователя и токен после успешного /auth/login."""
    request.session.cycle_key()                     # новый ключ сессии после входа
    request.session[SESSION_USER_ID] = user["id"]
    request.session[SESSION_USER] = {
        "id": user["id"],
        "name": user.get("name") or "",
        "email": user.get("email") or "",
    }
    request.session[SESSION_TOKEN] = token


def sign_out(request) -> None:
    request.session.flush()  # полностью очищаем cookie-сессию


def login_redirect(request):
    """Редирект на страницу входа с возвратом на текущий URL."""
    url = reverse(settings.LOGIN_URL)
    return redirect(f"{url}?{urlencode({'next': request.get_full_path()})}")


class BackendLoginRequiredMixin:
    """Аналог LoginRequiredMixin, но «вошедшим» считается тот, у кого в сессии есть userId."""

    def dispatch(self, request, *args, **kwargs):
        if not is_signed_in(request):
            return login_redirect(request)
        return super().dispatch(request, *args, **kwargs)
