# accounts/urls.py
# ─────────────────────────────────────────────────────────────────────────────
# Путь и имя файла: accounts/urls.py
# Назначение: URL-маршруты входа/выхода (сессия бэкенда)
# ─────────────────────────────────────────────────────────────────────────────

from django.urls import path  # импорт path для маршрутов
from .views import LoginView, LogoutView  # вход и выход

app_name = "accounts"

urlpatterns = [
    path("login/", LoginView.as_view(), name="login"),     # логин
    path("logout/", LogoutView.as_view(), name="logout"),  # логаут (только POST)
]
