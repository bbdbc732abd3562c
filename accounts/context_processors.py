# accounts/context_processors.py
from .session import get_user


def session_user(request):
    """Пользователь бэкенда для шапки (меню пользователя)."""
    return {"session_user": get_user(request)}
