# panel/settings.py
# ─────────────────────────────────────────────────────────────────────────────
# Путь и имя файла: panel/settings.py
# Назначение: глобальные настройки проекта Django + адрес REST-бэкенда,
#             cookie-сессии, логирование и опциональный django-debug-toolbar
# ─────────────────────────────────────────────────────────────────────────────

from pathlib import Path  # стандартный модуль для работы с путями (Path-объект)
import os                 # модуль для чтения переменных окружения и работы с ОС
from dotenv import load_dotenv  # загрузка значений из .env

# Назначаем кастомный обработчик 403 на функцию из приложения catalog
handler403 = "catalog.views.custom_permission_denied"

# BASE_DIR — корень проекта. Используем для формирования других путей.
BASE_DIR = Path(__file__).resolve().parent.parent

# ── Быстрая стартовая секция (важное для безопасности) ───────────────────────

# Подгружаем файл окружения .env, расположенный в корне проекта
load_dotenv(BASE_DIR / ".env")

# Флаг режима разработки. В продакшене должен быть False (PANEL_DEBUG=0).
DEBUG = os.getenv("PANEL_DEBUG", "1") == "1"

# Секретный ключ берём из переменной окружения PANEL_SECRET_KEY
SECRET_KEY = os.getenv("PANEL_SECRET_KEY")

# В проде без ключа не стартуем; в Dev подставляем заведомо небезопасный
if not SECRET_KEY:
    if not DEBUG:
        raise ValueError("❌ SECRET_KEY не найден в .env! Установите PANEL_SECRET_KEY.")
    SECRET_KEY = "dev-insecure-panel-key"

# Список разрешённых хостов через запятую
ALLOWED_HOSTS: list[str] = [h.strip() for h in os.getenv("PANEL_ALLOWED_HOSTS", "").split(",") if h.strip()]
if DEBUG and not ALLOWED_HOSTS:
    ALLOWED_HOSTS = ["localhost", "127.0.0.1", "[::1]", "testserver"]

# ── REST-бэкенд поставщиков/продуктов ───────────────────────────────────────

BACKEND_API_URL = os.getenv("BACKEND_API_URL", "http://localhost:8000/api")  # базовый URL API
BACKEND_API_TIMEOUT = float(os.getenv("BACKEND_API_TIMEOUT", "10"))            # таймаут чтения, сек

PANEL_PAGE_SIZE = int(os.getenv("PANEL_PAGE_SIZE", "10"))                # limit для списков
PANEL_PAGINATION_SLOTS = int(os.getenv("PANEL_PAGINATION_SLOTS", "7"))   # слотов в контроле пагинации

# ── Приложения проекта ───────────────────────────────────────────────────────

INSTALLED_APPS = [
    "django.contrib.auth",             # нужен DRF (AnonymousUser), своих пользователей не храним
    "django.contrib.contenttypes",     # зависимость auth
    "django.contrib.sessions",         # сессии
    "django.contrib.messages",         # сообщения (flash-сообщения)
    "django.contrib.staticfiles",      # работа со статикой
    "rest_framework",                  # DRF — сериализаторы и API
    "accounts",                        # вход/выход через бэкенд
    "catalog",                         # поставщики и продукты
    # "debug_toolbar" — подключим ниже условно, чтобы в проде не торчал
]

# Тулбар включается явно: ENABLE_DEBUG_TOOLBAR=1 (и только при DEBUG)
ENABLE_DEBUG_TOOLBAR = os.getenv("ENABLE_DEBUG_TOOLBAR", "0") == "1"

if DEBUG and ENABLE_DEBUG_TOOLBAR:
    INSTALLED_APPS += ["debug_toolbar"]  # добавляем приложение тулбара

# ── Middleware ───────────────────────────────────────────────────────────────

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",        # базовая безопасность
    "django.contrib.sessions.middleware.SessionMiddleware", # поддержка сессий
    "django.middleware.common.CommonMiddleware",            # общие улучшения (ETag и пр.)
    "django.middleware.csrf.CsrfViewMiddleware",            # защита от CSRF
    "django.contrib.messages.middleware.MessageMiddleware",     # флеш-сообщения
    "django.middleware.clickjacking.XFrameOptionsMiddleware",   # защита от clickjacking
]

# Если тулбар включён — вставляем его middleware сразу после SecurityMiddleware
if DEBUG and ENABLE_DEBUG_TOOLBAR:
    _dt_mw = "debug_toolbar.middleware.DebugToolbarMiddleware"  # название middleware тулбара
    sec_idx = MIDDLEWARE.index("django.middleware.security.SecurityMiddleware")
    MIDDLEWARE.insert(sec_idx + 1, _dt_mw)  # вставляем на нужную позицию
    INTERNAL_IPS = ["127.0.0.1", "localhost", "::1"]

# ── Сессии: пользователь и токен бэкенда живут в подписанной cookie ─────────

SESSION_ENGINE = "django.contrib.sessions.backends.signed_cookies"
SESSION_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = "Lax"
SESSION_COOKIE_SECURE = not DEBUG
SESSION_COOKIE_AGE = 60 * 60 * 8    # рабочий день
CSRF_COOKIE_SECURE = not DEBUG

MESSAGE_STORAGE = "django.contrib.messages.storage.session.SessionStorage"

LOGIN_URL = "accounts:login"          # страница логина (имя маршрута)

# ── Урлы и WSGI ──────────────────────────────────────────────────────────────

ROOT_URLCONF = "panel.urls"            # корневой файл с маршрутами

TEMPLATES = [
    {
        "BACKEND": "django.template.backends.django.DjangoTemplates",  # бэкенд движка шаблонов
        "DIRS": [BASE_DIR / "templates"],  # папка с шаблонами проекта
        "APP_DIRS": True,                  # включаем поиск шаблонов в приложениях
        "OPTIONS": {
            "context_processors": [
                "django.template.context_processors.request",  # добавляет request в контекст
                "django.contrib.messages.context_processors.messages",  # для messages
                "accounts.context_processors.session_user",    # пользователь бэкенда для шапки
            ],
        },
    },
]

WSGI_APPLICATION = "panel.wsgi.application"  # точка входа WSGI-сервера

# ── База данных ──────────────────────────────────────────────────────────────
# Данные живут в REST-бэкенде; SQLite нужна только служебным приложениям Django.
DATABASES = {
    "default": {
        "ENGINE": "django.db.backends.sqlite3",    # движок БД
        "NAME": BASE_DIR / "db.sqlite3",           # путь до файла SQLite
    }
}

# ── Кэш (список поставщиков для формы продукта) ─────────────────────────────

CACHES = {
    "default": {
        "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
        "LOCATION": "panel",
    }
}

# ── Локализация и часовой пояс ──────────────────────────────────────────────

LANGUAGE_CODE = "ru-ru"       # язык интерфейса
TIME_ZONE = "Europe/Moscow"   # часовой пояс проекта
USE_I18N = True               # поддержка интернационализации
USE_TZ = True                 # даты/время в UTC

# ── Статика ─────────────────────────────────────────────────────────────────

STATIC_URL = "static/"                 # URL-префикс для статики
STATICFILES_DIRS = [BASE_DIR / "static"]  # папка со статикой проекта
STATIC_ROOT = BASE_DIR / "staticfiles"    # collectstatic для gunicorn/nginx

DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"  # тип авто-поля id

# ── DRF: только JSON, аутентификация — cookie-сессия бэкенда ─────────────────
REST_FRAMEWORK = {
    "DEFAULT_RENDERER_CLASSES": [
        "rest_framework.renderers.JSONRenderer",  # JSON рендерер
    ],
    "DEFAULT_AUTHENTICATION_CLASSES": [],
    "DEFAULT_PERMISSION_CLASSES": [
        "catalog.permissions.HasBackendSession",
    ],
    "UNAUTHENTICATED_USER": None,
}

# ── Логирование ─────────────────────────────────────────────────────────────

LOG_LEVEL = os.getenv("PANEL_LOG_LEVEL", "INFO").upper()

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s %(name)s: %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING"},
        "accounts": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "catalog": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
        "panel": {"handlers": ["console"], "level": LOG_LEVEL, "propagate": False},
    },
}
