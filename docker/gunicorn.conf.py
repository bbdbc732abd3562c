# panel/docker/gunicorn.conf.py
# ─────────────────────────────────────────────────────────────────────────────
# Назначение: конфигурация gunicorn для Django-проекта panel
#   запуск: gunicorn -c docker/gunicorn.conf.py panel.wsgi:application
# ─────────────────────────────────────────────────────────────────────────────

import multiprocessing  # модуль для определения числа CPU
import os               # переменные окружения

bind = os.getenv("GUNICORN_BIND", "unix:/run/gunicorn/gunicorn.sock")  # по умолчанию unix-сокет для nginx
wsgi_app = "panel.wsgi:application"  # точка входа
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))  # число воркеров
# воркер ждёт ответа бэкенда: таймаут должен быть больше BACKEND_API_TIMEOUT
timeout = int(os.getenv("GUNICORN_TIMEOUT", "60"))
accesslog = "-"  # лог запросов в stdout (перехватит supervisor)
errorlog = "-"   # лог ошибок в stdout
loglevel = os.getenv("PANEL_LOG_LEVEL", "info").lower()
worker_class = "sync"  # обычный sync-воркер
