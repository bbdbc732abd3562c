# catalog/api_views.py
# ─────────────────────────────────────────────────────────────────────────────
# Путь и имя файла: catalog/api_views.py
# Назначение: DRF-представления для JS формы продукта (поиск поставщиков)
# ─────────────────────────────────────────────────────────────────────────────

from rest_framework import status  # HTTP-статусы
from rest_framework.response import Response  # ответ DRF
from rest_framework.views import APIView  # базовый API-класс

from accounts.session import sign_out
from .permissions import HasBackendSession
from .serializers import ProviderSerializer
from .services.api_client import BackendUnauthorized, client_for_request
from .services.provider_catalog import get_provider_choices


class ProviderSearchAPIView(APIView):
    """Поиск поставщиков для выпадашки формы продукта.

    GET ?q=<строка>
    Возвращает:
      { "results": [ {id, name, email, phone, address, ...}, ... ] }
    """
    authentication_classes = []                 # пользователь — в cookie-сессии, не в django.contrib.auth
    permission_classes = [HasBackendSession]    # только для вошедших

    def get(self, request, *args, **kwargs):
        query = (request.query_params.get("q") or "").strip()
        client = client_for_request(request)
        try:
            rows = get_provider_choices(client, query)
        except BackendUnauthorized:
            sign_out(request)
            return Response({"detail": "Сессия истекла."}, status=status.HTTP_401_UNAUTHORIZED)

        ser = ProviderSerializer(rows, many=True)  # сериализуем для ответа
        return Response({"results": ser.data}, status=status.HTTP_200_OK)
