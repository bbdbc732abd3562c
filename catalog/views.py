# catalog/views.py
import logging
from typing import Any, Dict, Optional

from django.conf import settings
from django.contrib import messages
from django.http import HttpResponseRedirect
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.generic import FormView, TemplateView

from accounts.session import BackendLoginRequiredMixin, is_signed_in, login_redirect, sign_out
from .forms import ProductForm, ProviderForm
from .services.api_client import (
    BackendError,
    BackendUnauthorized,
    BackendValidationError,
    ResultPage,
    client_for_request,
)
from .services.pagination import parse_page
from .services.provider_catalog import ensure_choice, get_provider_choices

logger = logging.getLogger(__name__)


# ---------- MIXINS ----------
class BackendViewMixin:
    """Вход обязателен; self.client — клиент бэкенда с токеном сессии.

    Протухший токен (401 от бэкенда) в любом месте вью — выходим и
    отправляем на страницу входа.
    """

    def prepare(self) -> Optional[HttpResponseRedirect]:
        """Хук после проверки входа и до обработчика; ответ — прервать запрос."""
        return None

    def dispatch(self, request, *args, **kwargs):
        if not is_signed_in(request):
            return login_redirect(request)
        self.client = client_for_request(request)
        try:
            resp = self.prepare()
            if resp is not None:
                return resp
            return super().dispatch(request, *args, **kwargs)
        except BackendUnauthorized:
            logger.info("Backend rejected session token, signing out")
            sign_out(request)
            messages.warning(request, "Сессия истекла, войдите снова.")
            return login_redirect(request)

    @property
    def page(self) -> int:
        return parse_page(self.request.GET.get("page") or self.request.POST.get("page"))

    def list_url(self) -> str:
        return f"{reverse(self.list_url_name)}?page={self.page}"


class RecordListView(BackendViewMixin, TemplateView):
    """Таблица записей бэкенда с пагинацией ?page=N."""
    list_url_name = ""
    title = ""

    def fetch_page(self, page: int, limit: int) -> ResultPage:
        raise NotImplementedError

    def load_page(self) -> Optional[ResultPage]:
        try:
            return self.fetch_page(self.page, settings.PANEL_PAGE_SIZE)
        except BackendUnauthorized:
            raise
        except BackendError as e:
            # список не должен падать: пустая таблица, без пагинации
            logger.error("Error fetching %s: %s", self.list_url_name, e)
            messages.error(self.request, f"Не удалось загрузить данные: {e.message}")
            return None

    def get(self, request, *args, **kwargs):
        self.result = self.load_page()
        if self.result is not None and self.page > self.result.last_page:
            # такой страницы уже нет (удалили последнюю запись) — уходим на последнюю
            return redirect(f"{reverse(self.list_url_name)}?page={self.result.last_page}")
        return super().get(request, *args, **kwargs)

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        if self.result is not None:
            items, meta = self.result.items, self.result.meta
        else:
            items, meta = [], None

        ctx.update(
            title=self.title,
            items=items,
            page_meta=meta,
            current_page=meta["current_page"] if meta else self.page,
            list_url=reverse(self.list_url_name),
        )
        return ctx


class RecordMixin(BackendViewMixin):
    """Загружает одну запись по pk; не нашли — сообщение и назад к списку."""
    context_record_name = "record"

    def fetch_record(self, pk: int) -> Dict[str, Any]:
        raise NotImplementedError

    def prepare(self) -> Optional[HttpResponseRedirect]:
        return self.load_record()

    def load_record(self) -> Optional[HttpResponseRedirect]:
        try:
            self.record = self.fetch_record(self.kwargs["pk"])
        except BackendUnauthorized:
            raise
        except BackendError as e:
            logger.warning("Record %s#%s not loaded: %s", self.list_url_name, self.kwargs["pk"], e)
            messages.error(self.request, f"Запись не найдена: {e.message}")
            return redirect(self.list_url())
        return None

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx[self.context_record_name] = self.record
        ctx["page"] = self.page
        ctx["list_url"] = self.list_url()
        return ctx


class RecordFormMixin:
    """Отправка формы в бэкенд: ошибки валидации бэкенда — на поля формы."""
    success_message = "Сохранено"

    def save(self, payload: Dict[str, Any]) -> None:
        raise NotImplementedError

    def get_success_url(self):
        return self.list_url()

    def form_valid(self, form):
        try:
            self.save(form.to_payload())
        except BackendUnauthorized:
            raise
        except BackendValidationError as e:
            logger.info("Backend validation failed: %s", e.errors)
            form.add_backend_errors(e.errors)
            if not e.errors:
                form.add_error(None, e.message)
            return self.form_invalid(form)
        except BackendError as e:
            logger.error("Error saving record: %s", e)
            form.add_error(None, f"Не удалось сохранить: {e.message}")
            return self.form_invalid(form)

        messages.success(self.request, self.success_message)
        return redirect(self.get_success_url())

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["page"] = self.page
        ctx["list_url"] = self.list_url()
        return ctx


class RecordDeleteMixin(RecordMixin):
    """GET — подтверждение, POST — удаление и возврат на ту же страницу списка."""
    success_message = "Удалено"

    def delete_record(self, pk: int) -> None:
        raise NotImplementedError

    def post(self, request, *args, **kwargs):
        try:
            self.delete_record(self.kwargs["pk"])
        except BackendUnauthorized:
            raise
        except BackendError as e:
            logger.error("Error deleting %s#%s: %s", self.list_url_name, self.kwargs["pk"], e)
            messages.error(request, f"Не удалось удалить: {e.message}")
            return redirect(self.list_url())
        messages.success(request, self.success_message)
        return redirect(self.list_url())


# ---------- PAGES ----------
class HomeView(BackendLoginRequiredMixin, TemplateView):
    template_name = "catalog/home.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["title"] = "Дашборд"
        return ctx


# ---------- ПОСТАВЩИКИ ----------
class ProviderListView(RecordListView):
    template_name = "catalog/providers/list.html"
    list_url_name = "catalog:provider_list"
    title = "Поставщики"

    def fetch_page(self, page, limit):
        return self.client.list_providers(page=page, limit=limit)


class ProviderMixin:
    list_url_name = "catalog:provider_list"
    context_record_name = "provider"

    def fetch_record(self, pk):
        return self.client.get_provider(pk)


class ProviderDetailView(ProviderMixin, RecordMixin, TemplateView):
    template_name = "catalog/providers/detail.html"


class ProviderCreateView(ProviderMixin, RecordFormMixin, BackendViewMixin, FormView):
    template_name = "catalog/providers/form.html"
    form_class = ProviderForm
    success_message = "Поставщик создан"

    def save(self, payload):
        self.client.create_provider(payload)

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["title"] = "Новый поставщик"
        return ctx


class ProviderUpdateView(ProviderMixin, RecordFormMixin, RecordMixin, FormView):
    template_name = "catalog/providers/form.html"
    form_class = ProviderForm
    success_message = "Поставщик обновлён"

    def get_initial(self):
        keys = ("name", "email", "phone", "address", "description")
        return {k: self.record.get(k) or "" for k in keys}

    def save(self, payload):
        self.client.update_provider(self.record["id"], payload)

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["title"] = f"Поставщик: {self.record['name']}"
        return ctx


class ProviderDeleteView(ProviderMixin, RecordDeleteMixin, TemplateView):
    template_name = "catalog/providers/confirm_delete.html"
    success_message = "Поставщик удалён"

    def delete_record(self, pk):
        self.client.delete_provider(pk)


# ---------- ПРОДУКТЫ ----------
class ProductListView(RecordListView):
    template_name = "catalog/products/list.html"
    list_url_name = "catalog:product_list"
    title = "Продукты"

    def fetch_page(self, page, limit):
        return self.client.list_products(page=page, limit=limit)


class ProductMixin:
    list_url_name = "catalog:product_list"
    context_record_name = "product"

    def fetch_record(self, pk):
        return self.client.get_product(pk)


class ProductFormMixin(RecordFormMixin):
    form_class = ProductForm
    template_name = "catalog/products/form.html"

    def selected_provider_id(self) -> Optional[int]:
        """Поставщик из отправленной формы: найденный через поиск может не входить в первые 20."""
        raw = self.request.POST.get("provider_id") if self.request.method == "POST" else None
        try:
            return int(raw) if raw else None
        except ValueError:
            return None

    def provider_choices(self):
        choices = get_provider_choices(self.client)
        provider_id = self.selected_provider_id()
        if provider_id and all(p["id"] != provider_id for p in choices):
            try:
                choices = ensure_choice(choices, self.client.get_provider(provider_id))
            except BackendUnauthorized:
                raise
            except BackendError as e:
                logger.warning("Selected provider #%s not loaded: %s", provider_id, e)
        return choices

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs["provider_choices"] = self.provider_choices()
        return kwargs

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["provider_search_url"] = reverse("catalog:api_provider_search")
        return ctx


class ProductDetailView(ProductMixin, RecordMixin, TemplateView):
    template_name = "catalog/products/detail.html"

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        provider = None
        provider_id = self.record.get("provider_id")
        if provider_id:
            try:
                provider = self.client.get_provider(provider_id)
            except BackendUnauthorized:
                raise
            except BackendError as e:
                logger.warning("Provider #%s for product #%s not loaded: %s",
                               provider_id, self.record["id"], e)
        ctx["provider"] = provider
        return ctx


class ProductCreateView(ProductMixin, ProductFormMixin, BackendViewMixin, FormView):
    success_message = "Продукт создан"

    def save(self, payload):
        self.client.create_product(payload)

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["title"] = "Новый продукт"
        return ctx


class ProductUpdateView(ProductMixin, ProductFormMixin, RecordMixin, FormView):
    success_message = "Продукт обновлён"

    def selected_provider_id(self):
        return super().selected_provider_id() or self.record.get("provider_id")

    def get_form_kwargs(self):
        kwargs = super().get_form_kwargs()
        kwargs["original_name"] = self.record.get("name") or ""
        return kwargs

    def get_initial(self):
        return ProductForm.initial_from(self.record)

    def save(self, payload):
        self.client.update_product(self.record["id"], payload)

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["title"] = f"Продукт: {self.record['name']}"
        return ctx


class ProductDeleteView(ProductMixin, RecordDeleteMixin, TemplateView):
    template_name = "catalog/products/confirm_delete.html"
    success_message = "Продукт удалён"

    def delete_record(self, pk):
        self.client.delete_product(pk)


def custom_permission_denied(request, exception=None):
    """
    Кастомный обработчик 403 Forbidden.
    Вызывается, когда у пользователя нет прав на действие/страницу.
    """
    context = {
        "title": "Недостаточно прав",
        "message": "У вас нет разрешения на просмотр этой страницы.",
    }
    return render(request, "403.html", context=context, status=403)
