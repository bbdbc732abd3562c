import logging

from django.contrib import messages
from django.shortcuts import redirect
from django.urls import reverse
from django.utils.http import url_has_allowed_host_and_scheme
from django.views import View
from django.views.generic import FormView

from catalog.services.api_client import BackendClient, BackendError
from .forms import LoginForm
from .session import is_signed_in, sign_in, sign_out

logger = logging.getLogger(__name__)


class LoginView(FormView):
    template_name = "accounts/login.html"
    form_class = LoginForm

    def dispatch(self, request, *args, **kwargs):
        # уже вошёл — на главную
        if is_signed_in(request):
            return redirect("catalog:home")
        return super().dispatch(request, *args, **kwargs)

    def get_success_url(self):
        nxt = self.request.POST.get("next") or self.request.GET.get("next")
        if nxt and url_has_allowed_host_and_scheme(
            nxt, allowed_hosts={self.request.get_host()}, require_https=self.request.is_secure()
        ):
            return nxt
        return reverse("catalog:home")

    def get_context_data(self, **kwargs):
        ctx = super().get_context_data(**kwargs)
        ctx["title"] = "Вход"
        ctx["next"] = self.request.POST.get("next") or self.request.GET.get("next") or ""
        return ctx

    def form_valid(self, form):
        client = BackendClient()
        try:
            payload = client.login(form.cleaned_data["email"], form.cleaned_data["password"])
        except BackendError as exc:
            logger.info("Login rejected for %s: %s", form.cleaned_data["email"], exc.message)
            form.add_backend_errors(exc.errors)
            form.add_error(None, exc.detail or "Login failed")
            return self.render_to_response(self.get_context_data(form=form), status=400)

        sign_in(self.request, payload["user"], payload["token"])
        messages.success(self.request, "Добро пожаловать!")
        return redirect(self.get_success_url())

    def form_invalid(self, form):
        return self.render_to_response(self.get_context_data(form=form), status=400)


class LogoutView(View):
    http_method_names = ["post"]

    def post(self, request, *args, **kwargs):
        sign_out(request)
        return redirect("accounts:login")
