from decimal import Decimal

from django import forms

from .services.slugs import SLUG_PATTERN, SlugTracker


class BackendErrorsMixin:
    """Переносит ошибки валидации бэкенда ({"field": ["msg", ...]}) в форму."""

    def add_backend_errors(self, errors):
        for name, messages in (errors or {}).items():
            if isinstance(messages, str):
                messages = [messages]
            if not isinstance(messages, (list, tuple)) or not messages:
                continue
            # неизвестное форме поле — ошибка формы целиком
            self.add_error(name if name in self.fields else None, messages[0])


class ProviderForm(BackendErrorsMixin, forms.Form):
    """Создание/редактирование поставщика."""
    name = forms.CharField(
        label="Название", max_length=255,
        error_messages={"required": "Укажите название поставщика."},
        widget=forms.TextInput(attrs={"placeholder": "ООО «Поставщик»"}),
    )
    email = forms.EmailField(
        label="Email",
        error_messages={"required": "Укажите email.", "invalid": "Некорректный email."},
        widget=forms.EmailInput(attrs={"placeholder": "provider@example.com"}),
    )
    phone = forms.CharField(label="Телефон", max_length=50, required=False)
    address = forms.CharField(label="Адрес", max_length=255, required=False)
    description = forms.CharField(label="Описание", required=False,
                                  widget=forms.Textarea(attrs={"rows": 3}))

    def clean_name(self):
        name = (self.cleaned_data.get("name") or "").strip()
        if not name:
            raise forms.ValidationError("Укажите название поставщика.")
        return name

    def to_payload(self) -> dict:
        data = self.cleaned_data
        return {
            "name": data["name"],
            "email": data["email"],
            "phone": data.get("phone") or "",
            "address": data.get("address") or "",
            "description": data.get("description") or "",
        }


class ProductForm(BackendErrorsMixin, forms.Form):
    """Создание/редактирование продукта.

    Поле slug выводится из названия, пока пользователь его не трогал:
    скрытое поле slug_mode хранит состояние SlugTracker (auto/manual),
    JS на странице переключает его в manual при первой ручной правке.
    """
    name = forms.CharField(
        label="Название", max_length=255, min_length=2,
        error_messages={
            "required": "Укажите название продукта.",
            "min_length": "Название должно быть не короче 2 символов.",
        },
        widget=forms.TextInput(attrs={"placeholder": "Название продукта", "data-slug-source": "1"}),
    )
    slug = forms.CharField(
        label="Slug", max_length=255, required=False,
        widget=forms.TextInput(attrs={"placeholder": "product-slug", "data-slug-target": "1"}),
        help_text="Формируется из названия автоматически, можно поправить вручную.",
    )
    slug_mode = forms.ChoiceField(
        choices=[(s, s) for s in SlugTracker.STATES], required=False,
        initial=SlugTracker.AUTO, widget=forms.HiddenInput,
    )
    price = forms.DecimalField(
        label="Цена", min_value=Decimal("0"), decimal_places=2, max_digits=12,
        error_messages={
            "required": "Укажите цену.",
            "min_value": "Цена должна быть больше или равна 0.",
        },
        widget=forms.NumberInput(attrs={"step": "0.01", "min": "0"}),
    )
    description = forms.CharField(label="Описание", required=False,
                                  widget=forms.Textarea(attrs={"rows": 4}))
    is_active = forms.BooleanField(label="Активен", required=False, initial=True)
    provider_id = forms.IntegerField(
        label="Поставщик", required=False, min_value=1,
        widget=forms.Select(attrs={"data-provider-picker": "1"}),
    )

    def __init__(self, *args, original_name=None, provider_choices=None, **kwargs):
        super().__init__(*args, **kwargs)
        # original_name задан — это форма редактирования
        self.original_name = original_name
        choices = [("", "— не выбран —")] + [
            (p["id"], p["name"]) for p in (provider_choices or [])
        ]
        self.fields["provider_id"].widget.choices = choices

    def clean(self):
        cleaned = super().clean()
        name = cleaned.get("name")
        if not name:
            return cleaned

        tracker = SlugTracker(cleaned.get("slug_mode") or SlugTracker.AUTO)
        slug = tracker.resolve(name, cleaned.get("slug") or "", original_name=self.original_name)
        if not slug:
            self.add_error("slug", "Укажите slug.")
        elif not SLUG_PATTERN.match(slug):
            self.add_error("slug", "Slug может содержать только строчные латинские буквы, цифры и дефисы.")
        else:
            cleaned["slug"] = slug
        cleaned["slug_mode"] = tracker.state
        return cleaned

    def to_payload(self) -> dict:
        data = self.cleaned_data
        return {
            "name": data["name"],
            "slug": data["slug"],
            "price": float(data["price"]),            # бэкенд ждёт число
            "description": data.get("description") or "",
            "is_active": 1 if data.get("is_active") else 0,
            "provider_id": data.get("provider_id"),
        }

    @classmethod
    def initial_from(cls, product: dict) -> dict:
        """Начальные значения формы редактирования из записи бэкенда."""
        return {
            "name": product.get("name") or "",
            "slug": product.get("slug") or "",
            "slug_mode": SlugTracker.AUTO,
            "price": product.get("price") or 0,
            "description": product.get("description") or "",
            "is_active": bool(product.get("is_active")),
            "provider_id": product.get("provider_id"),
        }
