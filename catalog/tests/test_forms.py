from decimal import Decimal

from catalog.forms import ProductForm, ProviderForm

PRODUCT = {
    "name": "Green Tea",
    "slug": "",
    "slug_mode": "auto",
    "price": "12.50",
    "description": "Loose leaf",
    "is_active": "on",
    "provider_id": "3",
}


def test_product_slug_auto_derived():
    form = ProductForm(data=PRODUCT)
    assert form.is_valid(), form.errors
    assert form.cleaned_data["slug"] == "green-tea"


def test_product_auto_mode_overrides_stale_slug():
    form = ProductForm(data=dict(PRODUCT, slug="old-slug"))
    assert form.is_valid(), form.errors
    assert form.cleaned_data["slug"] == "green-tea"


def test_product_manual_slug_kept():
    form = ProductForm(data=dict(PRODUCT, slug="my-tea", slug_mode="manual"))
    assert form.is_valid(), form.errors
    assert form.cleaned_data["slug"] == "my-tea"
    assert form.cleaned_data["slug_mode"] == "manual"


def test_product_manual_slug_must_match_pattern():
    form = ProductForm(data=dict(PRODUCT, slug="Bad Slug", slug_mode="manual"))
    assert not form.is_valid()
    assert "slug" in form.errors


def test_product_validation_messages():
    form = ProductForm(data=dict(PRODUCT, name="x", price="-1"))
    assert not form.is_valid()
    assert form.errors["name"] == ["Название должно быть не короче 2 символов."]
    assert form.errors["price"] == ["Цена должна быть больше или равна 0."]


def test_product_edit_keeps_slug_when_name_unchanged():
    form = ProductForm(data=dict(PRODUCT, slug="legacy"), original_name="Green Tea")
    assert form.is_valid(), form.errors
    assert form.cleaned_data["slug"] == "legacy"


def test_product_edit_rederives_slug_when_name_changes():
    form = ProductForm(data=dict(PRODUCT, name="Black Tea", slug="legacy"), original_name="Green Tea")
    assert form.is_valid(), form.errors
    assert form.cleaned_data["slug"] == "black-tea"


def test_product_payload():
    form = ProductForm(data=PRODUCT)
    assert form.is_valid(), form.errors
    payload = form.to_payload()
    assert payload == {
        "name": "Green Tea",
        "slug": "green-tea",
        "price": 12.5,
        "description": "Loose leaf",
        "is_active": 1,
        "provider_id": 3,
    }

    inactive = ProductForm(data={k: v for k, v in PRODUCT.items() if k != "is_active"})
    assert inactive.is_valid(), inactive.errors
    assert inactive.to_payload()["is_active"] == 0


def test_product_provider_choices_rendered():
    form = ProductForm(provider_choices=[{"id": 3, "name": "Acme"}])
    html = form["provider_id"].as_widget()
    assert "Acme" in html
    assert 'value="3"' in html


def test_initial_from_record():
    initial = ProductForm.initial_from({"name": "A", "slug": "a", "price": Decimal("5"),
                                        "is_active": 1, "provider_id": 2})
    assert initial["is_active"] is True
    assert initial["slug_mode"] == "auto"
    assert initial["description"] == ""


def test_backend_errors_land_on_fields():
    form = ProductForm(data=PRODUCT)
    assert form.is_valid()
    form.add_backend_errors({
        "slug": ["The slug has already been taken."],
        "unknown": ["Something else."],
        "price": [],
    })
    assert form.errors["slug"] == ["The slug has already been taken."]
    assert "Something else." in form.non_field_errors()
    assert "price" not in form.errors


def test_provider_form():
    form = ProviderForm(data={"name": "  Acme  ", "email": "acme@example.com"})
    assert form.is_valid(), form.errors
    assert form.to_payload() == {
        "name": "Acme", "email": "acme@example.com",
        "phone": "", "address": "", "description": "",
    }

    bad = ProviderForm(data={"name": "", "email": "nope"})
    assert not bad.is_valid()
    assert set(bad.errors) == {"name", "email"}
