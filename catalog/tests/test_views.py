import pytest
from django.urls import reverse

from catalog.services.api_client import BackendError, BackendUnauthorized, BackendValidationError

LOGIN_URL = "/accounts/login/"


def _products(n):
    return {
        i: {"id": i, "name": f"Item {i}", "slug": f"item-{i}", "price": i, "description": "",
            "is_active": True, "provider_id": None, "created_at": None, "updated_at": None}
        for i in range(1, n + 1)
    }


# ---------- доступ ----------
@pytest.mark.parametrize("name", ["catalog:home", "catalog:provider_list", "catalog:product_list",
                                  "catalog:product_create"])
def test_anonymous_is_sent_to_login(client, backend, name):
    url = reverse(name)
    resp = client.get(url)
    assert resp.status_code == 302
    assert resp["Location"].startswith(LOGIN_URL)
    assert "next=" in resp["Location"]
    assert backend.calls == []


def test_home_for_signed_in_user(auth_client):
    resp = auth_client.get(reverse("catalog:home"))
    assert resp.status_code == 200
    assert "Ana" in resp.content.decode()


# ---------- списки ----------
def test_provider_list_first_page(auth_client, backend):
    resp = auth_client.get(reverse("catalog:provider_list"))
    html = resp.content.decode()
    assert resp.status_code == 200
    assert html.count('class="provider-row"') == 10
    assert "Показано с <b>1</b> по <b>10</b> из <b>25</b> результатов" in html
    assert backend.calls[0] == ("list_providers", 1, 10)


def test_product_list_window_in_the_middle(auth_client, backend):
    backend.products = _products(200)
    resp = auth_client.get(reverse("catalog:product_list") + "?page=10")
    html = resp.content.decode()
    assert resp.status_code == 200
    assert resp.context["current_page"] == 10
    assert html.count('class="page-ellipsis"') == 2
    assert '<span class="page-current">10</span>' in html
    for n in (1, 9, 11, 20):
        assert f'href="/products/?page={n}">{n}</a>' in html
    assert "Показано с <b>91</b> по <b>100</b> из <b>200</b> результатов" in html


def test_single_page_has_no_pagination(auth_client, backend):
    backend.products = _products(3)
    html = auth_client.get(reverse("catalog:product_list")).content.decode()
    assert html.count('class="product-row"') == 3
    assert "pagination" not in html


@pytest.mark.parametrize("raw", ["abc", "0", "-3", ""])
def test_bad_page_param_means_first_page(auth_client, backend, raw):
    auth_client.get(reverse("catalog:product_list") + f"?page={raw}")
    assert backend.calls[-1] == ("list_products", 1, 10)


def test_page_past_the_end_redirects_to_last(auth_client, backend):
    resp = auth_client.get(reverse("catalog:product_list") + "?page=99")
    assert resp.status_code == 302
    assert resp["Location"] == "/products/?page=4"


def test_deleting_last_row_of_last_page(auth_client, backend):
    backend.products = _products(21)
    resp = auth_client.post(reverse("catalog:product_delete", args=[21]) + "?page=3")
    assert resp["Location"] == "/products/?page=3"

    # третьей страницы больше нет — список уводит на вторую
    resp = auth_client.get(resp["Location"], follow=True)
    html = resp.content.decode()
    assert resp.redirect_chain == [("/products/?page=2", 302)]
    assert html.count('class="product-row"') == 10
    assert '<span class="page-current">2</span>' in html
    assert "Показано с <b>11</b> по <b>20</b> из <b>20</b> результатов" in html


def test_list_backend_error_renders_empty_table(auth_client, backend):
    backend.fail("list_products", BackendError("boom", status=500))
    resp = auth_client.get(reverse("catalog:product_list"))
    html = resp.content.decode()
    assert resp.status_code == 200
    assert "Продуктов нет" in html
    assert "Не удалось загрузить данные: boom" in html
    assert "page-current" not in html


def test_expired_token_signs_out(auth_client, backend):
    backend.fail("list_providers", BackendUnauthorized("Unauthenticated.", status=401))
    resp = auth_client.get(reverse("catalog:provider_list"))
    assert resp.status_code == 302
    assert resp["Location"].startswith(LOGIN_URL)
    assert "userId" not in auth_client.session

    # повторный заход — уже без запроса к бэкенду
    calls = len(backend.calls)
    again = auth_client.get(reverse("catalog:provider_list"))
    assert again.status_code == 302
    assert len(backend.calls) == calls


# ---------- карточки ----------
def test_product_detail_with_provider(auth_client, backend):
    resp = auth_client.get(reverse("catalog:product_detail", args=[2]) + "?page=3")
    html = resp.content.decode()
    assert resp.status_code == 200
    assert "Product 2" in html
    assert "Provider 1" in html
    assert resp.context["list_url"] == "/products/?page=3"


def test_missing_record_redirects_to_list(auth_client, backend):
    resp = auth_client.get(reverse("catalog:provider_detail", args=[999]) + "?page=2")
    assert resp.status_code == 302
    assert resp["Location"] == "/providers/?page=2"


# ---------- создание / изменение ----------
def test_create_provider_returns_to_same_page(auth_client, backend):
    resp = auth_client.post(
        reverse("catalog:provider_create") + "?page=3",
        {"name": "Acme", "email": "acme@example.com", "phone": "", "address": "", "description": ""},
    )
    assert resp.status_code == 302
    assert resp["Location"] == "/providers/?page=3"
    assert backend.calls[-1][0] == "create_provider"
    assert backend.providers[26]["name"] == "Acme"


def test_create_provider_invalid_form_not_sent(auth_client, backend):
    resp = auth_client.post(reverse("catalog:provider_create"), {"name": "", "email": "x"})
    assert resp.status_code == 200
    assert resp.context["form"].errors
    assert all(call[0] != "create_provider" for call in backend.calls)


def test_create_product_derives_slug(auth_client, backend):
    resp = auth_client.post(reverse("catalog:product_create"), {
        "name": "Green Tea", "slug": "", "slug_mode": "auto", "price": "5",
        "description": "", "is_active": "on", "provider_id": "2",
    })
    assert resp.status_code == 302
    assert resp["Location"] == "/products/?page=1"
    method, payload = backend.calls[-1]
    assert method == "create_product"
    assert payload["slug"] == "green-tea"
    assert payload["provider_id"] == 2
    assert payload["is_active"] == 1


def test_create_product_backend_validation_errors_on_fields(auth_client, backend):
    backend.fail("create_product", BackendValidationError(
        "The given data was invalid.", status=422,
        errors={"slug": ["The slug has already been taken."]},
    ))
    resp = auth_client.post(reverse("catalog:product_create"), {
        "name": "Green Tea", "slug": "", "slug_mode": "auto", "price": "5",
    })
    assert resp.status_code == 200
    assert resp.context["form"].errors["slug"] == ["The slug has already been taken."]


def test_product_form_lists_providers(auth_client, backend):
    resp = auth_client.get(reverse("catalog:product_create"))
    html = resp.content.decode()
    assert resp.status_code == 200
    assert "Provider 20" in html
    assert "Provider 21" not in html  # поиск отдаёт первые 20
    assert resp.context["provider_search_url"] == "/api/providers/search/"


def test_edit_product_keeps_slug_when_name_unchanged(auth_client, backend):
    resp = auth_client.post(reverse("catalog:product_update", args=[4]) + "?page=2", {
        "name": "Product 4", "slug": "legacy-slug", "slug_mode": "auto", "price": "9.99",
        "description": "", "provider_id": "1",
    })
    assert resp.status_code == 302
    assert resp["Location"] == "/products/?page=2"
    method, pk, payload = backend.calls[-1]
    assert (method, pk) == ("update_product", 4)
    assert payload["slug"] == "legacy-slug"
    assert payload["is_active"] == 0


def test_edit_product_initial_and_current_provider(auth_client, backend):
    backend.products[5]["provider_id"] = 25
    resp = auth_client.get(reverse("catalog:product_update", args=[5]))
    form = resp.context["form"]
    assert form.initial["name"] == "Product 5"
    assert form.original_name == "Product 5"
    assert "Provider 25" in resp.content.decode()


# ---------- удаление ----------
def test_delete_confirmation_then_delete(auth_client, backend):
    confirm = auth_client.get(reverse("catalog:provider_delete", args=[3]) + "?page=2")
    assert confirm.status_code == 200
    assert "Provider 3" in confirm.content.decode()
    assert 3 in backend.providers

    resp = auth_client.post(reverse("catalog:provider_delete", args=[3]) + "?page=2")
    assert resp.status_code == 302
    assert resp["Location"] == "/providers/?page=2"
    assert 3 not in backend.providers


def test_delete_failure_keeps_record(auth_client, backend):
    backend.fail("delete_product", BackendError("locked", status=409))
    resp = auth_client.post(reverse("catalog:product_delete", args=[1]))
    assert resp.status_code == 302
    assert 1 in backend.products


# ---------- API поиска поставщиков ----------
def test_provider_search_requires_session(client, backend):
    resp = client.get(reverse("catalog:api_provider_search"), {"q": "1"})
    assert resp.status_code == 403
    assert backend.calls == []


def test_provider_search_results(auth_client, backend):
    resp = auth_client.get(reverse("catalog:api_provider_search"), {"q": "provider 2"})
    assert resp.status_code == 200
    names = [p["name"] for p in resp.json()["results"]]
    assert names[0] == "Provider 2"
    assert len(names) == 7  # 2, 20..25


def test_provider_search_expired_token(auth_client, backend):
    backend.fail("search_providers", BackendUnauthorized("Unauthenticated.", status=401))
    resp = auth_client.get(reverse("catalog:api_provider_search"), {"q": "x"})
    assert resp.status_code == 401
    assert "userId" not in auth_client.session


def test_invalid_product_form_keeps_searched_provider(auth_client, backend):
    # Provider 25 не входит в первые 20 результатов поиска, его выбрали через API
    resp = auth_client.post(reverse("catalog:product_create"), {
        "name": "Green Tea", "slug": "", "slug_mode": "auto", "price": "-1",
        "provider_id": "25",
    })
    html = resp.content.decode()
    assert resp.status_code == 200
    assert "price" in resp.context["form"].errors
    assert '<option value="25" selected>Provider 25</option>' in html
    assert ("get_provider", 25) in backend.calls
