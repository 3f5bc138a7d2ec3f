from __future__ import annotations

from typing import Any

import pytest
from flask import Flask, get_flashed_messages, jsonify

from admin_forms.forms.controller import FormController
from admin_forms.forms.notifier import FlashNotifier
from admin_forms.settings import Settings
from admin_forms.views.mixins import FormControllerView
from form_doubles import Article, MemoryRecordStore, StubAuthorizer, WidgetFactory

ARTICLE_FORM: dict[str, Any] = {
    "modelClass": "form_doubles:Article",
    "name": "Article",
    "form": {"fields": {"title": {}}},
    "defaultRedirect": "/home",
    "create": {"redirect": "articles/:id"},
    "update": {"redirect": "/articles"},
    "permissions": {"modelDelete": "articles.delete"},
}


def _make_app(store: MemoryRecordStore, *, denied: set[str] | None = None) -> Flask:
    class _ArticleFormView(FormControllerView):
        form_config = ARTICLE_FORM

        def build_widget_factory(self) -> WidgetFactory:
            return WidgetFactory({"title": "From view"})

        def build_record_store(self) -> MemoryRecordStore:
            return store

        def build_authorizer(self) -> StubAuthorizer:
            return StubAuthorizer(denied)

        def render_form(self, controller: FormController, action: str) -> Any:
            fatal_error = getattr(controller.host, "fatal_error", None)
            return jsonify(
                {
                    "action": action,
                    "context": controller.vars.get("formContext"),
                    "page_title": controller.host.page_title,
                    "fatal_error": str(fatal_error) if fatal_error else None,
                    "flashes": get_flashed_messages(),
                },
            )

    app = Flask(__name__)
    app.secret_key = "test-secret-key"
    _ArticleFormView.register(app, "/articles", "articles_form", settings=Settings())
    return app


@pytest.mark.unit
def test_get_create_renders_form() -> None:
    client = _make_app(MemoryRecordStore()).test_client()

    response = client.get("/articles/create")

    assert response.status_code == 200
    assert response.get_json()["action"] == "create"
    assert response.get_json()["page_title"] == "Create Article"


@pytest.mark.unit
def test_post_create_redirects_under_backend_prefix() -> None:
    store = MemoryRecordStore()
    client = _make_app(store).test_client()

    response = client.post("/articles/create", data={"title": "ignored"})

    assert response.status_code == 302
    assert response.headers["Location"] == "/backend/articles/1"
    assert store.records[1].title == "From view"


@pytest.mark.unit
def test_post_update_with_close_uses_default_redirect() -> None:
    client = _make_app(MemoryRecordStore({5: Article(id=5)})).test_client()

    response = client.post("/articles/update/5", data={"close": "1"})

    assert response.headers["Location"] == "/backend/home"


@pytest.mark.unit
def test_post_update_with_refresh_redirects_to_current_url() -> None:
    client = _make_app(MemoryRecordStore({5: Article(id=5)})).test_client()

    response = client.post("/articles/update/5", data={"refresh": "1"})

    assert response.status_code == 302
    assert response.headers["Location"].endswith("/articles/update/5")


@pytest.mark.unit
def test_post_without_redirect_returns_json() -> None:
    client = _make_app(MemoryRecordStore()).test_client()

    response = client.post("/articles/create", data={"redirect": "0"})

    assert response.status_code == 200
    assert response.get_json() == {"success": True}


@pytest.mark.unit
def test_denied_delete_returns_forbidden_and_keeps_record() -> None:
    store = MemoryRecordStore({5: Article(id=5)})
    client = _make_app(store, denied={"articles.delete"}).test_client()

    response = client.post("/articles/update/5", data={"_handler": "onDelete"})

    assert response.status_code == 403
    assert response.get_json()["error"] is True
    assert 5 in store.records
    assert store.find_calls == 0


@pytest.mark.unit
def test_missing_record_on_save_returns_not_found() -> None:
    client = _make_app(MemoryRecordStore()).test_client()

    response = client.post("/articles/update/99")

    assert response.status_code == 404
    assert response.get_json()["message"] == "Form record with an ID of 99 could not be found."


@pytest.mark.unit
def test_missing_record_on_display_is_rendered_as_fatal_error() -> None:
    client = _make_app(MemoryRecordStore()).test_client()

    response = client.get("/articles/update/99")

    assert response.status_code == 200
    assert response.get_json()["fatal_error"] == "Form record with an ID of 99 could not be found."


@pytest.mark.unit
def test_unknown_handler_returns_not_found() -> None:
    client = _make_app(MemoryRecordStore({5: Article(id=5)})).test_client()

    response = client.post("/articles/create", data={"_handler": "onDelete"})

    assert response.status_code == 404


@pytest.mark.unit
def test_view_without_form_config_is_rejected() -> None:
    class _EmptyView(FormControllerView):
        pass

    with pytest.raises(RuntimeError):
        _EmptyView(settings=Settings())


@pytest.mark.unit
def test_successful_save_flashes_message() -> None:
    app = _make_app(MemoryRecordStore({5: Article(id=5)}))
    client = app.test_client()

    client.post("/articles/update/5")
    response = client.get("/articles/create")

    assert response.get_json()["flashes"] == ["Article Updated"]


@pytest.mark.unit
def test_flash_notifier_rejects_unknown_category() -> None:
    with pytest.raises(ValueError):
        FlashNotifier("sparkles")
