from __future__ import annotations

import pytest
import structlog
from pydantic import ValidationError

from admin_forms.settings import Settings
from admin_forms.utils import route_safety
from admin_forms.utils.redirect_safety import append_query_params, build_backend_url, is_external_redirect_target
from admin_forms.utils.structlog_config import DebugFilter


@pytest.mark.unit
def test_log_with_context_merges_context_and_extra(monkeypatch) -> None:
    captured: dict[str, object] = {}

    class _Logger:
        def warning(self, event, **kwargs):  # type: ignore[no-untyped-def]
            captured["event"] = event
            captured["kwargs"] = kwargs

        def error(self, event, **kwargs):  # type: ignore[no-untyped-def]
            captured["error_event"] = event

    monkeypatch.setattr(route_safety, "get_logger", lambda _name: _Logger())

    route_safety.log_with_context(
        "warning",
        "表单动作权限不足",
        module="forms",
        action="modelDelete",
        context={"permission": "articles.delete"},
        extra={"record_id": "5"},
    )

    assert captured["event"] == "表单动作权限不足"
    assert captured["kwargs"] == {
        "module": "forms",
        "action": "modelDelete",
        "permission": "articles.delete",
        "record_id": "5",
    }


@pytest.mark.unit
def test_debug_filter_drops_debug_events_until_enabled() -> None:
    debug_filter = DebugFilter(enabled=False)

    with pytest.raises(structlog.DropEvent):
        debug_filter(None, "debug", {"event": "x"})  # type: ignore[arg-type]
    assert debug_filter(None, "info", {"event": "x"}) == {"event": "x"}  # type: ignore[arg-type]

    debug_filter.set_enabled(enabled=True)
    assert debug_filter(None, "debug", {"event": "x"}) == {"event": "x"}  # type: ignore[arg-type]


@pytest.mark.unit
def test_settings_normalise_backend_uri_and_log_level(monkeypatch) -> None:
    monkeypatch.setenv("FORMS_BACKEND_URI", "admin/")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("FORMS_DEFAULT_RECORD_NAME", "Item")

    settings = Settings()

    assert settings.backend_uri == "/admin"
    assert settings.log_level == "DEBUG"
    assert settings.default_record_name == "Item"


@pytest.mark.unit
def test_settings_reject_unknown_log_level(monkeypatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "verbose")

    with pytest.raises(ValidationError):
        Settings()


@pytest.mark.unit
def test_redirect_target_classification() -> None:
    assert is_external_redirect_target("https://example.com/a") is True
    assert is_external_redirect_target("//cdn.example.com") is True
    assert is_external_redirect_target("/articles") is False
    assert is_external_redirect_target("articles/5") is False


@pytest.mark.unit
def test_backend_url_and_query_params() -> None:
    assert build_backend_url("articles/5", backend_uri="/backend") == "/backend/articles/5"
    assert build_backend_url("/home", backend_uri="") == "/home"
    assert build_backend_url("", backend_uri="/backend") == "/backend"
    assert append_query_params("/a?x=1", {"y": 2, "z": None}) == "/a?x=1&y=2"
