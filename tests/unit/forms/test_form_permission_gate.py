from __future__ import annotations

import pytest
from flask import Flask

from admin_forms.errors import AccessDeniedError
from admin_forms.forms.config import ConfigTree
from admin_forms.forms.permissions import (
    AllowAllAuthorizer,
    DenyAllAuthorizer,
    FlaskLoginAuthorizer,
    FormAction,
    PermissionGate,
)
from admin_forms.forms import permissions as permissions_module
from form_doubles import Article, StubAuthorizer


def _gate(authorizer: StubAuthorizer) -> PermissionGate:
    tree = ConfigTree.from_source(
        {"modelClass": Article, "form": {}, "permissions": {"modelDelete": "articles.delete"}},
    )
    return PermissionGate(tree, authorizer)


@pytest.mark.unit
def test_unconfigured_action_is_allowed_without_asking_authorizer() -> None:
    authorizer = StubAuthorizer(denied={"articles.delete"})

    _gate(authorizer).ensure(FormAction.CREATE)

    assert authorizer.checked == []


@pytest.mark.unit
def test_configured_action_is_delegated_to_authorizer() -> None:
    authorizer = StubAuthorizer()

    _gate(authorizer).ensure(FormAction.DELETE)

    assert authorizer.checked == ["articles.delete"]


@pytest.mark.unit
def test_denied_action_raises_access_denied() -> None:
    gate = _gate(StubAuthorizer(denied={"articles.delete"}))

    with pytest.raises(AccessDeniedError) as excinfo:
        gate.ensure("modelDelete")

    assert excinfo.value.status_code == 403
    assert excinfo.value.extra == {"action": "modelDelete", "permission": "articles.delete"}


@pytest.mark.unit
def test_allow_all_authorizer_accepts_any_permission() -> None:
    assert AllowAllAuthorizer().has_access("anything") is True


class _StubUser:
    is_authenticated = True

    def __init__(self, granted: set[str]) -> None:
        self.granted = granted

    def has_permission(self, permission: str) -> bool:
        return permission in self.granted


class _StubAnonymous:
    is_authenticated = False


@pytest.mark.unit
def test_flask_login_authorizer_uses_current_user(monkeypatch) -> None:
    app = Flask(__name__)
    authorizer = FlaskLoginAuthorizer()

    with app.test_request_context("/"):
        monkeypatch.setattr(permissions_module, "current_user", _StubUser({"articles.delete"}))
        assert authorizer.has_access("articles.delete") is True
        assert authorizer.has_access("articles.create") is False

        monkeypatch.setattr(permissions_module, "current_user", _StubAnonymous())
        assert authorizer.has_access("articles.delete") is False


@pytest.mark.unit
def test_flask_login_authorizer_denies_when_login_manager_is_missing() -> None:
    app = Flask(__name__)

    with app.test_request_context("/"):
        assert FlaskLoginAuthorizer().has_access("articles.delete") is False


@pytest.mark.unit
def test_deny_all_authorizer_rejects_configured_action_only() -> None:
    gate = PermissionGate(
        ConfigTree.from_source({"modelClass": Article, "form": {}, "permissions": {"modelDelete": "articles.delete"}}),
        DenyAllAuthorizer(),
    )

    assert gate.check(FormAction.CREATE) is True
    with pytest.raises(AccessDeniedError):
        gate.ensure(FormAction.DELETE)
