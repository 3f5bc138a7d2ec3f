from __future__ import annotations

from typing import Any

import pytest

from admin_forms.forms.config import ConfigTree
from admin_forms.forms.host import FormHostAdapter
from admin_forms.forms.redirects import (
    RedirectDirective,
    RedirectKind,
    RedirectResolver,
    replace_route_parameters,
)
from admin_forms.forms.request import FormRequest
from form_doubles import Article


def _tree(**config: Any) -> ConfigTree:
    source: dict[str, Any] = {"modelClass": Article, "form": {}}
    source.update(config)
    return ConfigTree.from_source(source)


class _StubOverrideHost(FormHostAdapter):
    def __init__(self, url: str | None) -> None:
        super().__init__()
        self.url = url
        self.seen: list[tuple[str, Any]] = []

    def resolve_redirect_url(self, context: str, record: Any | None) -> str | None:
        self.seen.append((context, record))
        return self.url


@pytest.mark.unit
def test_update_redirect_resolves_to_backend_path() -> None:
    resolver = RedirectResolver(_tree(update={"redirect": "/articles"}), FormRequest(), FormHostAdapter())

    directive = resolver.resolve("update", Article(id=5))

    assert directive == RedirectDirective(kind=RedirectKind.BACKEND, url="/articles")


@pytest.mark.unit
def test_close_without_redirect_close_falls_back_to_default_redirect() -> None:
    tree = _tree(update={"redirect": "/articles"}, defaultRedirect="/home")
    resolver = RedirectResolver(tree, FormRequest({"close": "1"}))

    directive = resolver.resolve("update", Article(id=5))

    assert directive.kind is RedirectKind.BACKEND
    assert directive.url == "/home"


@pytest.mark.unit
def test_close_prefers_redirect_close_template() -> None:
    tree = _tree(create={"redirect": "/articles/:id", "redirectClose": "/articles"})
    resolver = RedirectResolver(tree, FormRequest({"close": "true"}))

    assert resolver.resolve("create", Article(id=1)).url == "/articles"


@pytest.mark.unit
def test_only_redirect_close_configured_is_used_when_closing() -> None:
    tree = _tree(create={"redirectClose": "/articles"})

    assert RedirectResolver(tree, FormRequest({"close": "1"})).resolve("create").url == "/articles"
    assert not RedirectResolver(tree, FormRequest()).resolve("create")


@pytest.mark.unit
def test_refresh_flag_short_circuits_every_other_rule() -> None:
    host = _StubOverrideHost("https://example.com/elsewhere")
    tree = _tree(update={"redirect": "/articles"}, defaultRedirect="/home")
    resolver = RedirectResolver(tree, FormRequest({"refresh": "1", "close": "1"}), host)

    directive = resolver.resolve("update", Article(id=5))

    assert directive == RedirectDirective.refresh()
    assert host.seen == []


@pytest.mark.unit
def test_redirect_disabled_by_request_yields_no_directive() -> None:
    resolver = RedirectResolver(_tree(update={"redirect": "/articles"}), FormRequest({"redirect": "0"}))

    directive = resolver.resolve("update")

    assert directive.kind is RedirectKind.NONE
    assert not directive


@pytest.mark.unit
def test_route_parameters_are_filled_from_record() -> None:
    tree = _tree(create={"redirect": "articles/:id/:slug"})
    resolver = RedirectResolver(tree, FormRequest())

    directive = resolver.resolve("create", Article(id=7, slug="hello"), {"tab": "seo", "skip": None})

    assert directive.url == "articles/7/hello"
    assert directive.target == "articles/7/hello?tab=seo"


@pytest.mark.unit
def test_host_override_replaces_configured_url() -> None:
    host = _StubOverrideHost("https://example.com/done")
    resolver = RedirectResolver(_tree(update={"redirect": "/articles"}), FormRequest({"close": "1"}), host)
    record = Article(id=2)

    directive = resolver.resolve("update", record)

    assert directive.kind is RedirectKind.EXTERNAL
    assert directive.is_external is True
    assert directive.url == "https://example.com/done"
    assert host.seen == [("update-close", record)]


@pytest.mark.unit
def test_empty_host_override_keeps_configured_url() -> None:
    resolver = RedirectResolver(_tree(update={"redirect": "/articles"}), FormRequest(), _StubOverrideHost(""))

    assert resolver.resolve("update").url == "/articles"


@pytest.mark.unit
def test_protocol_relative_url_is_external() -> None:
    resolver = RedirectResolver(_tree(defaultRedirect="//cdn.example.com/x"), FormRequest())

    assert resolver.resolve("delete").kind is RedirectKind.EXTERNAL


@pytest.mark.unit
def test_replace_route_parameters_supports_mappings_and_keeps_unknown_tokens() -> None:
    assert replace_route_parameters({"id": 3}, "/articles/:id/:missing") == "/articles/3/:missing"


@pytest.mark.unit
def test_dotted_context_name_resolves_redirect_templates() -> None:
    tree = _tree(**{"v2.edit": {"redirect": "/v2", "redirectClose": "/v2/list"}})

    assert RedirectResolver(tree, FormRequest()).resolve("v2.edit").url == "/v2"
    assert RedirectResolver(tree, FormRequest({"close": "1"})).resolve("v2.edit").url == "/v2/list"
