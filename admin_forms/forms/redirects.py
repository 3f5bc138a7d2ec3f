"""表单动作完成后的跳转解析.

按以下顺序短路:

1. 请求带 refresh 标记 → 原地刷新
2. 请求显式关闭跳转(redirect=false) → 不跳转
3. 请求带 close 标记且上下文没有 `-close` 后缀 → 追加后缀
4. 查找 `{base}.redirect` / `{base}.redirectClose`,为空时回退 `defaultRedirect`
5. 有记录时替换模板中的 `:attr` 路由参数
6. 宿主 `resolve_redirect_url` 返回非空值时覆盖以上结果
7. 带 scheme 或 `//` 的地址为外部地址,其余为后台路径
8. 追加调用方传入的查询参数
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from admin_forms.forms.context import is_close_context, strip_close_suffix, with_close_suffix
from admin_forms.utils.redirect_safety import append_query_params, is_external_redirect_target
from admin_forms.utils.route_safety import log_with_context

if TYPE_CHECKING:
    from admin_forms.forms.config import ConfigTree
    from admin_forms.forms.request import FormRequest
    from admin_forms.types import FormHost, QueryParams

_ROUTE_PARAMETER_PATTERN = re.compile(r":(\w+)")


class RedirectKind(str, Enum):
    """跳转结果类型."""

    REFRESH = "refresh"
    EXTERNAL = "external"
    BACKEND = "backend"
    NONE = "none"


@dataclass(frozen=True, slots=True)
class RedirectDirective:
    """解析后的跳转结果.

    Attributes:
        kind: 跳转类型.
        url: 替换路由参数后的地址,不含查询参数.
        query_params: 追加的查询参数.

    """

    kind: RedirectKind
    url: str | None = None
    query_params: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def none(cls) -> RedirectDirective:
        return cls(kind=RedirectKind.NONE)

    @classmethod
    def refresh(cls) -> RedirectDirective:
        return cls(kind=RedirectKind.REFRESH)

    @property
    def target(self) -> str | None:
        """带查询参数的完整地址."""
        if self.url is None:
            return None
        return append_query_params(self.url, self.query_params)

    @property
    def is_external(self) -> bool:
        return self.kind is RedirectKind.EXTERNAL

    def __bool__(self) -> bool:
        return self.kind is not RedirectKind.NONE


def replace_route_parameters(record: Any, template: str) -> str:
    """用记录属性替换模板中的 `:attr` 占位符.

    记录缺少对应属性或属性值为 None 时,占位符原样保留.
    """

    def _lookup(name: str) -> Any:
        if isinstance(record, Mapping):
            return record.get(name)
        return getattr(record, name, None)

    def _replace(match: re.Match[str]) -> str:
        value = _lookup(match.group(1))
        if value is None:
            return match.group(0)
        return str(value)

    return _ROUTE_PARAMETER_PATTERN.sub(_replace, template)


class RedirectResolver:
    """基于配置、请求标记与宿主覆盖计算跳转结果."""

    def __init__(self, config: ConfigTree, request: FormRequest, host: FormHost | None = None) -> None:
        self.config = config
        self.request = request
        self.host = host

    def resolve(
        self,
        context: str,
        record: Any = None,
        query_params: QueryParams | None = None,
    ) -> RedirectDirective:
        """计算跳转结果.

        Args:
            context: 跳转上下文,如 create、update、delete.
            record: 当前记录,用于替换路由参数.
            query_params: 追加的查询参数.

        Returns:
            RedirectDirective,无可用地址时为 NONE.

        """
        if self.request.refresh:
            return RedirectDirective.refresh()

        if not self.request.redirect:
            return RedirectDirective.none()

        if self.request.close:
            context = with_close_suffix(context)

        url = self.redirect_url(context)
        if record is not None and url:
            url = replace_route_parameters(record, url)

        if self.host is not None:
            override = self.host.resolve_redirect_url(context, record)
            if override:
                url = override

        if not url:
            return RedirectDirective.none()

        kind = RedirectKind.EXTERNAL if is_external_redirect_target(url) else RedirectKind.BACKEND
        directive = RedirectDirective(kind=kind, url=url, query_params=dict(query_params or {}))
        log_with_context(
            "debug",
            "表单跳转地址已解析",
            module="forms",
            action="resolve_redirect",
            context={"redirect_context": context, "redirect_kind": kind.value, "redirect_url": url},
            include_actor=False,
        )
        return directive

    def redirect_url(self, context: str) -> str:
        """返回上下文配置的跳转模板,为空时回退 `defaultRedirect`."""
        base_context = strip_close_suffix(context)
        source = "redirectClose" if is_close_context(context) else "redirect"
        url = self.config.resolve_context(base_context, source, "")
        if not url:
            return str(self.config.resolve("defaultRedirect", ""))
        return str(url)


__all__ = ["RedirectDirective", "RedirectKind", "RedirectResolver", "replace_route_parameters"]
