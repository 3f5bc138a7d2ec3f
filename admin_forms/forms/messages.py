"""表单提示消息解析.

`custom_message` 的查找顺序(先命中者生效):

1. `{context}.customMessages.{name}`
2. `{context}.{name}` (已废弃的上下文内写法)
3. `customMessages.{name}`
4. `flashCreate`/`flashUpdate` 均未命中时,以 `flashSave` 重新走一遍整条链(已废弃的别名)
5. 调用方传入的 default
6. 内置默认模板
7. 字面占位符 `???`

解析出的模板会替换 `:name` 与调用方传入的额外变量.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from admin_forms.constants import DEFAULT_RECORD_NAME, UNRESOLVED_MESSAGE, FormMessages

if TYPE_CHECKING:
    from admin_forms.forms.config import ConfigTree
    from admin_forms.types import MessageVars, Translator

_PLACEHOLDER_PATTERN = re.compile(r":(\w+)")


def interpolate_message(template: str, variables: MessageVars) -> str:
    """替换模板中的 `:key` 占位符,未提供的占位符原样保留."""
    if not variables:
        return template

    def _replace(match: re.Match[str]) -> str:
        key = match.group(1)
        if key in variables:
            return str(variables[key])
        return match.group(0)

    return _PLACEHOLDER_PATTERN.sub(_replace, template)


class MessageResolver:
    """按上下文解析表单提示消息."""

    def __init__(
        self,
        config: ConfigTree,
        context: str,
        *,
        translator: Translator | None = None,
        default_record_name: str = DEFAULT_RECORD_NAME,
    ) -> None:
        self.config = config
        self.context = context
        self._translator: Translator = translator or interpolate_message
        self._default_record_name = default_record_name

    @property
    def record_name(self) -> str:
        """配置中的记录显示名称,经过翻译."""
        name = self.config.resolve("name", self._default_record_name)
        return self._translator(str(name), {})

    def custom_message(
        self,
        name: str,
        default: str | None = None,
        extras: MessageVars | None = None,
    ) -> str:
        """解析自定义消息,永不抛出异常.

        Args:
            name: 消息名,如 notFound、flashCreate.
            default: 配置均未命中时使用的模板.
            extras: 额外替换变量,与 `name` 同名时覆盖.

        Returns:
            替换变量后的消息文本.

        """
        found = self._lookup(name)

        if found is None and name in FormMessages.LEGACY_SAVE_ALIASES:
            fallback = default if default is not None else FormMessages.DEFAULTS[name]
            return self.custom_message(FormMessages.LEGACY_SAVE_KEY, fallback, extras)

        if found is None:
            found = default
        if found is None:
            found = FormMessages.DEFAULTS.get(name, UNRESOLVED_MESSAGE)
        return self._format(found, extras)

    def lang(self, path: str, default: str | None = None, extras: MessageVars | None = None) -> str:
        """读取配置中的普通文案(如页面标题)并替换变量."""
        template = self.config.resolve(path, default)
        if template is None:
            return UNRESOLVED_MESSAGE
        return self._format(str(template), extras)

    def _lookup(self, name: str) -> str | None:
        candidates = (
            self.config.resolve_context(self.context, f"customMessages.{name}"),
            self.config.resolve_context(self.context, name),
            self.config.resolve(f"customMessages.{name}"),
        )
        for value in candidates:
            if isinstance(value, str):
                return value
        return None

    def _format(self, template: str, extras: MessageVars | None) -> str:
        variables = {"name": self.record_name, **dict(extras or {})}
        return self._translator(template, variables)


__all__ = ["MessageResolver", "interpolate_message"]
