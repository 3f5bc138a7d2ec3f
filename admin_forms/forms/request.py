"""请求级回传参数.

表单动作只关心少数回传字段: form_context、close、refresh、redirect.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

_FALSE_VALUES = frozenset({"", "0", "false", "off", "no", "none", "null"})


def coerce_flag(value: object, default: bool = False) -> bool:
    """将表单回传值转换为布尔值."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return str(value).strip().lower() not in _FALSE_VALUES


@dataclass(frozen=True, slots=True)
class FormRequest:
    """单次请求的回传数据视图."""

    post: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> FormRequest:
        return cls(post=dict(data or {}))

    def value(self, key: str, default: Any = None) -> Any:
        return self.post.get(key, default)

    def flag(self, key: str, default: bool = False) -> bool:
        return coerce_flag(self.post.get(key), default)

    @property
    def form_context(self) -> str | None:
        value = self.post.get("form_context")
        return str(value) if value else None

    @property
    def close(self) -> bool:
        return self.flag("close")

    @property
    def refresh(self) -> bool:
        return self.flag("refresh")

    @property
    def redirect(self) -> bool:
        # 未传 redirect 时默认允许跳转
        return self.flag("redirect", default=True)


__all__ = ["FormRequest", "coerce_flag"]
