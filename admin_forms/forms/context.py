"""表单上下文.

上下文决定哪一组配置覆盖生效,内置 create/update/preview,宿主也可以传入自定义字符串.
带 `-close` 后缀的上下文表示"保存并关闭"的跳转语义.
上下文名在配置中整体作为一个分组键(见 `ConfigTree.resolve_context`),可以包含 `.` 或 `[]`.
"""

from __future__ import annotations

from enum import Enum

CLOSE_SUFFIX = "-close"


class FormContext(str, Enum):
    """内置表单上下文."""

    CREATE = "create"
    UPDATE = "update"
    PREVIEW = "preview"


def context_value(context: FormContext | str) -> str:
    """返回上下文的字符串值,自定义上下文原样返回."""
    if isinstance(context, FormContext):
        return context.value
    return str(context)


def is_close_context(context: str) -> bool:
    # 纯后缀判断: 自定义上下文若本身以 -close 结尾也会被当作关闭语义
    return context.endswith(CLOSE_SUFFIX)


def with_close_suffix(context: str) -> str:
    """追加 `-close` 后缀,已带后缀时原样返回."""
    if is_close_context(context):
        return context
    return f"{context}{CLOSE_SUFFIX}"


def strip_close_suffix(context: str) -> str:
    """去掉 `-close` 后缀,得到查找跳转配置使用的基础上下文."""
    if is_close_context(context):
        return context[: -len(CLOSE_SUFFIX)]
    return context


__all__ = [
    "CLOSE_SUFFIX",
    "FormContext",
    "context_value",
    "is_close_context",
    "strip_close_suffix",
    "with_close_suffix",
]
