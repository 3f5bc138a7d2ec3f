"""admin-forms - 跳转地址工具.

区分外部地址与后台相对路径,拼接查询参数与后台前缀.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING
from urllib.parse import urlencode

if TYPE_CHECKING:
    from admin_forms.types import QueryParams

_SCHEME_PATTERN = re.compile(r"^[A-Za-z][A-Za-z0-9+.\-]*://")


def is_external_redirect_target(target: str) -> bool:
    """判断跳转目标是否为外部地址.

    以 scheme(如 `https://`)或 `//` 开头的地址视为外部地址,其余均按后台路径处理.

    Args:
        target: 目标 URL.

    Returns:
        True 表示外部地址.

    """
    normalized = target.strip()
    return normalized.startswith("//") or bool(_SCHEME_PATTERN.match(normalized))


def append_query_params(url: str, params: QueryParams | None) -> str:
    """在 URL 后追加查询参数,值为 None 的参数会被忽略."""
    if not params:
        return url
    filtered = {key: value for key, value in params.items() if value is not None}
    if not filtered:
        return url
    separator = "&" if "?" in url else "?"
    return f"{url}{separator}{urlencode(filtered)}"


def build_backend_url(path: str, *, backend_uri: str) -> str:
    """将后台相对路径拼接到后台前缀之后.

    Args:
        path: 相对路径,如 `articles/5` 或 `/articles/5`.
        backend_uri: 后台前缀,如 `/backend`,可为空.

    Returns:
        以 `/` 开头的站内路径.

    """
    relative = path.strip().lstrip("/")
    prefix = backend_uri.rstrip("/")
    if not relative:
        return prefix or "/"
    return f"{prefix}/{relative}"


__all__ = ["append_query_params", "build_backend_url", "is_external_redirect_target"]
