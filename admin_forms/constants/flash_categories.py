"""表单提示使用的 Flash 类别."""

from __future__ import annotations

from typing import ClassVar


class FlashCategory:
    """表单动作输出提示时可用的类别."""

    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    ALL: ClassVar[tuple[str, ...]] = (SUCCESS, ERROR, WARNING, INFO)

    @classmethod
    def is_valid(cls, category: str) -> bool:
        return category in cls.ALL
