"""操作成功提示输出."""

from __future__ import annotations

from flask import flash

from admin_forms.constants import FlashCategory
from admin_forms.utils.route_safety import log_with_context


class FlashNotifier:
    """通过 flask.flash 输出成功提示,需要请求上下文."""

    def __init__(self, category: str = FlashCategory.SUCCESS) -> None:
        if not FlashCategory.is_valid(category):
            msg = f"未知的 Flash 类别: {category}"
            raise ValueError(msg)
        self.category = category

    def success(self, message: str) -> None:
        flash(message, self.category)


class LoggingNotifier:
    """只写结构化日志的提示输出,FormController 未指定 notifier 时使用."""

    def success(self, message: str) -> None:
        log_with_context("info", "表单操作提示", module="forms", action="notify", extra={"message": message})


__all__ = ["FlashNotifier", "LoggingNotifier"]
