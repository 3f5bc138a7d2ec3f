"""宿主控制器扩展点的默认实现.

宿主只需覆盖关心的方法,其余扩展点保持空操作.
记录的创建与查找默认委托给 RecordStore.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any

from admin_forms.errors import SystemError
from admin_forms.forms.config import resolve_model_class
from admin_forms.utils.route_safety import log_with_context

if TYPE_CHECKING:
    from admin_forms.forms.redirects import RedirectDirective
    from admin_forms.types import FormWidget, RecordIdentifier, RecordStore


class FormHostAdapter:
    """FormHost 的空操作适配器.

    Attributes:
        record_store: 记录仓储,用于默认的创建与查找.
        model_class: 记录类型或其导入路径.
        page_title: 宿主设置的页面标题,为空时由表单行为按上下文填充.
        fatal_error: display 动作中捕获的异常,供视图展示.
        site_switch_handler: 多站点切换时重新进入表单流程的回调.

    """

    def __init__(
        self,
        *,
        record_store: RecordStore | None = None,
        model_class: type[Any] | str | None = None,
    ) -> None:
        self.record_store = record_store
        self.model_class = model_class
        self.page_title: str | None = None
        self.fatal_error: Exception | None = None
        self.site_switch_handler: Callable[..., Any] | None = None

    def _require_store(self) -> RecordStore:
        if self.record_store is None:
            msg = f"{self.__class__.__name__} 未配置 record_store"
            raise SystemError(msg)
        return self.record_store

    def _resolved_model_class(self) -> type[Any]:
        if self.model_class is None:
            msg = f"{self.__class__.__name__} 未配置 model_class"
            raise SystemError(msg)
        return resolve_model_class(self.model_class)

    # ------------------------------------------------------------------ #
    # 记录
    # ------------------------------------------------------------------ #
    def create_record_object(self) -> Any:
        return self._require_store().new_record(self._resolved_model_class())

    def locate_record_object(self, identifier: RecordIdentifier) -> Any | None:
        """按主键查找记录,查询会先经过 extend_query."""
        store = self._require_store()
        model_class = self._resolved_model_class()
        query = store.query(model_class)
        query = self.extend_query(query) or query
        return store.find(query, model_class, identifier)

    def extend_record(self, record: Any) -> Any | None:
        return None

    def extend_query(self, query: Any) -> Any | None:
        return None

    # ------------------------------------------------------------------ #
    # 持久化前后
    # ------------------------------------------------------------------ #
    def before_save(self, record: Any) -> None:
        return None

    def after_save(self, record: Any) -> None:
        return None

    def before_create(self, record: Any) -> None:
        return None

    def after_create(self, record: Any) -> None:
        return None

    def before_update(self, record: Any) -> None:
        return None

    def after_update(self, record: Any) -> None:
        return None

    def after_delete(self, record: Any) -> None:
        return None

    # ------------------------------------------------------------------ #
    # 字段扩展
    # ------------------------------------------------------------------ #
    def extend_fields_before(self, widget: FormWidget) -> None:
        return None

    def extend_fields(self, widget: FormWidget, fields: Any) -> None:
        return None

    def extend_refresh_data(self, widget: FormWidget, data: Mapping[str, Any]) -> Mapping[str, Any] | None:
        return None

    def extend_refresh_fields(self, widget: FormWidget, fields: Any) -> Any | None:
        return None

    def extend_refresh_results(self, widget: FormWidget, result: Mapping[str, Any]) -> Mapping[str, Any] | None:
        return None

    # ------------------------------------------------------------------ #
    # 跳转与多站点
    # ------------------------------------------------------------------ #
    def resolve_redirect_url(self, context: str, record: Any | None) -> str | None:
        return None

    def is_multisite_aware(self, record: Any) -> bool:
        return bool(getattr(record, "is_multisite", False))

    def pending_multisite_redirect(self, context: str, record: Any) -> RedirectDirective | None:
        return None

    def register_site_switch_handler(self, handler: Callable[..., Any]) -> None:
        self.site_switch_handler = handler

    # ------------------------------------------------------------------ #
    # 错误
    # ------------------------------------------------------------------ #
    def report_unhandled_failure(self, error: Exception) -> None:
        """记录 display 动作中的异常,视图可通过 fatal_error 展示."""
        self.fatal_error = error
        log_with_context(
            "error",
            "表单页面处理失败",
            module="forms",
            action="report_unhandled_failure",
            extra={"error_type": error.__class__.__name__, "error_message": str(error)},
        )


__all__ = ["FormHostAdapter"]
