"""表单行为依赖的协作者协议.

表单行为只编排流程,渲染、持久化、鉴权与消息展示均通过以下协议交给外部实现:

- FormHost: 宿主控制器暴露的扩展点
- FormWidget: 渲染组件(字段布局、标签页、保存数据收集)
- RecordStore: 记录的创建、查找、保存与删除
- Authorizer: 权限判断
- Notifier: 成功提示输出
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol

from admin_forms.types.structures import MessageVars, RecordIdentifier, SavePayload

if TYPE_CHECKING:
    from admin_forms.forms.config import FormConfig
    from admin_forms.forms.redirects import RedirectDirective


class FormFieldDescriptor(Protocol):
    """单个表单字段的最小接口."""

    def get_id(self, suffix: str | None = None) -> str: ...


class FormTab(Protocol):
    """表单标签区(outside/primary/secondary)的最小接口."""

    def has_fields(self) -> bool: ...


class FormWidget(Protocol):
    """渲染组件协议.

    由 WidgetFactory 基于 FormConfig 快照构建,表单行为只调用以下方法.
    """

    preview_mode: bool

    def bind_event(self, event: str, callback: Callable[..., Any]) -> None: ...

    def render(self, options: Mapping[str, object] | None = None) -> str: ...

    def render_field(self, name: str, options: Mapping[str, object] | None = None) -> str: ...

    def get_save_data(self) -> SavePayload: ...

    def get_session_key(self) -> str: ...

    def get_field(self, name: str) -> FormFieldDescriptor | None: ...

    def get_tab(self, section: str) -> FormTab: ...

    def get_id(self, suffix: str | None = None) -> str: ...

    def set_save_data_override(self, key: str, value: object) -> None: ...


WidgetFactory = Callable[["FormConfig"], FormWidget]


class RecordStore(Protocol):
    """记录仓储协议,查询执行与事务由实现方负责."""

    def new_record(self, model_class: type[Any]) -> Any: ...

    def query(self, model_class: type[Any]) -> Any: ...

    def find(self, query: Any, model_class: type[Any], identifier: RecordIdentifier) -> Any | None: ...

    def save(self, record: Any, data: SavePayload, *, session_key: str | None = None, propagate: bool = True) -> None: ...

    def delete(self, record: Any) -> None: ...


class Authorizer(Protocol):
    """权限判断协议."""

    def has_access(self, permission: str) -> bool: ...


class Notifier(Protocol):
    """操作成功提示输出协议."""

    def success(self, message: str) -> None: ...


class Translator(Protocol):
    """文案翻译协议,接收消息键与替换变量."""

    def __call__(self, key: str, variables: MessageVars) -> str: ...


class FormHost(Protocol):
    """宿主控制器扩展点.

    所有方法都有默认实现,见 `admin_forms.forms.host.FormHostAdapter`.
    """

    page_title: str | None

    # 记录
    def create_record_object(self) -> Any: ...

    def locate_record_object(self, identifier: RecordIdentifier) -> Any | None: ...

    def extend_record(self, record: Any) -> Any | None: ...

    def extend_query(self, query: Any) -> Any | None: ...

    # 持久化前后
    def before_save(self, record: Any) -> None: ...

    def after_save(self, record: Any) -> None: ...

    def before_create(self, record: Any) -> None: ...

    def after_create(self, record: Any) -> None: ...

    def before_update(self, record: Any) -> None: ...

    def after_update(self, record: Any) -> None: ...

    def after_delete(self, record: Any) -> None: ...

    # 字段扩展
    def extend_fields_before(self, widget: FormWidget) -> None: ...

    def extend_fields(self, widget: FormWidget, fields: Any) -> None: ...

    def extend_refresh_data(self, widget: FormWidget, data: Mapping[str, Any]) -> Mapping[str, Any] | None: ...

    def extend_refresh_fields(self, widget: FormWidget, fields: Any) -> Any | None: ...

    def extend_refresh_results(self, widget: FormWidget, result: Mapping[str, Any]) -> Mapping[str, Any] | None: ...

    # 跳转与多站点
    def resolve_redirect_url(self, context: str, record: Any | None) -> str | None: ...

    def is_multisite_aware(self, record: Any) -> bool: ...

    def pending_multisite_redirect(self, context: str, record: Any) -> RedirectDirective | None: ...

    def register_site_switch_handler(self, handler: Callable[..., Any]) -> None: ...

    # 错误
    def report_unhandled_failure(self, error: Exception) -> None: ...


__all__ = [
    "Authorizer",
    "FormFieldDescriptor",
    "FormHost",
    "FormTab",
    "FormWidget",
    "Notifier",
    "RecordStore",
    "Translator",
    "WidgetFactory",
]
