"""表单扩展点.

每次 `init_form` 都会在新建的渲染组件上按固定顺序注册五个事件,
每个事件只转发给宿主同名的扩展方法:

1. form.extendFieldsBefore → host.extend_fields_before(widget)
2. form.extendFields       → host.extend_fields(widget, fields) + 注册表中的字段扩展
3. form.beforeRefresh      → host.extend_refresh_data(widget, data),非空映射替换刷新数据
4. form.refreshFields      → host.extend_refresh_fields(widget, fields),非空结果替换字段集
5. form.refresh            → host.extend_refresh_results(widget, result),非空映射替换刷新结果

字段扩展注册表替代按调用类匹配的全局监听: 宿主在启动时以控制器键注册回调.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from admin_forms.types import FormHost, FormWidget

FieldExtension = Callable[["FormWidget", Any, str], None]


class FormEvent(str, Enum):
    """渲染组件对外暴露的扩展事件."""

    EXTEND_FIELDS_BEFORE = "form.extendFieldsBefore"
    EXTEND_FIELDS = "form.extendFields"
    BEFORE_REFRESH = "form.beforeRefresh"
    REFRESH_FIELDS = "form.refreshFields"
    REFRESH = "form.refresh"


@dataclass(slots=True)
class RefreshDataHolder:
    """局部刷新前的数据容器,扩展方法可以整体替换 data."""

    data: dict[str, Any] = field(default_factory=dict)


class EventEmitter:
    """渲染组件可复用的事件订阅实现.

    子类需要在 __init__ 中调用 super().__init__().
    """

    def __init__(self) -> None:
        self._event_bindings: dict[str, list[Callable[..., Any]]] = {}

    def bind_event(self, event: str, callback: Callable[..., Any]) -> None:
        self._event_bindings.setdefault(str(event), []).append(callback)

    def unbind_event(self, event: str | None = None) -> None:
        if event is None:
            self._event_bindings.clear()
            return
        self._event_bindings.pop(str(event), None)

    def bound_events(self) -> list[str]:
        return list(self._event_bindings)

    def fire_event(self, event: str, *args: Any) -> list[Any]:
        """依次调用回调,返回所有非 None 的结果."""
        results = []
        for callback in list(self._event_bindings.get(str(event), [])):
            result = callback(*args)
            if result is not None:
                results.append(result)
        return results

    def fire_event_halting(self, event: str, *args: Any) -> Any:
        """调用回调直到第一个非 None 结果."""
        for callback in list(self._event_bindings.get(str(event), [])):
            result = callback(*args)
            if result is not None:
                return result
        return None


class FormExtensionRegistry:
    """按控制器键登记的字段扩展回调."""

    def __init__(self) -> None:
        self._callbacks: dict[str, list[FieldExtension]] = {}

    def register(self, controller_key: str, callback: FieldExtension) -> FieldExtension:
        self._callbacks.setdefault(controller_key, []).append(callback)
        return callback

    def extend_fields(self, controller_key: str) -> Callable[[FieldExtension], FieldExtension]:
        """装饰器形式的 register.

        Example:
            >>> @form_extensions.extend_fields("articles")
            ... def add_slug(widget, record, context): ...

        """

        def decorator(callback: FieldExtension) -> FieldExtension:
            return self.register(controller_key, callback)

        return decorator

    def callbacks_for(self, controller_key: str | None) -> tuple[FieldExtension, ...]:
        if controller_key is None:
            return ()
        return tuple(self._callbacks.get(controller_key, ()))

    def clear(self, controller_key: str | None = None) -> None:
        if controller_key is None:
            self._callbacks.clear()
            return
        self._callbacks.pop(controller_key, None)


form_extensions = FormExtensionRegistry()


class HookPipeline:
    """将五个扩展事件绑定到渲染组件."""

    def __init__(
        self,
        host: FormHost,
        *,
        context: str,
        record: Any = None,
        controller_key: str | None = None,
        registry: FormExtensionRegistry | None = None,
    ) -> None:
        self.host = host
        self.context = context
        self.record = record
        self.controller_key = controller_key
        self.registry = registry if registry is not None else form_extensions

    def bind(self, widget: FormWidget) -> list[str]:
        """注册扩展事件,返回按注册顺序排列的事件名."""
        bindings: list[tuple[FormEvent, Callable[..., Any]]] = [
            (FormEvent.EXTEND_FIELDS_BEFORE, lambda: self._extend_fields_before(widget)),
            (FormEvent.EXTEND_FIELDS, lambda fields: self._extend_fields(widget, fields)),
            (FormEvent.BEFORE_REFRESH, lambda holder: self._before_refresh(widget, holder)),
            (FormEvent.REFRESH_FIELDS, lambda fields: self._refresh_fields(widget, fields)),
            (FormEvent.REFRESH, lambda result: self._refresh(widget, result)),
        ]
        for event, callback in bindings:
            widget.bind_event(event.value, callback)
        return [event.value for event, _ in bindings]

    def _extend_fields_before(self, widget: FormWidget) -> None:
        self.host.extend_fields_before(widget)

    def _extend_fields(self, widget: FormWidget, fields: Any) -> None:
        self.host.extend_fields(widget, fields)
        for callback in self.registry.callbacks_for(self.controller_key):
            callback(widget, self.record, self.context)

    def _before_refresh(self, widget: FormWidget, holder: RefreshDataHolder) -> None:
        result = self.host.extend_refresh_data(widget, holder.data)
        if isinstance(result, Mapping) and result:
            holder.data = dict(result)

    def _refresh_fields(self, widget: FormWidget, fields: Any) -> Any | None:
        result = self.host.extend_refresh_fields(widget, fields)
        return result or None

    def _refresh(self, widget: FormWidget, result: Mapping[str, Any]) -> Mapping[str, Any] | None:
        extended = self.host.extend_refresh_results(widget, result)
        if isinstance(extended, Mapping) and extended:
            return extended
        return None


__all__ = [
    "EventEmitter",
    "FieldExtension",
    "FormEvent",
    "FormExtensionRegistry",
    "HookPipeline",
    "RefreshDataHolder",
    "form_extensions",
]
