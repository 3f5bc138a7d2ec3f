"""表单控制器行为.

为宿主控制器提供 create/update/preview 三个页面动作与保存、删除处理:

- create / update / preview: 展示类动作,处理过程中的异常交给宿主
  `report_unhandled_failure`,不向上抛出(权限拒绝除外,它发生在 try 之外).
- create_on_save / update_on_save / update_on_delete: 写入类动作,异常原样向上抛出,
  便于事务性调用方处理.

权限校验永远是每个动作的第一步,发生在任何记录查找或写入之前.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Any

from admin_forms.constants import DEFAULT_RECORD_NAME, FormMessages, FormTitles
from admin_forms.constants.system_constants import ErrorMessages
from admin_forms.errors import FieldNotFoundError, NotFoundError, PreconditionError, SystemError
from admin_forms.forms.config import ConfigTree, FormConfig
from admin_forms.forms.context import FormContext, context_value
from admin_forms.forms.hooks import FormExtensionRegistry, HookPipeline
from admin_forms.forms.host import FormHostAdapter
from admin_forms.forms.messages import MessageResolver
from admin_forms.forms.notifier import LoggingNotifier
from admin_forms.forms.permissions import DenyAllAuthorizer, FormAction, PermissionGate
from admin_forms.forms.redirects import RedirectDirective, RedirectResolver
from admin_forms.forms.request import FormRequest
from admin_forms.utils.route_safety import log_with_context

if TYPE_CHECKING:
    from admin_forms.types import (
        Authorizer,
        ConfigMapping,
        FormHost,
        FormWidget,
        MessageVars,
        Notifier,
        QueryParams,
        RecordIdentifier,
        RecordStore,
        Translator,
        WidgetFactory,
    )

LOG_MODULE = "forms"


class FormController:
    """表单生命周期编排.

    每个请求构造一个实例,配置快照、上下文与扩展绑定都不跨请求复用.

    Attributes:
        config: 校验后的声明式配置.
        host: 宿主扩展点实现.
        context: 当前动作的上下文.
        widget: init_form 之后的渲染组件.
        model: init_form 之后的当前记录.
        vars: 提供给视图的 formModel/formContext/formRecordName.

    """

    def __init__(
        self,
        config: ConfigTree | ConfigMapping | str | Path,
        *,
        widget_factory: WidgetFactory,
        host: FormHost | None = None,
        record_store: RecordStore | None = None,
        authorizer: Authorizer | None = None,
        notifier: Notifier | None = None,
        request: FormRequest | None = None,
        translator: Translator | None = None,
        controller_key: str | None = None,
        registry: FormExtensionRegistry | None = None,
        base_dir: Path | None = None,
        default_record_name: str = DEFAULT_RECORD_NAME,
    ) -> None:
        """初始化控制器.

        Raises:
            ConfigurationError: 配置缺少 modelClass 或 form 时抛出.

        """
        self.config = config if isinstance(config, ConfigTree) else ConfigTree.from_source(config, base_dir=base_dir)
        self.widget_factory = widget_factory
        self.record_store = record_store
        self.host: FormHost = host or FormHostAdapter(record_store=record_store, model_class=self.config.model_class)
        self.permissions = PermissionGate(self.config, authorizer or DenyAllAuthorizer())
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.request = request or FormRequest()
        self.translator = translator
        self.controller_key = controller_key
        self.registry = registry
        self.default_record_name = default_record_name

        self.context: str | None = None
        self.widget: FormWidget | None = None
        self.form_config: FormConfig | None = None
        self.model: Any = None
        self.vars: dict[str, Any] = {}

    # ------------------------------------------------------------------ #
    # 初始化
    # ------------------------------------------------------------------ #
    def init_form(self, record: Any, context: str | None = None) -> FormWidget:
        """基于记录与上下文构建配置快照、渲染组件与扩展绑定.

        Args:
            record: 当前记录.
            context: 显式上下文,为空时沿用动作解析出的上下文.

        Returns:
            新建的渲染组件.

        """
        if context is not None:
            self.context = context

        resolved_context = self.form_get_context()
        snapshot = self.config.build_snapshot(resolved_context, record)
        widget = self.widget_factory(snapshot)
        if snapshot.preview_mode:
            widget.preview_mode = True

        HookPipeline(
            self.host,
            context=resolved_context,
            record=record,
            controller_key=self.controller_key,
            registry=self.registry,
        ).bind(widget)

        self.widget = widget
        self.form_config = snapshot
        self._prepare_vars(record)
        self.model = record
        return widget

    def _prepare_vars(self, record: Any) -> None:
        self.vars["formModel"] = record
        self.vars["formContext"] = self.form_get_context()
        self.vars["formRecordName"] = self.messages().record_name

    # ------------------------------------------------------------------ #
    # Create
    # ------------------------------------------------------------------ #
    def create(self, context: str | None = None) -> None:
        """创建页面动作."""
        self.permissions.ensure(FormAction.CREATE)
        self._log_action_start("create")

        try:
            self.context = self._action_context(FormContext.CREATE, context)
            self._apply_page_title(FormContext.CREATE, FormTitles.CREATE)

            record = self.create_record()
            self.init_form(record)
        except Exception as exc:
            self._report_failure("create", exc)

    def create_on_save(self, context: str | None = None) -> RedirectDirective:
        """保存新记录,依次调用 before_save、before_create、after_save、after_create."""
        self.permissions.ensure(FormAction.CREATE)
        self._log_action_start("create_on_save")

        self.context = self._action_context(FormContext.CREATE, context)
        record = self.create_record()
        self.init_form(record)

        self.host.before_save(record)
        self.host.before_create(record)

        self._persist(record)

        self.host.after_save(record)
        self.host.after_create(record)

        self._log_success("create_on_save", "表单记录已创建", record)
        self.notifier.success(self.messages().custom_message("flashCreate"))
        return self.make_redirect("create", record)

    # ------------------------------------------------------------------ #
    # Update
    # ------------------------------------------------------------------ #
    def update(self, record_id: RecordIdentifier | None = None, context: str | None = None) -> RedirectDirective | None:
        """编辑页面动作.

        多站点记录需要先跳转到站点专属的创建页时,直接返回该跳转.
        """
        self.permissions.ensure(FormAction.UPDATE)
        self._log_action_start("update")

        try:
            self.context = self._action_context(FormContext.UPDATE, context)
            self._apply_page_title(FormContext.UPDATE, FormTitles.UPDATE)

            record = self.find_record(record_id)

            multisite_redirect = self._check_multisite(record, record_id, context)
            if multisite_redirect:
                return multisite_redirect

            self.init_form(record)
        except Exception as exc:
            self._report_failure("update", exc)
        return None

    def update_on_save(self, record_id: RecordIdentifier | None = None, context: str | None = None) -> RedirectDirective:
        """保存已有记录,依次调用 before_save、before_update、after_save、after_update."""
        self.permissions.ensure(FormAction.UPDATE)
        self._log_action_start("update_on_save")

        self.context = self._action_context(FormContext.UPDATE, context)
        record = self.find_record(record_id)

        multisite_redirect = self._check_multisite(record, record_id, context)
        if multisite_redirect:
            return multisite_redirect

        self.init_form(record)

        self.host.before_save(record)
        self.host.before_update(record)

        self._persist(record)

        self.host.after_save(record)
        self.host.after_update(record)

        self._log_success("update_on_save", "表单记录已更新", record)
        self.notifier.success(self.messages().custom_message("flashUpdate"))
        return self.make_redirect("update", record)

    def update_on_delete(self, record_id: RecordIdentifier | None = None) -> RedirectDirective:
        """删除记录并调用 after_delete."""
        self.permissions.ensure(FormAction.DELETE)
        self._log_action_start("update_on_delete")

        self.context = self._action_context(FormContext.UPDATE, None)
        record = self.find_record(record_id)
        self.init_form(record)

        self._require_store().delete(record)

        self.host.after_delete(record)

        self._log_success("update_on_delete", "表单记录已删除", record)
        self.notifier.success(self.messages().custom_message("flashDelete"))
        return self.make_redirect("delete", record)

    # ------------------------------------------------------------------ #
    # Preview
    # ------------------------------------------------------------------ #
    def preview(self, record_id: RecordIdentifier | None = None, context: str | None = None) -> None:
        """预览页面动作."""
        self.permissions.ensure(FormAction.PREVIEW)
        self._log_action_start("preview")

        try:
            self.context = self._action_context(FormContext.PREVIEW, context)
            self._apply_page_title(FormContext.PREVIEW, FormTitles.PREVIEW)

            record = self.find_record(record_id)
            self.init_form(record)
        except Exception as exc:
            self._report_failure("preview", exc)

    # ------------------------------------------------------------------ #
    # 记录
    # ------------------------------------------------------------------ #
    def create_record(self) -> Any:
        record = self.host.create_record_object()
        return self.host.extend_record(record) or record

    def find_record(self, record_id: RecordIdentifier | None) -> Any:
        """按 ID 查找记录.

        Raises:
            NotFoundError: ID 为空或记录不存在时抛出,文案来自 notFound 消息.

        """
        if record_id is None or not str(record_id).strip():
            log_with_context("warning", "表单记录 ID 缺失", module=LOG_MODULE, action="find_record")
            raise NotFoundError(self.messages().custom_message("notFound", FormMessages.MISSING_ID))

        record = self.host.locate_record_object(record_id)
        if record is None:
            model_class_name = self.config.model_class_name
            log_with_context(
                "warning",
                "表单记录不存在",
                module=LOG_MODULE,
                action="find_record",
                context={"model_class": model_class_name, "record_id": str(record_id)},
            )
            message = self.messages().custom_message("notFound", None, {"class": model_class_name, "id": record_id})
            raise NotFoundError(message, extra={"model_class": model_class_name, "record_id": str(record_id)})

        return self.host.extend_record(record) or record

    # ------------------------------------------------------------------ #
    # 消息与跳转
    # ------------------------------------------------------------------ #
    def messages(self) -> MessageResolver:
        """返回绑定当前动作上下文的消息解析器."""
        return MessageResolver(
            self.config,
            self.context or "",
            translator=self.translator,
            default_record_name=self.default_record_name,
        )

    def custom_message(self, name: str, default: str | None = None, extras: MessageVars | None = None) -> str:
        return self.messages().custom_message(name, default, extras)

    def make_redirect(
        self,
        context: str,
        record: Any = None,
        query_params: QueryParams | None = None,
    ) -> RedirectDirective:
        """按请求标记与配置解析跳转结果."""
        return RedirectResolver(self.config, self.request, self.host).resolve(context, record, query_params)

    # ------------------------------------------------------------------ #
    # 视图辅助
    # ------------------------------------------------------------------ #
    def form_render(self, options: Mapping[str, object] | None = None) -> str:
        return self._require_widget().render(dict(options or {}))

    def form_render_field(self, name: str, options: Mapping[str, object] | None = None) -> str:
        return self._require_widget().render_field(name, dict(options or {}))

    def form_refresh_fields(self, names: str | Iterable[str]) -> dict[str, str]:
        """按字段名重新渲染字段,返回 `#<分组 ID>` 到标记的映射.

        Raises:
            FieldNotFoundError: 字段不在当前字段集中时抛出.

        """
        widget = self._require_widget()
        field_names = [names] if isinstance(names, str) else list(names)
        result: dict[str, str] = {}
        for name in field_names:
            field_object = widget.get_field(name)
            if field_object is None:
                raise FieldNotFoundError(ErrorMessages.FIELD_NOT_FOUND.format(field=name), extra={"field": name})
            result[f"#{field_object.get_id('group')}"] = self.form_render_field(name, {"useContainer": False})
        return result

    def form_render_preview(self) -> str:
        return self.form_render({"preview": True})

    def form_has_outside_fields(self) -> bool:
        return self._require_widget().get_tab("outside").has_fields()

    def form_render_outside_fields(self) -> str:
        return self.form_render({"section": "outside"})

    def form_has_primary_tabs(self) -> bool:
        return self._require_widget().get_tab("primary").has_fields()

    def form_render_primary_tabs(self) -> str:
        return self.form_render({"section": "primary"})

    def form_has_secondary_tabs(self) -> bool:
        return self._require_widget().get_tab("secondary").has_fields()

    def form_render_secondary_tabs(self) -> str:
        return self.form_render({"section": "secondary"})

    def form_get_widget(self) -> FormWidget:
        return self._require_widget()

    def form_get_id(self, suffix: str | None = None) -> str:
        return self._require_widget().get_id(suffix)

    def form_get_session_key(self) -> str:
        return self._require_widget().get_session_key()

    def form_set_save_value(self, key: str, value: object) -> None:
        """覆盖保存数据中的字段,值为 None 时该字段从保存数据中移除."""
        self._require_widget().set_save_data_override(key, value)

    def form_get_model(self) -> Any:
        return self.model

    def form_get_context(self) -> str:
        """回传字段 form_context 优先,其次为动作解析出的上下文."""
        return self.request.form_context or self.context or ""

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def _action_context(self, action: FormContext, explicit: str | None) -> str:
        if explicit:
            return context_value(explicit)
        return str(self.config.resolve(f"{action.value}.context", action.value))

    def _apply_page_title(self, action: FormContext, default: str) -> None:
        if getattr(self.host, "page_title", None):
            return
        self.host.page_title = self.messages().lang(f"{action.value}.title", default)

    def _check_multisite(
        self,
        record: Any,
        record_id: RecordIdentifier | None,
        context: str | None,
    ) -> RedirectDirective | None:
        if not self.host.is_multisite_aware(record):
            return None
        redirect = self.host.pending_multisite_redirect(FormContext.CREATE.value, record)
        if redirect:
            return redirect
        self.host.register_site_switch_handler(partial(self.update, record_id, context))
        return None

    def _persist(self, record: Any) -> None:
        widget = self._require_widget()
        self._require_store().save(
            record,
            widget.get_save_data(),
            session_key=widget.get_session_key(),
            propagate=True,
        )

    def _require_widget(self) -> FormWidget:
        if self.widget is None:
            raise PreconditionError(ErrorMessages.FORM_NOT_READY)
        return self.widget

    def _require_store(self) -> RecordStore:
        if self.record_store is None:
            msg = f"{self.__class__.__name__} 未配置 record_store"
            raise SystemError(msg)
        return self.record_store

    def _report_failure(self, action: str, exc: Exception) -> None:
        log_with_context(
            "error",
            "表单页面动作失败",
            module=LOG_MODULE,
            action=action,
            context={"form_context": self.context},
            extra={"error_type": exc.__class__.__name__, "error_message": str(exc)},
        )
        self.host.report_unhandled_failure(exc)

    def _log_action_start(self, action: str) -> None:
        log_with_context(
            "debug",
            "表单动作开始",
            module=LOG_MODULE,
            action=action,
            context={"model_class": self.config.model_class_name},
            include_actor=False,
        )

    def _log_success(self, action: str, event: str, record: Any) -> None:
        record_id = getattr(record, "id", None)
        log_with_context(
            "info",
            event,
            module=LOG_MODULE,
            action=action,
            context={
                "model_class": self.config.model_class_name,
                "record_id": str(record_id) if record_id is not None else None,
                "form_context": self.context,
            },
        )


__all__ = ["FormController"]
