"""表单控制器 Flask 视图.

将 HTTP 请求映射到 FormController 的六个动作,子类只需配置 form_config 并提供渲染组件工厂.

路由约定(见 `register`):
- GET  {prefix}/create                 → create
- POST {prefix}/create                 → create_on_save
- GET  {prefix}/update/<record_id>     → update
- POST {prefix}/update/<record_id>     → update_on_save,`_handler=onDelete` 时为 update_on_delete
- GET  {prefix}/preview/<record_id>    → preview
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from flask import abort, jsonify, redirect, render_template, request
from flask.views import MethodView

from admin_forms.errors import AppError, map_exception_to_status
from admin_forms.forms.controller import FormController
from admin_forms.forms.notifier import FlashNotifier
from admin_forms.forms.permissions import FlaskLoginAuthorizer
from admin_forms.forms.redirects import RedirectDirective, RedirectKind
from admin_forms.forms.request import FormRequest
from admin_forms.settings import Settings
from admin_forms.utils.redirect_safety import build_backend_url
from admin_forms.utils.route_safety import log_with_context
from admin_forms.utils.structlog_config import configure_structlog

if TYPE_CHECKING:
    from flask import Blueprint, Flask
    from flask.typing import ResponseReturnValue

    from admin_forms.types import Authorizer, ConfigMapping, FormHost, RecordStore, WidgetFactory

HANDLER_FIELD = "_handler"
SAVE_HANDLER = "onSave"
DELETE_HANDLER = "onDelete"


class FormControllerView(MethodView):
    """通用表单视图,子类设置 form_config 并实现 build_widget_factory.

    Attributes:
        form_config: 表单配置字典或 YAML 路径.
        template: 展示类动作使用的模板.
        controller_key: 字段扩展注册表中的控制器键.

    """

    form_config: ClassVar[ConfigMapping | str | Path]
    template: ClassVar[str | None] = None
    controller_key: ClassVar[str | None] = None

    def __init__(self, settings: Settings | None = None) -> None:
        """初始化视图.

        Raises:
            RuntimeError: 当子类未配置 form_config 时抛出.

        """
        if not getattr(self, "form_config", None):
            msg = f"{self.__class__.__name__} 未配置 form_config"
            raise RuntimeError(msg)
        self.settings = settings or Settings.load()
        configure_structlog(self.settings)

    # ------------------------------------------------------------------ #
    # 子类扩展点
    # ------------------------------------------------------------------ #
    def build_widget_factory(self) -> WidgetFactory:
        raise NotImplementedError

    def build_record_store(self) -> RecordStore | None:
        return None

    def build_host(self, record_store: RecordStore | None) -> FormHost | None:
        """返回宿主扩展点实现,为 None 时使用默认适配器."""
        del record_store
        return None

    def build_authorizer(self) -> Authorizer:
        return FlaskLoginAuthorizer()

    def make_controller(self) -> FormController:
        record_store = self.build_record_store()
        return FormController(
            self.form_config,
            widget_factory=self.build_widget_factory(),
            host=self.build_host(record_store),
            record_store=record_store,
            authorizer=self.build_authorizer(),
            notifier=FlashNotifier(),
            request=FormRequest.from_mapping(request.form.to_dict()),
            controller_key=self.controller_key,
            base_dir=self.settings.config_dir,
            default_record_name=self.settings.default_record_name,
        )

    # ------------------------------------------------------------------ #
    # HTTP Methods
    # ------------------------------------------------------------------ #
    def get(self, action: str = "create", record_id: str | None = None, context: str | None = None) -> ResponseReturnValue:
        """展示类动作."""
        controller = self.make_controller()
        try:
            if action == "create":
                directive = controller.create(context)
            elif action == "update":
                directive = controller.update(record_id, context)
            elif action == "preview":
                directive = controller.preview(record_id, context)
            else:
                abort(404)
        except AppError as exc:
            return self._error_response(exc, action)

        if directive:
            return self._redirect_response(directive)
        return self.render_form(controller, action)

    def post(self, action: str = "create", record_id: str | None = None, context: str | None = None) -> ResponseReturnValue:
        """写入类动作."""
        controller = self.make_controller()
        handler = request.form.get(HANDLER_FIELD, SAVE_HANDLER)
        try:
            if action == "create" and handler == SAVE_HANDLER:
                directive = controller.create_on_save(context)
            elif action == "update" and handler == SAVE_HANDLER:
                directive = controller.update_on_save(record_id, context)
            elif action == "update" and handler == DELETE_HANDLER:
                directive = controller.update_on_delete(record_id)
            else:
                abort(404)
        except AppError as exc:
            return self._error_response(exc, action)

        if directive:
            return self._redirect_response(directive)
        return jsonify({"success": True})

    # ------------------------------------------------------------------ #
    # Helpers
    # ------------------------------------------------------------------ #
    def render_form(self, controller: FormController, action: str) -> ResponseReturnValue:
        """渲染展示类动作的模板."""
        if not self.template:
            msg = f"{self.__class__.__name__} 未配置 template"
            raise RuntimeError(msg)
        return render_template(
            self.template,
            form=controller,
            form_action=action,
            page_title=getattr(controller.host, "page_title", None),
            fatal_error=getattr(controller.host, "fatal_error", None),
            **controller.vars,
        )

    def _redirect_response(self, directive: RedirectDirective) -> ResponseReturnValue:
        if directive.kind is RedirectKind.REFRESH:
            return redirect(request.url)
        target = directive.target or ""
        if directive.kind is RedirectKind.EXTERNAL:
            return redirect(target)
        return redirect(build_backend_url(target, backend_uri=self.settings.backend_uri))

    def _error_response(self, exc: AppError, action: str) -> ResponseReturnValue:
        status = map_exception_to_status(exc)
        log_with_context(
            "warning",
            "表单请求失败",
            module="views",
            action=action,
            extra={"error_type": exc.__class__.__name__, "status_code": status, "severity": exc.severity.value},
        )
        payload: dict[str, Any] = {"error": True, "message": exc.message, "message_key": exc.message_key}
        return jsonify(payload), status

    @classmethod
    def register(
        cls,
        app: Flask | Blueprint,
        rule_prefix: str,
        endpoint: str,
        **view_kwargs: Any,
    ) -> None:
        """注册 create/update/preview 路由."""
        view = cls.as_view(endpoint, **view_kwargs)
        prefix = rule_prefix.rstrip("/")
        app.add_url_rule(f"{prefix}/create", view_func=view, defaults={"action": "create"}, methods=["GET", "POST"])
        app.add_url_rule(
            f"{prefix}/update/<record_id>",
            view_func=view,
            defaults={"action": "update"},
            methods=["GET", "POST"],
        )
        app.add_url_rule(f"{prefix}/preview/<record_id>", view_func=view, defaults={"action": "preview"}, methods=["GET"])


__all__ = ["FormControllerView"]
