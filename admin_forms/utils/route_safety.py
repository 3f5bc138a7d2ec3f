"""结构化日志助手.

提供 `log_with_context`,统一表单动作日志的 module/action/actor 字段.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal, TypedDict, Unpack, cast

from flask_login import current_user

from admin_forms.utils.structlog_config import get_logger

if TYPE_CHECKING:
    from admin_forms.types import ContextDict, LoggerExtra

LogLevel = Literal["debug", "info", "warning", "error", "critical"]


class LogContextOptions(TypedDict, total=False):
    """结构化日志可选参数."""

    context: ContextDict | None
    extra: LoggerExtra | None
    include_actor: bool


def _resolve_actor_id() -> object | None:
    # 无应用/请求上下文时 current_user 代理会抛 RuntimeError; 未配置 LoginManager 时抛 AttributeError
    try:
        return getattr(current_user, "id", None)
    except (RuntimeError, AttributeError):
        return None


def log_with_context(
    level: LogLevel,
    event: str,
    *,
    module: str,
    action: str,
    **options: Unpack[LogContextOptions],
) -> None:
    """记录带有统一上下文字段的结构化日志.

    Args:
        level: 日志级别,使用 structlog 的方法名,例如 "info"、"error".
        event: 日志事件描述,建议使用动词短语.
        module: 所属模块或领域,用于快速过滤.
        action: 当前操作名称,通常对应表单动作名.
        **options: 支持 context、extra、include_actor 选项以扩展日志内容.

    """
    logger = get_logger("admin_forms")
    payload: ContextDict = {"module": module, "action": action}

    if options.get("include_actor", True):
        actor_id = _resolve_actor_id()
        if actor_id is not None:
            payload.setdefault("actor_id", cast("int | str", actor_id))

    context_opt = options.get("context")
    extra_opt = options.get("extra")
    if context_opt:
        payload.update(context_opt)
    if extra_opt:
        payload.update(extra_opt)

    log_method = getattr(logger, level, logger.error)
    log_method(event, **payload)


__all__ = ["log_with_context"]
