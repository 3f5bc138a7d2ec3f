"""admin-forms 的结构化日志配置与辅助函数."""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any, cast

import structlog
from flask import has_request_context, request

from admin_forms.settings import APP_VERSION, Settings

if TYPE_CHECKING:
    from structlog.typing import BindableLogger, Processor

    from admin_forms.types import StructlogEventDict


class DebugFilter:
    """根据配置决定是否丢弃 DEBUG 日志的处理器.

    Attributes:
        enabled: 是否启用 DEBUG 日志.

    """

    def __init__(self, *, enabled: bool = False) -> None:
        self.enabled = enabled

    def set_enabled(self, *, enabled: bool) -> None:
        """设置是否启用 DEBUG 日志."""
        self.enabled = enabled

    def __call__(self, _logger: BindableLogger, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        if method_name == "debug" and not self.enabled:
            raise structlog.DropEvent
        return event_dict


class StructlogConfig:
    """structlog 配置核心类.

    负责配置 structlog 的处理器链,附加请求上下文与版本信息.

    Attributes:
        debug_filter: 调试日志过滤器.
        configured: 是否已配置标志.

    Example:
        >>> config = StructlogConfig()
        >>> config.configure(settings)
        >>> logger = get_logger('admin_forms.forms')

    """

    def __init__(self) -> None:
        self.debug_filter = DebugFilter(enabled=False)
        self.configured = False

    def configure(self, settings: Settings | None = None) -> None:
        """初始化 structlog 处理器(幂等).

        Args:
            settings: 可选的配置对象,提供时同步日志级别与 DEBUG 开关.

        """
        if not self.configured:
            processors = [
                self.debug_filter,
                structlog.stdlib.add_log_level,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                self._add_request_context,
                self._add_global_context,
                self._get_renderer(),
            ]
            structlog.configure(
                processors=cast("list[Processor]", processors),
                context_class=dict,
                logger_factory=structlog.stdlib.LoggerFactory(),
                wrapper_class=structlog.stdlib.BoundLogger,
                cache_logger_on_first_use=True,
            )
            self.configured = True

        if settings is not None:
            self.debug_filter.set_enabled(enabled=settings.enable_debug_log)
            logging.getLogger("admin_forms").setLevel(settings.log_level)

    @staticmethod
    def _add_request_context(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        """向事件字典写入请求路径与方法."""
        if has_request_context():
            event_dict.setdefault("request_path", request.path)
            event_dict.setdefault("request_method", request.method)
        return event_dict

    @staticmethod
    def _add_global_context(
        _logger: BindableLogger,
        _method_name: str,
        event_dict: StructlogEventDict,
    ) -> StructlogEventDict:
        event_dict["app_version"] = APP_VERSION
        event_dict["logger_name"] = getattr(_logger, "name", "unknown")
        return event_dict

    @staticmethod
    def _get_renderer() -> Processor:
        """终端输出使用彩色渲染,其余场景输出 JSON."""
        if sys.stdout.isatty():
            return structlog.dev.ConsoleRenderer(colors=True)
        return structlog.processors.JSONRenderer()


structlog_config = StructlogConfig()


def configure_structlog(settings: Settings | None = None) -> None:
    """按 Settings 配置结构化日志."""
    structlog_config.configure(settings)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """获取结构化日志记录器.

    Args:
        name: 日志记录器名称,通常使用模块名.

    Returns:
        绑定的 structlog 日志记录器实例.

    Example:
        >>> logger = get_logger('admin_forms.forms')
        >>> logger.info('表单保存成功', record_id=5)

    """
    structlog_config.configure()
    return structlog.get_logger(name)


__all__ = ["StructlogConfig", "configure_structlog", "get_logger", "structlog_config"]
