"""admin-forms - 统一异常定义.

表单行为只抛出 AppError 子类,每个子类通过 ExceptionMetadata 声明状态码、分类与严重度,
视图适配层据此生成错误响应.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from werkzeug.exceptions import HTTPException

from admin_forms.constants import HttpStatus
from admin_forms.constants.system_constants import ErrorCategory, ErrorMessages, ErrorSeverity

if TYPE_CHECKING:
    from admin_forms.types.structures import LoggerExtra


@dataclass(frozen=True, slots=True)
class ExceptionMetadata:
    """异常类型的默认状态码、分类、严重度与文案键."""

    status_code: int
    category: ErrorCategory
    severity: ErrorSeverity
    default_message_key: str


class AppError(Exception):
    """表单行为异常基类.

    Args:
        message: 错误文案,为空时按 message_key 取 ErrorMessages 中的默认文案.
        message_key: 文案键,默认取类元信息.
        extra: 写入结构化日志的附加字段.
        severity: 覆盖默认严重度.
        category: 覆盖默认分类.
        status_code: 覆盖默认 HTTP 状态码.

    """

    metadata = ExceptionMetadata(
        status_code=HttpStatus.INTERNAL_SERVER_ERROR,
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        default_message_key="INTERNAL_ERROR",
    )

    def __init__(
        self,
        message: str | None = None,
        *,
        message_key: str | None = None,
        extra: LoggerExtra | None = None,
        severity: ErrorSeverity | None = None,
        category: ErrorCategory | None = None,
        status_code: int | None = None,
    ) -> None:
        self.message_key = message_key or self.metadata.default_message_key
        self.message = message or getattr(ErrorMessages, self.message_key, ErrorMessages.INTERNAL_ERROR)
        self.extra = dict(extra or {})
        self.severity = severity or self.metadata.severity
        self.category = category or self.metadata.category
        self.status_code = int(status_code or self.metadata.status_code)
        super().__init__(self.message)


class ConfigurationError(AppError):
    """表单配置缺少必需字段或无法解析,在控制器构造阶段抛出."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.INTERNAL_SERVER_ERROR,
        category=ErrorCategory.CONFIGURATION,
        severity=ErrorSeverity.CRITICAL,
        default_message_key="INTERNAL_ERROR",
    )


class AuthorizationError(AppError):
    metadata = ExceptionMetadata(
        status_code=HttpStatus.FORBIDDEN,
        category=ErrorCategory.AUTHORIZATION,
        severity=ErrorSeverity.MEDIUM,
        default_message_key="PERMISSION_DENIED",
    )


class AccessDeniedError(AuthorizationError):
    """表单动作被权限门拒绝,在任何记录查找与写入之前抛出."""


class NotFoundError(AppError):
    """按 ID 查找的记录不存在,文案由自定义消息 `notFound` 解析."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.NOT_FOUND,
        category=ErrorCategory.BUSINESS,
        severity=ErrorSeverity.LOW,
        default_message_key="RESOURCE_NOT_FOUND",
    )


class PreconditionError(AppError):
    """在 init_form 之前调用了渲染相关的辅助方法."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.INTERNAL_SERVER_ERROR,
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        default_message_key="FORM_NOT_READY",
    )


class FieldNotFoundError(AppError):
    """局部刷新时请求了当前字段集中不存在的字段."""

    metadata = ExceptionMetadata(
        status_code=HttpStatus.INTERNAL_SERVER_ERROR,
        category=ErrorCategory.SYSTEM,
        severity=ErrorSeverity.HIGH,
        default_message_key="FIELD_NOT_FOUND",
    )


class SystemError(AppError):
    """缺少协作者等部署层面的错误."""


def map_exception_to_status(error: Exception, default: int = HttpStatus.INTERNAL_SERVER_ERROR) -> int:
    """根据异常类型推导 HTTP 状态码.

    Args:
        error: 捕获到的异常对象.
        default: 无法识别时的状态码.

    Returns:
        int: HTTP 状态码.

    """
    if isinstance(error, AppError):
        return error.status_code
    if isinstance(error, HTTPException) and error.code is not None:
        return int(error.code)
    return int(default)


__all__ = [
    "AccessDeniedError",
    "AppError",
    "AuthorizationError",
    "ConfigurationError",
    "ExceptionMetadata",
    "FieldNotFoundError",
    "NotFoundError",
    "PreconditionError",
    "SystemError",
    "map_exception_to_status",
]
