"""admin-forms - 基础枚举与错误文案.

异常元信息(errors)与 Settings 的日志级别校验共用这里的定义.
"""

from enum import Enum


class LogLevel(Enum):
    """Settings.log_level 允许的取值."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class ErrorCategory(Enum):
    """表单异常所属分类."""

    BUSINESS = "business"
    AUTHORIZATION = "authorization"
    CONFIGURATION = "configuration"
    SYSTEM = "system"


class ErrorSeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorMessages:
    """异常默认文案,按 AppError.message_key 查找."""

    INTERNAL_ERROR = "服务器内部错误"
    PERMISSION_DENIED = "无权执行该表单操作"
    RESOURCE_NOT_FOUND = "表单记录不存在"

    CONFIG_INVALID = "表单配置缺少必需字段: {fields}"
    FORM_NOT_READY = "表单尚未初始化,请先调用 init_form"
    FIELD_NOT_FOUND = "表单定义中不存在字段 {field}"


__all__ = [
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "LogLevel",
]
