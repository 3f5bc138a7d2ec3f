"""表单行为使用的常量."""

from http import HTTPStatus as HttpStatus

from .flash_categories import FlashCategory
from .form_messages import DEFAULT_RECORD_NAME, UNRESOLVED_MESSAGE, FormMessages, FormTitles
from .system_constants import ErrorCategory, ErrorMessages, ErrorSeverity, LogLevel

__all__ = [
    "DEFAULT_RECORD_NAME",
    "UNRESOLVED_MESSAGE",
    "ErrorCategory",
    "ErrorMessages",
    "ErrorSeverity",
    "FlashCategory",
    "FormMessages",
    "FormTitles",
    "HttpStatus",
    "LogLevel",
]
