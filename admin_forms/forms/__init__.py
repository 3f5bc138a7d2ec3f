"""
表单行为包

为后台资源控制器提供声明式表单的配置解析、权限、扩展点、跳转与动作编排。
"""

from .config import ConfigTree, FormConfig
from .context import FormContext
from .controller import FormController
from .hooks import EventEmitter, FormEvent, FormExtensionRegistry, HookPipeline, RefreshDataHolder, form_extensions
from .host import FormHostAdapter
from .messages import MessageResolver, interpolate_message
from .notifier import FlashNotifier, LoggingNotifier
from .permissions import AllowAllAuthorizer, DenyAllAuthorizer, FlaskLoginAuthorizer, FormAction, PermissionGate
from .redirects import RedirectDirective, RedirectKind, RedirectResolver
from .request import FormRequest

__all__ = [
    "AllowAllAuthorizer",
    "ConfigTree",
    "DenyAllAuthorizer",
    "EventEmitter",
    "FlashNotifier",
    "FlaskLoginAuthorizer",
    "FormAction",
    "FormConfig",
    "FormContext",
    "FormController",
    "FormEvent",
    "FormExtensionRegistry",
    "FormHostAdapter",
    "FormRequest",
    "HookPipeline",
    "LoggingNotifier",
    "MessageResolver",
    "PermissionGate",
    "RedirectDirective",
    "RedirectKind",
    "RedirectResolver",
    "RefreshDataHolder",
    "form_extensions",
    "interpolate_message",
]
