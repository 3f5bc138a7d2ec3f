"""表单动作权限门.

`permissions.{action}` 未配置时动作无条件放行,配置后交由 Authorizer 判断.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from flask_login import current_user

from admin_forms.errors import AccessDeniedError
from admin_forms.utils.route_safety import log_with_context

if TYPE_CHECKING:
    from admin_forms.forms.config import ConfigTree
    from admin_forms.types import Authorizer


class FormAction(str, Enum):
    """需要权限校验的表单动作."""

    CREATE = "modelCreate"
    UPDATE = "modelUpdate"
    DELETE = "modelDelete"
    PREVIEW = "modelPreview"


class PermissionGate:
    """按配置的权限键校验表单动作."""

    def __init__(self, config: ConfigTree, authorizer: Authorizer) -> None:
        self.config = config
        self.authorizer = authorizer

    def permission_for(self, action: FormAction | str) -> str | None:
        """返回动作配置的权限键,未配置时为 None."""
        key = action.value if isinstance(action, FormAction) else action
        permission = self.config.resolve(f"permissions.{key}")
        return str(permission) if permission else None

    def check(self, action: FormAction | str) -> bool:
        permission = self.permission_for(action)
        if permission is None:
            return True
        return bool(self.authorizer.has_access(permission))

    def ensure(self, action: FormAction | str) -> None:
        """校验动作权限,拒绝时抛出 AccessDeniedError.

        Raises:
            AccessDeniedError: Authorizer 拒绝配置的权限键时抛出.

        """
        if self.check(action):
            return
        key = action.value if isinstance(action, FormAction) else action
        permission = self.permission_for(action)
        log_with_context(
            "warning",
            "表单动作权限不足",
            module="forms",
            action=key,
            context={"permission": permission},
        )
        raise AccessDeniedError(extra={"action": key, "permission": permission})


class FlaskLoginAuthorizer:
    """基于 flask_login.current_user 的权限判断.

    优先调用用户对象的 `has_access`,其次 `has_permission`;匿名用户一律拒绝.
    """

    def has_access(self, permission: str) -> bool:
        # 无请求上下文时代理抛 RuntimeError; 未配置 LoginManager 时抛 AttributeError
        try:
            user = current_user
            authenticated = bool(user) and bool(getattr(user, "is_authenticated", False))
        except (RuntimeError, AttributeError):
            log_with_context(
                "warning",
                "无法读取当前用户,拒绝表单权限",
                module="forms",
                action="has_access",
                context={"permission": permission},
                include_actor=False,
            )
            return False
        if not authenticated:
            return False
        checker = getattr(user, "has_access", None) or getattr(user, "has_permission", None)
        if checker is None:
            return False
        return bool(checker(permission))


class DenyAllAuthorizer:
    """拒绝所有已配置权限键的 Authorizer,FormController 未指定 authorizer 时使用.

    未配置权限键的动作不会询问 Authorizer,因此仍然放行.
    """

    def has_access(self, permission: str) -> bool:
        del permission
        return False


class AllowAllAuthorizer:
    """不做限制的 Authorizer,用于未接入权限系统的后台."""

    def has_access(self, permission: str) -> bool:
        del permission
        return True


__all__ = ["AllowAllAuthorizer", "DenyAllAuthorizer", "FlaskLoginAuthorizer", "FormAction", "PermissionGate"]
