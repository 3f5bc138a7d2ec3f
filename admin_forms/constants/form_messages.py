"""表单行为内置文案.

自定义消息未配置时的兜底模板,`:name` 等占位符在解析时替换.
"""

from __future__ import annotations

from typing import ClassVar

UNRESOLVED_MESSAGE = "???"
DEFAULT_RECORD_NAME = "Record"


class FormMessages:
    """内置消息模板."""

    NOT_FOUND = "Form record with an ID of :id could not be found."
    MISSING_ID = "Form record ID is missing."
    FLASH_CREATE = ":name Created"
    FLASH_UPDATE = ":name Updated"
    FLASH_DELETE = ":name Deleted"

    DEFAULTS: ClassVar[dict[str, str]] = {
        "notFound": NOT_FOUND,
        "flashCreate": FLASH_CREATE,
        "flashUpdate": FLASH_UPDATE,
        "flashDelete": FLASH_DELETE,
    }

    # 已废弃: flashSave 同时覆盖 flashCreate 与 flashUpdate
    LEGACY_SAVE_KEY = "flashSave"
    LEGACY_SAVE_ALIASES: ClassVar[frozenset[str]] = frozenset({"flashCreate", "flashUpdate"})


class FormTitles:
    """页面标题默认模板."""

    CREATE = "Create :name"
    UPDATE = "Edit :name"
    PREVIEW = "Preview :name"


__all__ = ["DEFAULT_RECORD_NAME", "UNRESOLVED_MESSAGE", "FormMessages", "FormTitles"]
