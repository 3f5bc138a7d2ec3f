"""表单配置解析.

声明式配置(dict 或 YAML 文件)在控制器构造时校验必需字段 `modelClass` 与 `form`,
之后通过 `ConfigTree.resolve` 按路径读取,`{context}.*` 覆盖全局同名配置.
每次 `init_form` 生成一个只读的 `FormConfig` 快照交给渲染组件.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from importlib import import_module
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from admin_forms.constants import DEFAULT_RECORD_NAME
from admin_forms.constants.system_constants import ErrorMessages
from admin_forms.errors import ConfigurationError
from admin_forms.forms.context import CLOSE_SUFFIX, FormContext
from admin_forms.types import ConfigMapping

REQUIRED_CONFIG_KEYS: tuple[str, ...] = ("modelClass", "form")

# 顶层中不属于上下文分组的键
_NON_CONTEXT_KEYS = frozenset({"modelClass", "form", "permissions", "customMessages", "defaultRedirect", "name"})

_PATH_TOKEN_PATTERN = re.compile(r"[^.\[\]]+")


class FormConfigSource(BaseModel):
    """表单配置的顶层结构,只校验必需字段,其余键原样保留."""

    model_config = ConfigDict(extra="allow", arbitrary_types_allowed=True)

    record_class: Any = Field(validation_alias="modelClass")
    form: Any

    @field_validator("record_class", "form")
    @classmethod
    def _reject_empty(cls, value: Any) -> Any:
        if value is None or value == "":
            raise ValueError("must not be empty")
        return value


@dataclass(frozen=True, slots=True)
class FormConfig:
    """交给渲染组件的配置快照,构建后不再修改.

    Attributes:
        model_class_name: 记录类型的完整名称.
        field_definitions: 当前上下文生效的字段定义.
        context: 当前表单上下文.
        permissions: 动作到权限键的映射.
        redirects: 上下文到跳转模板的映射,包含 `<ctx>-close` 与 `default`.
        custom_messages: 全局自定义消息.
        name: 记录显示名称(翻译键).
        array_name: 表单字段的提交数组名,取记录类名.
        record: 当前记录.
        preview_mode: 是否为预览模式.

    """

    model_class_name: str
    field_definitions: Mapping[str, Any]
    context: str
    permissions: Mapping[str, str]
    redirects: Mapping[str, str]
    custom_messages: Mapping[str, str]
    name: str
    array_name: str
    record: Any = None
    preview_mode: bool = False


def _walk(current: Any, tokens: list[str], default: Any) -> Any:
    for token in tokens:
        if not isinstance(current, Mapping) or token not in current:
            return default
        current = current[token]
    if current is None:
        return default
    return current


def split_config_path(path: str) -> list[str]:
    """拆分 `update.redirect` 或 `update[customMessages][flashCreate]` 形式的路径."""
    return _PATH_TOKEN_PATTERN.findall(path)


def _read_yaml(path: Path) -> Any:
    try:
        with path.open(encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except OSError as exc:
        msg = f"无法读取表单配置文件: {path}"
        raise ConfigurationError(msg, extra={"path": str(path)}) from exc
    except yaml.YAMLError as exc:
        msg = f"表单配置文件格式错误: {path}"
        raise ConfigurationError(msg, extra={"path": str(path)}) from exc


def _resolve_path(source: str | Path, base_dir: Path | None) -> Path:
    path = Path(source)
    if not path.is_absolute() and base_dir is not None:
        path = base_dir / path
    return path


def load_config_source(source: ConfigMapping | str | Path, base_dir: Path | None = None) -> tuple[dict[str, Any], Path | None]:
    """加载声明式配置.

    Args:
        source: 配置字典或 YAML 文件路径.
        base_dir: 相对路径的基准目录.

    Returns:
        (配置字典, 配置所在目录). 字典来源时目录沿用 base_dir.

    Raises:
        ConfigurationError: 文件无法读取或内容不是映射时抛出.

    """
    if isinstance(source, Mapping):
        return dict(source), base_dir

    path = _resolve_path(source, base_dir)
    data = _read_yaml(path)
    if not isinstance(data, Mapping):
        msg = f"表单配置文件内容必须是映射: {path}"
        raise ConfigurationError(msg, extra={"path": str(path)})
    return dict(data), path.parent


def resolve_model_class(model_class: str | type[Any]) -> type[Any]:
    """将 `pkg.module:Class` 或 `pkg.module.Class` 解析为类对象."""
    if isinstance(model_class, type):
        return model_class

    normalized = model_class.strip()
    if ":" in normalized:
        module_name, _, attr = normalized.partition(":")
    else:
        module_name, _, attr = normalized.rpartition(".")
    if not module_name or not attr:
        msg = f"modelClass 格式无效: {model_class}"
        raise ConfigurationError(msg)

    try:
        module = import_module(module_name)
        resolved = getattr(module, attr)
    except (ImportError, AttributeError) as exc:
        msg = f"无法加载 modelClass: {model_class}"
        raise ConfigurationError(msg, extra={"model_class": normalized}) from exc
    if not isinstance(resolved, type):
        msg = f"modelClass 不是类: {model_class}"
        raise ConfigurationError(msg)
    return resolved


class ConfigTree:
    """合并后的声明式配置的只读视图."""

    def __init__(self, data: ConfigMapping, *, base_dir: Path | None = None) -> None:
        self._data: Mapping[str, Any] = MappingProxyType(dict(data))
        self.base_dir = base_dir

    @classmethod
    def from_source(
        cls,
        source: ConfigMapping | str | Path,
        *,
        base_dir: Path | None = None,
    ) -> ConfigTree:
        """加载并校验配置.

        Raises:
            ConfigurationError: 缺少 `modelClass` 或 `form` 时抛出.

        """
        data, resolved_dir = load_config_source(source, base_dir)
        try:
            FormConfigSource.model_validate(data)
        except ValidationError as exc:
            missing = sorted({str(error["loc"][0]) for error in exc.errors() if error.get("loc")})
            message = ErrorMessages.CONFIG_INVALID.format(fields=", ".join(missing or REQUIRED_CONFIG_KEYS))
            raise ConfigurationError(message, extra={"missing": missing}) from exc
        return cls(data, base_dir=resolved_dir)

    def resolve(self, path: str, default: Any = None) -> Any:
        """按路径读取配置,缺失或值为 None 时返回 default."""
        return _walk(self._data, split_config_path(path), default)

    def resolve_context(self, context: str, path: str, default: Any = None) -> Any:
        """读取 `{context}` 分组下的配置.

        上下文名整体作为一个键,允许包含 `.` 或 `[]`,例如 `v2.edit`.
        """
        return _walk(self._data, [context, *split_config_path(path)], default)

    def as_dict(self) -> dict[str, Any]:
        return dict(self._data)

    @property
    def model_class(self) -> str | type[Any]:
        model_class = self._data.get("modelClass")
        if not model_class:
            message = ErrorMessages.CONFIG_INVALID.format(fields="modelClass")
            raise ConfigurationError(message, extra={"missing": ["modelClass"]})
        return model_class

    @property
    def model_class_name(self) -> str:
        model_class = self.model_class
        if isinstance(model_class, type):
            return f"{model_class.__module__}.{model_class.__qualname__}"
        return str(model_class).strip()

    def context_sections(self) -> list[str]:
        """返回顶层中作为上下文分组的键,例如 create/update/preview."""
        return [
            key
            for key, value in self._data.items()
            if key not in _NON_CONTEXT_KEYS and isinstance(value, Mapping)
        ]

    def redirect_templates(self) -> dict[str, str]:
        """汇总各上下文的跳转模板."""
        templates: dict[str, str] = {}
        for section in self.context_sections():
            redirect = self.resolve_context(section, "redirect")
            if redirect:
                templates[section] = str(redirect)
            redirect_close = self.resolve_context(section, "redirectClose")
            if redirect_close:
                templates[f"{section}{CLOSE_SUFFIX}"] = str(redirect_close)
        default_redirect = self.resolve("defaultRedirect")
        if default_redirect:
            templates["default"] = str(default_redirect)
        return templates

    def field_definitions(self, context: str) -> dict[str, Any]:
        """返回上下文生效的字段定义,`{context}.form` 优先于 `form`."""
        fields = self.resolve_context(context, "form", self.resolve("form"))
        if isinstance(fields, (str, Path)):
            fields = _read_yaml(_resolve_path(fields, self.base_dir))
        if fields is None:
            return {}
        if not isinstance(fields, Mapping):
            msg = f"表单字段定义必须是映射: {context}"
            raise ConfigurationError(msg, extra={"context": context})
        return dict(fields)

    def build_snapshot(self, context: str, record: Any = None) -> FormConfig:
        """生成当前上下文的配置快照."""
        if record is not None:
            array_name = type(record).__name__
        else:
            array_name = self.model_class_name.replace(":", ".").rsplit(".", 1)[-1]
        return FormConfig(
            model_class_name=self.model_class_name,
            field_definitions=MappingProxyType(self.field_definitions(context)),
            context=context,
            permissions=MappingProxyType(dict(self.resolve("permissions", {}))),
            redirects=MappingProxyType(self.redirect_templates()),
            custom_messages=MappingProxyType(dict(self.resolve("customMessages", {}))),
            name=str(self.resolve("name", DEFAULT_RECORD_NAME)),
            array_name=array_name,
            record=record,
            preview_mode=context == FormContext.PREVIEW.value,
        )


__all__ = [
    "REQUIRED_CONFIG_KEYS",
    "ConfigTree",
    "FormConfig",
    "FormConfigSource",
    "load_config_source",
    "resolve_model_class",
    "split_config_path",
]
