"""admin-forms - 统一配置读取与校验.

目标:
- 将环境变量读取、默认值、校验集中到单一入口,避免散落在各模块中重复解析.
- 视图适配层与日志只消费 Settings,不再直接读取环境变量.

说明:
- Settings 使用 `pydantic-settings` 的 `BaseSettings` 从环境变量与本地 `.env`(可选)读取配置.
"""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from admin_forms.constants import DEFAULT_RECORD_NAME
from admin_forms.constants.system_constants import LogLevel

PROJECT_ROOT = Path(__file__).resolve().parent.parent
DOTENV_PATH = PROJECT_ROOT / ".env"

APP_VERSION = "1.0.0"
DEFAULT_BACKEND_URI = "/backend"
DEFAULT_LOG_LEVEL = "INFO"


class Settings(BaseSettings):
    """表单行为运行时设置集合."""

    model_config = SettingsConfigDict(
        env_ignore_empty=True,
        extra="ignore",
        frozen=True,
        str_strip_whitespace=True,
    )

    app_version: str = APP_VERSION

    # 后台路径前缀,相对跳转地址会拼接在其后
    backend_uri: str = Field(default=DEFAULT_BACKEND_URI, validation_alias="FORMS_BACKEND_URI")
    config_dir: Path | None = Field(default=None, validation_alias="FORMS_CONFIG_DIR")
    default_record_name: str = Field(default=DEFAULT_RECORD_NAME, validation_alias="FORMS_DEFAULT_RECORD_NAME")

    log_level: str = Field(default=DEFAULT_LOG_LEVEL, validation_alias="LOG_LEVEL")
    enable_debug_log: bool = Field(default=False, validation_alias="ENABLE_DEBUG_LOG")

    @field_validator("backend_uri")
    @classmethod
    def _normalize_backend_uri(cls, value: str) -> str:
        normalized = value.strip().rstrip("/")
        if not normalized:
            return ""
        if not normalized.startswith("/"):
            normalized = f"/{normalized}"
        return normalized

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = value.strip().upper()
        valid_levels = {level.value for level in LogLevel}
        if normalized not in valid_levels:
            msg = f"LOG_LEVEL 取值无效: {value}"
            raise ValueError(msg)
        return normalized

    @classmethod
    def load(cls) -> Settings:
        """从环境变量加载 Settings 并执行必要校验."""
        load_dotenv(dotenv_path=DOTENV_PATH if DOTENV_PATH.exists() else None, override=False)
        return cls()


__all__ = ["APP_VERSION", "Settings"]
