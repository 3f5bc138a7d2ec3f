# tests/unit/conftest.py
"""单元测试专用 fixtures.

提供表单行为测试共用的配置与桩对象。
"""

from __future__ import annotations

import pytest

from admin_forms.forms.hooks import FormExtensionRegistry


@pytest.fixture(autouse=True)
def _unit_test_env(monkeypatch):
    """为 unit tests 强制注入隔离环境变量.

    目标:
    - 避免开发者本机环境变量影响测试稳定性
    """
    monkeypatch.setenv("FORMS_BACKEND_URI", "/backend")
    monkeypatch.setenv("LOG_LEVEL", "INFO")
    monkeypatch.delenv("FORMS_CONFIG_DIR", raising=False)
    monkeypatch.delenv("FORMS_DEFAULT_RECORD_NAME", raising=False)
    monkeypatch.delenv("ENABLE_DEBUG_LOG", raising=False)


@pytest.fixture
def registry() -> FormExtensionRegistry:
    return FormExtensionRegistry()
