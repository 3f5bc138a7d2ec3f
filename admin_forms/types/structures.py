"""通用结构化数据类型别名.

统一 JSON/Mapping 风格的类型,方便在表单行为、视图与日志模块中共享定义.
"""

from __future__ import annotations

from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any, TypeAlias

ScalarValue: TypeAlias = str | int | float | bool | None
JsonValue: TypeAlias = ScalarValue | Sequence["JsonValue"] | Mapping[str, "JsonValue"]
JsonDict: TypeAlias = dict[str, JsonValue]
ContextDict: TypeAlias = dict[str, JsonValue]
LoggerExtra: TypeAlias = Mapping[str, JsonValue]
StructlogEventDict: TypeAlias = MutableMapping[str, JsonValue]

# 声明式配置来自 YAML/dict,值类型不做约束
ConfigMapping: TypeAlias = Mapping[str, Any]
SavePayload: TypeAlias = dict[str, Any]
QueryParams: TypeAlias = Mapping[str, ScalarValue]
MessageVars: TypeAlias = Mapping[str, object]
RecordIdentifier: TypeAlias = int | str

__all__ = [
    "ConfigMapping",
    "ContextDict",
    "JsonDict",
    "JsonValue",
    "LoggerExtra",
    "MessageVars",
    "QueryParams",
    "RecordIdentifier",
    "SavePayload",
    "ScalarValue",
    "StructlogEventDict",
]
