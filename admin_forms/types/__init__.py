"""共享类型定义."""

from .protocols import (
    Authorizer,
    FormFieldDescriptor,
    FormHost,
    FormTab,
    FormWidget,
    Notifier,
    RecordStore,
    Translator,
    WidgetFactory,
)
from .structures import (
    ConfigMapping,
    ContextDict,
    JsonDict,
    JsonValue,
    LoggerExtra,
    MessageVars,
    QueryParams,
    RecordIdentifier,
    SavePayload,
    ScalarValue,
    StructlogEventDict,
)

__all__ = [
    "Authorizer",
    "ConfigMapping",
    "ContextDict",
    "FormFieldDescriptor",
    "FormHost",
    "FormTab",
    "FormWidget",
    "JsonDict",
    "JsonValue",
    "LoggerExtra",
    "MessageVars",
    "Notifier",
    "QueryParams",
    "RecordIdentifier",
    "RecordStore",
    "SavePayload",
    "ScalarValue",
    "StructlogEventDict",
    "Translator",
    "WidgetFactory",
]
