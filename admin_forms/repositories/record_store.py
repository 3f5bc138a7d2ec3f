"""表单记录 Repository.

职责:
- 记录的创建、按主键查找、保存与删除
- 保存/删除失败时回滚并原样抛出,不做重试
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import inspect, select
from sqlalchemy.exc import SQLAlchemyError

from admin_forms.errors import ConfigurationError
from admin_forms.utils.structlog_config import get_logger

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from sqlalchemy.sql import Select

    from admin_forms.types import RecordIdentifier, SavePayload

logger = get_logger(__name__)


class SqlAlchemyRecordStore:
    """基于 SQLAlchemy Session 的记录仓储.

    Flask-SQLAlchemy 项目可直接传入 `db.session`.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def new_record(self, model_class: type[Any]) -> Any:
        return model_class()

    def query(self, model_class: type[Any]) -> Select[Any]:
        return select(model_class)

    def find(self, query: Select[Any], model_class: type[Any], identifier: RecordIdentifier) -> Any | None:
        """在 query 基础上按主键过滤,不存在时返回 None."""
        primary_keys = inspect(model_class).primary_key
        if len(primary_keys) != 1:
            msg = f"{model_class.__name__} 必须只有一个主键列"
            raise ConfigurationError(msg)
        primary_key = primary_keys[0]
        value = self._coerce_identifier(primary_key, identifier)
        if value is None:
            return None
        return self.session.execute(query.where(primary_key == value)).scalars().first()

    def save(
        self,
        record: Any,
        data: SavePayload,
        *,
        session_key: str | None = None,
        propagate: bool = True,
    ) -> None:
        """将保存数据写入记录并提交.

        只写入记录上已存在的属性,未知字段忽略.

        Raises:
            SQLAlchemyError: 提交失败时回滚后原样抛出.

        """
        del propagate
        for key, value in data.items():
            if hasattr(record, key):
                setattr(record, key, value)

        try:
            self.session.add(record)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("表单记录保存失败", model_class=type(record).__name__, session_key=session_key)
            raise

    def delete(self, record: Any) -> None:
        """删除记录并提交,失败时回滚后原样抛出."""
        try:
            self.session.delete(record)
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            logger.exception("表单记录删除失败", model_class=type(record).__name__)
            raise

    @staticmethod
    def _coerce_identifier(primary_key: Any, identifier: RecordIdentifier) -> Any | None:
        # 路由参数通常是字符串,整型主键需要转换
        try:
            python_type = primary_key.type.python_type
        except NotImplementedError:
            return identifier
        if python_type is int and isinstance(identifier, str):
            try:
                return int(identifier)
            except ValueError:
                return None
        return identifier


__all__ = ["SqlAlchemyRecordStore"]
