"""记录仓储."""

from .record_store import SqlAlchemyRecordStore

__all__ = ["SqlAlchemyRecordStore"]
