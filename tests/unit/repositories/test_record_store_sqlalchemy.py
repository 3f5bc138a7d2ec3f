from __future__ import annotations

import pytest
from sqlalchemy import String, create_engine
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from admin_forms.errors import NotFoundError
from admin_forms.forms.controller import FormController
from admin_forms.repositories import SqlAlchemyRecordStore
from form_doubles import RecordingNotifier, StubAuthorizer, WidgetFactory


class _Base(DeclarativeBase):
    pass


class Post(_Base):
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    body: Mapped[str | None] = mapped_column(String(500), nullable=True)


def _session():
    engine = create_engine("sqlite:///:memory:")
    _Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)()


def _controller(store: SqlAlchemyRecordStore, payload: dict[str, object]) -> FormController:
    return FormController(
        {"modelClass": Post, "name": "Post", "form": {"fields": {"title": {}, "body": {}}}},
        widget_factory=WidgetFactory(payload),
        record_store=store,
        authorizer=StubAuthorizer(),
        notifier=RecordingNotifier(),
    )


@pytest.mark.unit
def test_create_update_delete_round_trip() -> None:
    session = _session()
    store = SqlAlchemyRecordStore(session)

    _controller(store, {"title": "First", "body": "Hello"}).create_on_save()
    created = session.query(Post).one()
    assert (created.title, created.body) == ("First", "Hello")

    _controller(store, {"title": "Second", "body": "World"}).update_on_save(str(created.id))
    session.expire_all()
    updated = session.get(Post, created.id)
    assert (updated.title, updated.body) == ("Second", "World")

    _controller(store, {}).update_on_delete(created.id)
    with pytest.raises(NotFoundError):
        _controller(store, {}).find_record(created.id)


@pytest.mark.unit
def test_find_returns_none_for_non_numeric_identifier() -> None:
    store = SqlAlchemyRecordStore(_session())

    assert store.find(store.query(Post), Post, "abc") is None


@pytest.mark.unit
def test_save_ignores_unknown_attributes() -> None:
    session = _session()
    store = SqlAlchemyRecordStore(session)
    post = store.new_record(Post)

    store.save(post, {"title": "Kept", "unknown": "dropped"})

    assert session.get(Post, post.id).title == "Kept"
    assert not hasattr(post, "unknown")


@pytest.mark.unit
def test_failed_commit_rolls_back_and_propagates() -> None:
    session = _session()
    store = SqlAlchemyRecordStore(session)

    with pytest.raises(IntegrityError):
        store.save(store.new_record(Post), {"body": "no title"})

    assert session.query(Post).count() == 0
