"""Database infrastructure: engine, session factory and the change-feed hooks."""

from __future__ import annotations

from contextlib import AbstractContextManager, contextmanager
from typing import Callable, Iterator, Tuple

from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlmodel import Session, SQLModel, create_engine

from ..config import BaseConfig
from ..services.notifier import DELETE, INSERT, UPDATE, ChangeEvent, ChangeNotifier

SessionFactory = Callable[[], AbstractContextManager[Session]]

_PENDING_KEY = "alphawealth.pending_changes"


def create_db_engine(config: BaseConfig) -> Engine:
    """Create SQLModel engine from configuration."""
    engine_options = config.sqlalchemy_engine_options()
    engine = create_engine(config.DATABASE_URL, **engine_options)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # pragma: no cover
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def init_database(engine: Engine) -> None:
    """Initialize database schema."""
    # Import all models to ensure they're registered
    from .. import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def create_sessionmaker(engine: Engine) -> sessionmaker:
    """Return the sessionmaker every unit of work is opened from."""

    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


def create_session_factory(maker: sessionmaker) -> SessionFactory:
    """Create a session factory yielding a committed-on-exit session."""

    @contextmanager
    def factory() -> Iterator[Session]:
        session = maker()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    return factory


def attach_change_feed(maker: sessionmaker, notifier: ChangeNotifier) -> None:
    """Publish (table, owner) change events after every successful commit.

    Changes are collected at flush time and only announced once the enclosing
    transaction commits; a rollback discards them.
    """

    @event.listens_for(maker, "after_flush")
    def _collect(session, flush_context) -> None:
        pending: dict[tuple[str, int], str] = session.info.setdefault(_PENDING_KEY, {})
        for action, objects in (
            (INSERT, session.new),
            (UPDATE, session.dirty),
            (DELETE, session.deleted),
        ):
            for obj in objects:
                table = getattr(obj, "__tablename__", None)
                owner_id = getattr(obj, "user_id", None)
                if table is None or owner_id is None:
                    continue
                if action == UPDATE and not session.is_modified(obj, include_collections=False):
                    continue
                pending.setdefault((table, owner_id), action)

    @event.listens_for(maker, "after_commit")
    def _publish(session) -> None:
        pending = session.info.pop(_PENDING_KEY, None)
        if not pending:
            return
        for (table, owner_id), action in pending.items():
            notifier.publish(ChangeEvent(table=table, owner_id=owner_id, action=action))

    @event.listens_for(maker, "after_soft_rollback")
    def _discard(session, previous_transaction) -> None:
        session.info.pop(_PENDING_KEY, None)


def bootstrap_database(
    config: BaseConfig | None = None, notifier: ChangeNotifier | None = None
) -> Tuple[Engine, SessionFactory, ChangeNotifier]:
    """Convenience bootstrap for engine + session factory + change feed with schema init.

    Returns (engine, session_factory, notifier).
    """

    cfg = config or BaseConfig()
    engine = create_db_engine(cfg)
    init_database(engine)
    notifier = notifier or ChangeNotifier()
    maker = create_sessionmaker(engine)
    attach_change_feed(maker, notifier)
    return engine, create_session_factory(maker), notifier
