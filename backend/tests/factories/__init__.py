"""Factory Boy base wiring for persisting test data through the test session."""

from __future__ import annotations

import factory


class SQLAlchemySession:
    """Hold the per-test session the factories write through."""

    _session = None

    @classmethod
    def set(cls, session) -> None:
        cls._session = session

    @classmethod
    def reset(cls) -> None:
        cls._session = None

    @classmethod
    def get(cls):
        if cls._session is None:
            raise RuntimeError("No factory session bound; request the 'session' fixture.")
        return cls._session


class BaseFactory(factory.alchemy.SQLAlchemyModelFactory):
    """Flush-only persistence: tests decide when (and whether) to commit."""

    class Meta:
        abstract = True
        sqlalchemy_session_factory = SQLAlchemySession.get
        sqlalchemy_session_persistence = "flush"
