"""Storage handle: engine construction, retrying connect, schema, sessions.

The engine is the process-wide storage handle. It is opened once at
startup (with exponential backoff, since the database container often
comes up after this service) and handed to the SQL adapter.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from loguru import logger
from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.exc import ArgumentError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from tenacity import (
    RetryCallState,
    Retrying,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_before_delay,
    wait_exponential,
)

from catalog.domain.exceptions import ConfigError, StorageError
from catalog.infrastructure.persistence.tables import Base

EngineFactory = Callable[..., Engine]


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff bounds for opening the database, in seconds."""

    initial: float = 0.5
    multiplier: float = 1.5
    max_interval: float = 10.0
    max_elapsed: float = 120.0


def _log_attempt(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Database connection attempt {} failed, retrying in {:.1f}s: {}",
        retry_state.attempt_number,
        retry_state.next_action.sleep if retry_state.next_action else 0.0,
        exc,
    )


def _open(url: str | URL, engine_factory: EngineFactory) -> Engine:
    engine = engine_factory(url, pool_pre_ping=True)
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
    except SQLAlchemyError:
        engine.dispose()
        raise
    return engine


def connect(
    url: str | URL,
    policy: RetryPolicy = RetryPolicy(),
    engine_factory: EngineFactory = create_engine,
    sleep: Callable[[float], None] | None = None,
) -> Engine:
    """Open the database, retrying until ``policy.max_elapsed`` runs out.

    No attempt starts after the budget, so a retry whose wait would cross
    it is not made. Returns the first engine that answers ``SELECT 1``.
    When the budget is exhausted the last driver error is raised as a
    StorageError; a malformed URL or unknown driver fails at once as a
    ConfigError.
    """
    retry_kwargs = {}
    if sleep is not None:
        retry_kwargs["sleep"] = sleep
    retrying = Retrying(
        stop=stop_before_delay(policy.max_elapsed),
        wait=wait_exponential(
            multiplier=policy.initial,
            exp_base=policy.multiplier,
            max=policy.max_interval,
        ),
        # A bad URL or unknown driver will not fix itself.
        retry=retry_if_exception_type(SQLAlchemyError) & retry_if_not_exception_type(ArgumentError),
        before_sleep=_log_attempt,
        reraise=True,
        **retry_kwargs,
    )
    try:
        for attempt in retrying:
            with attempt:
                engine = _open(url, engine_factory)
    except ArgumentError as exc:
        raise ConfigError(f"invalid database configuration: {exc}") from exc
    except SQLAlchemyError as exc:
        raise StorageError(f"failed to connect to database: {exc}") from exc
    return engine


class Database:
    """Owns the engine and hands out transactional sessions."""

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._session_factory = sessionmaker(engine, expire_on_commit=False)

    @property
    def engine(self) -> Engine:
        return self._engine

    def ensure_schema(self) -> None:
        """Create the product table if it does not exist yet."""
        try:
            Base.metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            raise StorageError(f"failed to migrate database: {exc}") from exc

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Commit on success, roll back and re-raise on any error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception as exc:
            session.rollback()
            logger.debug("Database transaction rolled back: {}: {}", type(exc).__name__, exc)
            raise
        finally:
            session.close()

    def dispose(self) -> None:
        self._engine.dispose()
        logger.info("Database engine disposed")
