"""Tests for opening the database with backoff."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.exc import NoSuchModuleError, OperationalError

from catalog.domain.exceptions import ConfigError, StorageError
from catalog.infrastructure.persistence.database import RetryPolicy, connect

FAST = RetryPolicy(initial=0.01, multiplier=1.5, max_interval=0.01, max_elapsed=5.0)


def _refused() -> OperationalError:
    return OperationalError("connect", {}, Exception("connection refused"))


class TestConnect:

    def test_first_attempt_succeeds(self):
        engine = connect("sqlite://", FAST)
        assert engine.dialect.name == "sqlite"
        engine.dispose()

    def test_retries_until_database_answers(self):
        attempts = []
        sleeps = []

        def factory(url, **kwargs):
            attempts.append(url)
            if len(attempts) < 3:
                raise _refused()
            return create_engine("sqlite://", **kwargs)

        engine = connect("mysql+pymysql://u:p@db/catalog", FAST, engine_factory=factory, sleep=sleeps.append)

        assert len(attempts) == 3
        assert len(sleeps) == 2
        assert all(s <= FAST.max_interval for s in sleeps)
        engine.dispose()

    def test_gives_up_when_budget_is_spent(self):
        def factory(url, **kwargs):
            raise _refused()

        policy = RetryPolicy(initial=0.01, max_interval=0.01, max_elapsed=0.0)
        with pytest.raises(StorageError, match="^failed to connect to database: .*connection refused"):
            connect("mysql+pymysql://u:p@db/catalog", policy, engine_factory=factory, sleep=lambda _: None)

    def test_no_attempt_starts_past_the_budget(self):
        attempts = []
        sleeps = []

        def factory(url, **kwargs):
            attempts.append(url)
            raise _refused()

        # The first wait alone would overrun the budget.
        policy = RetryPolicy(initial=1.0, max_interval=1.0, max_elapsed=0.5)
        with pytest.raises(StorageError):
            connect("mysql+pymysql://u:p@db/catalog", policy, engine_factory=factory, sleep=sleeps.append)

        assert len(attempts) == 1
        assert sleeps == []

    def test_unknown_driver_is_not_retried(self):
        attempts = []
        sleeps = []

        def factory(url, **kwargs):
            attempts.append(url)
            raise NoSuchModuleError("Can't load plugin: sqlalchemy.dialects:nosuchdb")

        with pytest.raises(ConfigError, match="^invalid database configuration: .*nosuchdb"):
            connect("nosuchdb://u:p@db/catalog", FAST, engine_factory=factory, sleep=sleeps.append)

        assert len(attempts) == 1
        assert sleeps == []

    def test_default_policy_bounds(self):
        policy = RetryPolicy()
        assert policy.max_interval == 10.0
        assert policy.max_elapsed == 120.0
