"""Unit tests for the domain error taxonomy."""

import pytest

from catalog.domain.exceptions import (
    CancelledError,
    ConfigError,
    DomainException,
    InvalidDataError,
    RecordNotFoundError,
    StorageError,
)


class TestDefaultMessages:

    @pytest.mark.parametrize(
        "kind, message",
        [
            (RecordNotFoundError, "record not found"),
            (InvalidDataError, "invalid data"),
            (CancelledError, "context canceled"),
        ],
    )
    def test_default_message(self, kind, message):
        assert str(kind()) == message

    def test_explicit_message_wins(self):
        assert str(StorageError("deadlock detected")) == "deadlock detected"

    def test_every_kind_is_a_domain_exception(self):
        for kind in (RecordNotFoundError, InvalidDataError, StorageError, CancelledError, ConfigError):
            assert issubclass(kind, DomainException)


class TestWrap:

    def test_wrap_prefixes_message(self):
        err = RecordNotFoundError().wrap("failed to get a product 1")
        assert str(err) == "failed to get a product 1: record not found"

    def test_wrap_keeps_the_kind(self):
        err = InvalidDataError().wrap("failed to create a product")
        assert isinstance(err, InvalidDataError)

    def test_wrap_chains_to_original(self):
        original = StorageError("connection reset")
        wrapped = original.wrap("failed to get products")
        assert wrapped.__cause__ is original

    def test_wrap_twice_nests_both_prefixes(self):
        err = RecordNotFoundError().wrap("failed to get a product 1").wrap("product not found")
        assert str(err) == "product not found: failed to get a product 1: record not found"
