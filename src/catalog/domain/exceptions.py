"""Domain-level exceptions.

Every failure that crosses a layer boundary is a subclass of DomainException.
Each layer adds context with ``wrap`` rather than inventing a new type, so the
kind of failure (not found, invalid data, ...) survives all the way up to the
RPC surface while the message grows a prefix per layer:

    record not found
    failed to get a product 1: record not found
    product not found: failed to get a product 1: record not found
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all catalog errors."""

    default_message = "catalog error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)

    @property
    def message(self) -> str:
        return str(self.args[0])

    def wrap(self, prefix: str) -> DomainException:
        """Return a same-kind error reading ``"<prefix>: <self>"``, caused by self."""
        wrapped = type(self)(f"{prefix}: {self.message}")
        wrapped.__cause__ = self
        return wrapped


class RecordNotFoundError(DomainException):
    """A fetch or update targeted an id with no visible row."""

    default_message = "record not found"


class InvalidDataError(DomainException):
    """Storage rejected the shape of a record."""

    default_message = "invalid data"


class StorageError(DomainException):
    """Any other storage failure: connectivity, constraint, deadlock."""

    default_message = "storage failure"


class CancelledError(DomainException):
    """The calling context ended before the operation started."""

    default_message = "context canceled"


class ConfigError(DomainException):
    """Configuration is missing or malformed (startup only)."""

    default_message = "invalid configuration"
