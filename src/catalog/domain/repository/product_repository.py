"""Abstract persistence adapter for the Product entity.

Defined in the domain layer so the domain never depends on
infrastructure. The SQL implementation lives in the infrastructure layer;
tests use an in-memory fake.

Operations return normally on success and raise a DomainException
subclass on failure. Storage engine exceptions never escape an adapter.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from catalog.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def create(self, product: Product) -> None:
        """Insert a product; fills ``product.id`` and timestamps in place."""

    @abstractmethod
    def find_one(self, product_id: int) -> Product:
        """Return the live product with this id.

        Raises RecordNotFoundError if there is none (or it was deleted).
        """

    @abstractmethod
    def find_all(self) -> list[Product]:
        """Return every live product, ordered by id."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Upsert by primary key: insert when ``id`` is 0, update otherwise."""

    @abstractmethod
    def delete(self, product_id: int) -> None:
        """Soft-delete the live product with this id.

        A missing or already-deleted id is not an error; nothing changes.
        """
