"""SQLAlchemy-backed implementation of ProductRepository."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import select, update
from sqlalchemy.exc import DataError, SQLAlchemyError
from sqlalchemy.orm import Session

from catalog.domain.exceptions import InvalidDataError, RecordNotFoundError, StorageError
from catalog.domain.model.product import NO_ID, Product
from catalog.domain.repository.product_repository import ProductRepository
from catalog.infrastructure.persistence.database import Database
from catalog.infrastructure.persistence.tables import ProductRow, utcnow


class SqlProductRepository(ProductRepository):

    def __init__(self, database: Database) -> None:
        self._database = database

    # --- ProductRepository interface ------------------------------------------

    def create(self, product: Product) -> None:
        # Storage assigns the id; a client-supplied one is ignored.
        row = ProductRow()
        row.apply(product)
        with self._session() as session:
            session.add(row)
            session.flush()
            self._fill(product, row)

    def find_one(self, product_id: int) -> Product:
        with self._session() as session:
            row = self._live_row(session, product_id)
            if row is None:
                raise RecordNotFoundError()
            return row.to_entity()

    def find_all(self) -> list[Product]:
        with self._session() as session:
            rows = session.scalars(
                select(ProductRow)
                .where(ProductRow.deleted_at.is_(None))
                .order_by(ProductRow.id)
            )
            return [row.to_entity() for row in rows]

    def save(self, product: Product) -> None:
        if product.id == NO_ID:
            self.create(product)
            return

        with self._session() as session:
            row = session.get(ProductRow, product.id)
            if row is None:
                row = ProductRow(id=product.id)
                session.add(row)
            elif row.deleted_at is not None:
                raise RecordNotFoundError()
            row.apply(product)
            session.flush()
            self._fill(product, row)

    def delete(self, product_id: int) -> None:
        # Ids with no live row match nothing and are left alone.
        with self._session() as session:
            session.execute(
                update(ProductRow)
                .where(ProductRow.id == product_id, ProductRow.deleted_at.is_(None))
                .values(deleted_at=utcnow())
            )

    # --- Helpers --------------------------------------------------------------

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Session scope that translates driver errors into domain errors."""
        try:
            with self._database.session_scope() as session:
                yield session
        except DataError as exc:
            raise InvalidDataError(f"invalid data: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            raise StorageError(str(exc)) from exc

    @staticmethod
    def _live_row(session: Session, product_id: int) -> ProductRow | None:
        return session.scalars(
            select(ProductRow).where(
                ProductRow.id == product_id, ProductRow.deleted_at.is_(None)
            )
        ).first()

    @staticmethod
    def _fill(product: Product, row: ProductRow) -> None:
        product.id = row.id
        product.created_at = row.created_at
        product.updated_at = row.updated_at
        product.deleted_at = row.deleted_at
