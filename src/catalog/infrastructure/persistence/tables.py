"""SQLAlchemy table model for products.

This is how the Product entity is stored. It is kept separate from the
domain dataclass so the storage shape can change without touching the
service or the RPC surface.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import BigInteger, DateTime, Float, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from catalog.domain.model.product import Product

TABLE_NAME = "catalog_products"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class ProductRow(Base):
    __tablename__ = TABLE_NAME

    # SQLite only autoincrements INTEGER primary keys.
    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    sku: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    price: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    image: Mapped[str] = mapped_column(String(1024), nullable=False, default="")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True, index=True
    )

    def apply(self, product: Product) -> None:
        """Copy the client-owned fields of ``product`` onto this row."""
        self.name = product.name
        self.sku = product.sku
        self.description = product.description
        self.price = product.price
        self.image = product.image

    def to_entity(self) -> Product:
        return Product(
            id=self.id,
            name=self.name,
            sku=self.sku,
            description=self.description,
            price=self.price,
            image=self.image,
            created_at=self.created_at,
            updated_at=self.updated_at,
            deleted_at=self.deleted_at,
        )
