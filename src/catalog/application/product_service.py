"""Application service: product CRUD in domain vocabulary.

A thin, total layer over ProductRepository. No field validation happens
here; each method only adds the product id to the error message so log
lines can be traced back to the record that failed.
"""

from __future__ import annotations

from catalog.domain.exceptions import DomainException
from catalog.domain.model.product import NO_ID, Product
from catalog.domain.repository.product_repository import ProductRepository

# Returned to callers that need an id even when create failed.
ERROR_ID = NO_ID


class ProductService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def create_product(self, product: Product) -> int:
        """Store a new product and return the id storage assigned to it."""
        try:
            self._product_repo.create(product)
        except DomainException as exc:
            raise exc.wrap("failed to create a product") from exc
        return product.id

    def get_product_by_id(self, product_id: int) -> Product:
        try:
            return self._product_repo.find_one(product_id)
        except DomainException as exc:
            raise exc.wrap(f"failed to get a product {product_id}") from exc

    def update_product(self, product: Product) -> None:
        try:
            self._product_repo.save(product)
        except DomainException as exc:
            raise exc.wrap(f"failed to update a product {product.id}") from exc

    def delete_product_by_id(self, product_id: int) -> None:
        try:
            self._product_repo.delete(product_id)
        except DomainException as exc:
            raise exc.wrap(f"failed to delete a product {product_id}") from exc

    def get_all_products(self) -> list[Product]:
        try:
            return self._product_repo.find_all()
        except DomainException as exc:
            raise exc.wrap("failed to get products") from exc
