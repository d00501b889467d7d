"""Translation between wire messages and the domain entity.

Both directions copy the six user-visible fields and nothing else; storage
timestamps never cross the network boundary.
"""

from __future__ import annotations

from catalog.domain.model.product import Product
from catalog.infrastructure.rpc import messages


def wire_to_domain(wire: messages.Product) -> Product:
    return Product(
        id=wire.id,
        name=wire.name,
        sku=wire.sku,
        description=wire.description,
        price=wire.price,
        image=wire.image,
    )


def domain_to_wire(product: Product) -> messages.Product:
    return messages.Product(
        id=product.id,
        name=product.name,
        sku=product.sku,
        description=product.description,
        price=product.price,
        image=product.image,
    )
