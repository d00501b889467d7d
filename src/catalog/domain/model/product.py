"""Product entity.

The single entity of the catalog. Storage owns ``id`` and the three
timestamps; every other field is supplied by clients.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from datetime import datetime

from catalog.domain.exceptions import InvalidDataError

# Sentinel meaning "not assigned by storage yet".
NO_ID = 0


def to_float32(value: float) -> float:
    """Round ``value`` to the nearest single-precision float."""
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError as exc:
        raise InvalidDataError(f"invalid data: price {value} out of range") from exc


@dataclass
class Product:
    """A product in the catalog.

    Kept as a mutable dataclass because the persistence adapter fills
    ``id`` and the timestamps in place on create and save. ``price`` is
    always stored at single precision, whether set on construction or later.
    """

    id: int = NO_ID
    name: str = ""
    sku: str = ""
    description: str = ""
    price: float = 0.0
    image: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    def __setattr__(self, name: str, value: object) -> None:
        # Prices travel as 32-bit floats; hold them at that precision everywhere.
        if name == "price":
            value = to_float32(value)
        super().__setattr__(name, value)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def same_details(self, other: Product) -> bool:
        """Compare the user-visible fields, ignoring storage timestamps."""
        return (
            self.id == other.id
            and self.name == other.name
            and self.sku == other.sku
            and self.description == other.description
            and self.price == other.price
            and self.image == other.image
        )
