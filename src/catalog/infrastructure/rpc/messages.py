"""Wire messages for the ``catalog.ProductInfo`` gRPC service.

The message classes are built from a FileDescriptorProto at import time
instead of protoc output, so the package needs no code generation step.
The descriptor mirrors ``proto/catalog/product.proto`` field for field;
keep the two in sync.
"""

from __future__ import annotations

from google.protobuf import descriptor_pb2, descriptor_pool, message_factory

PACKAGE = "catalog"
SERVICE_NAME = f"{PACKAGE}.ProductInfo"

_Field = descriptor_pb2.FieldDescriptorProto

# method name -> (request message, response message)
METHOD_SIGNATURES: dict[str, tuple[str, str]] = {
    "AddProduct": ("Product", "ProductId"),
    "UpdateProduct": ("Product", "Empty"),
    "DeleteProduct": ("ProductId", "Empty"),
    "GetProductInfo": ("ProductId", "Product"),
    "GetProductList": ("Empty", "ProductList"),
}


def _add_field(
    message: descriptor_pb2.DescriptorProto,
    name: str,
    number: int,
    field_type: int,
    type_name: str | None = None,
    label: int = _Field.LABEL_OPTIONAL,
) -> None:
    field = message.field.add(name=name, number=number, type=field_type, label=label)
    if type_name is not None:
        field.type_name = type_name


def _file_descriptor() -> descriptor_pb2.FileDescriptorProto:
    proto = descriptor_pb2.FileDescriptorProto(
        name="catalog/product.proto", package=PACKAGE, syntax="proto3"
    )

    proto.message_type.add(name="Empty")

    product_id = proto.message_type.add(name="ProductId")
    _add_field(product_id, "id", 1, _Field.TYPE_UINT64)

    product = proto.message_type.add(name="Product")
    _add_field(product, "id", 1, _Field.TYPE_UINT64)
    _add_field(product, "name", 2, _Field.TYPE_STRING)
    _add_field(product, "sku", 3, _Field.TYPE_STRING)
    _add_field(product, "description", 4, _Field.TYPE_STRING)
    _add_field(product, "price", 5, _Field.TYPE_FLOAT)
    _add_field(product, "image", 6, _Field.TYPE_STRING)

    # map<uint64, Product> is encoded as a repeated nested entry message.
    product_list = proto.message_type.add(name="ProductList")
    entry = product_list.nested_type.add(name="ProductsEntry")
    entry.options.map_entry = True
    _add_field(entry, "key", 1, _Field.TYPE_UINT64)
    _add_field(entry, "value", 2, _Field.TYPE_MESSAGE, f".{PACKAGE}.Product")
    _add_field(
        product_list,
        "products",
        1,
        _Field.TYPE_MESSAGE,
        f".{PACKAGE}.ProductList.ProductsEntry",
        label=_Field.LABEL_REPEATED,
    )

    service = proto.service.add(name="ProductInfo")
    for method, (request, response) in METHOD_SIGNATURES.items():
        service.method.add(
            name=method,
            input_type=f".{PACKAGE}.{request}",
            output_type=f".{PACKAGE}.{response}",
        )
    return proto


_pool = descriptor_pool.DescriptorPool()
_pool.AddSerializedFile(_file_descriptor().SerializeToString())


def _message_class(name: str):
    return message_factory.GetMessageClass(_pool.FindMessageTypeByName(f"{PACKAGE}.{name}"))


Empty = _message_class("Empty")
ProductId = _message_class("ProductId")
Product = _message_class("Product")
ProductList = _message_class("ProductList")

MESSAGES = {
    "Empty": Empty,
    "ProductId": ProductId,
    "Product": Product,
    "ProductList": ProductList,
}


def method_path(method: str) -> str:
    """Full gRPC path for a method, e.g. ``/catalog.ProductInfo/AddProduct``."""
    return f"/{SERVICE_NAME}/{method}"
