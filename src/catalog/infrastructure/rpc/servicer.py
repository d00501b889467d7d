"""RPC surface for the ``catalog.ProductInfo`` service.

Each RPC exists twice:

* a snake_case method that does the real work (translate, call the
  service, log the outcome, wrap errors) and raises DomainException on
  failure, independent of the transport;
* a CamelCase gRPC method that calls it and turns a DomainException into
  an aborted call with a matching status code.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor

import grpc
from loguru import logger

from catalog.application.product_service import ERROR_ID, ProductService
from catalog.domain.exceptions import (
    CancelledError,
    DomainException,
    InvalidDataError,
    RecordNotFoundError,
)
from catalog.domain.model.product import Product
from catalog.infrastructure.rpc import messages
from catalog.infrastructure.rpc.translator import domain_to_wire, wire_to_domain

_STATUS_CODES: dict[type[DomainException], grpc.StatusCode] = {
    RecordNotFoundError: grpc.StatusCode.NOT_FOUND,
    InvalidDataError: grpc.StatusCode.INVALID_ARGUMENT,
    CancelledError: grpc.StatusCode.CANCELLED,
}

DEFAULT_LIST_WORKERS = 8


def status_code_for(exc: DomainException) -> grpc.StatusCode:
    for kind, code in _STATUS_CODES.items():
        if isinstance(exc, kind):
            return code
    return grpc.StatusCode.INTERNAL


class ProductInfoServicer:

    def __init__(
        self,
        product_service: ProductService,
        list_workers: int = DEFAULT_LIST_WORKERS,
    ) -> None:
        self._product_service = product_service
        self._list_workers = max(1, list_workers)

    # --- Handlers -------------------------------------------------------------

    def add_product(self, request: messages.Product, context) -> messages.ProductId:
        self._ensure_active(context)
        try:
            product_id = self._product_service.create_product(wire_to_domain(request))
        except DomainException as exc:
            logger.error(
                "Failed to add product {} : {}. Error: {}", ERROR_ID, request.name, exc
            )
            raise exc.wrap("failed to add product") from exc
        logger.info("Product {} : {} - Added.", product_id, request.name)
        return messages.ProductId(id=product_id)

    def update_product(self, request: messages.Product, context) -> messages.Empty:
        """Update an existing product.

        Existence is checked first so the adapter's upsert can never create
        a record through this RPC.
        """
        self._ensure_active(context)
        try:
            self._product_service.get_product_by_id(request.id)
        except DomainException as exc:
            logger.error(
                "Failed to find product {} : {}. Error: {}", request.id, request.name, exc
            )
            raise exc.wrap("product not found") from exc

        try:
            self._product_service.update_product(wire_to_domain(request))
        except DomainException as exc:
            logger.error(
                "Failed to update product {} : {}. Error: {}", request.id, request.name, exc
            )
            raise exc.wrap("failed to update product") from exc
        logger.info("Product {} : {} - Updated.", request.id, request.name)
        return messages.Empty()

    def delete_product(self, request: messages.ProductId, context) -> messages.Empty:
        self._ensure_active(context)
        try:
            self._product_service.delete_product_by_id(request.id)
        except DomainException as exc:
            logger.error("Failed to delete product {}. Error: {}", request.id, exc)
            raise
        logger.info("Product {} - Deleted.", request.id)
        return messages.Empty()

    def get_product_info(self, request: messages.ProductId, context) -> messages.Product:
        self._ensure_active(context)
        try:
            product = self._product_service.get_product_by_id(request.id)
        except DomainException as exc:
            logger.error("Failed to find product {}. Error: {}", request.id, exc)
            raise exc.wrap("product not found") from exc
        logger.info("Product {} : {} - Fetched.", product.id, product.name)
        return domain_to_wire(product)

    def get_product_list(self, request: messages.Empty, context) -> messages.ProductList:
        self._ensure_active(context)
        try:
            products = self._product_service.get_all_products()
        except DomainException as exc:
            logger.error("Failed to obtain product list. Error: {}", exc)
            raise exc.wrap("failed to obtain product list") from exc

        response = messages.ProductList()
        for product_id, wire in self._marshal_all(products).items():
            response.products[product_id].CopyFrom(wire)
        logger.info("Product list - {} products.", len(response.products))
        return response

    # --- gRPC entry points ----------------------------------------------------

    def AddProduct(self, request, context):
        return self._serve(self.add_product, request, context)

    def UpdateProduct(self, request, context):
        return self._serve(self.update_product, request, context)

    def DeleteProduct(self, request, context):
        return self._serve(self.delete_product, request, context)

    def GetProductInfo(self, request, context):
        return self._serve(self.get_product_info, request, context)

    def GetProductList(self, request, context):
        return self._serve(self.get_product_list, request, context)

    # --- Helpers --------------------------------------------------------------

    @staticmethod
    def _serve(handler: Callable, request, context):
        try:
            return handler(request, context)
        except DomainException as exc:
            context.abort(status_code_for(exc), exc.message)

    @staticmethod
    def _ensure_active(context) -> None:
        if context is not None and not context.is_active():
            logger.warning("Call cancelled before reaching the catalog")
            raise CancelledError()

    def _marshal_all(self, products: list[Product]) -> dict[int, messages.Product]:
        """Translate every product on a worker pool into an id-keyed dict."""
        marshalled: dict[int, messages.Product] = {}
        if not products:
            return marshalled

        lock = threading.Lock()

        def marshal(product: Product) -> None:
            wire = domain_to_wire(product)
            with lock:
                marshalled[product.id] = wire

        workers = min(self._list_workers, len(products))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="marshal") as pool:
            # list() re-raises the first worker failure, if any.
            list(pool.map(marshal, products))
        return marshalled


def add_servicer_to_server(servicer: ProductInfoServicer, server: grpc.Server) -> None:
    """Register every ProductInfo method on ``server``."""
    handlers = {}
    for method, (request, response) in messages.METHOD_SIGNATURES.items():
        handlers[method] = grpc.unary_unary_rpc_method_handler(
            getattr(servicer, method),
            request_deserializer=messages.MESSAGES[request].FromString,
            response_serializer=messages.MESSAGES[response].SerializeToString,
        )
    server.add_generic_rpc_handlers(
        (grpc.method_handlers_generic_handler(messages.SERVICE_NAME, handlers),)
    )
