"""gRPC server lifecycle: bind, serve, graceful stop."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import grpc
from loguru import logger

from catalog.infrastructure.rpc.servicer import ProductInfoServicer, add_servicer_to_server

DEFAULT_GRACE_SECONDS = 5.0


class ServerBindError(Exception):
    """The listener could not be bound to the configured address."""


class CatalogServer:

    def __init__(
        self,
        servicer: ProductInfoServicer,
        port: int,
        max_workers: int = 10,
        host: str = "[::]",
    ) -> None:
        self._address = f"{host}:{port}"
        self._server = grpc.server(
            ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="rpc")
        )
        add_servicer_to_server(servicer, self._server)
        self._bound_port: int | None = None

    @property
    def bound_port(self) -> int | None:
        """Port actually bound; differs from the requested one when that was 0."""
        return self._bound_port

    def start(self) -> int:
        try:
            bound = self._server.add_insecure_port(self._address)
        except RuntimeError as exc:
            raise ServerBindError(f"failed to listen on {self._address}: {exc}") from exc
        if bound == 0:
            raise ServerBindError(f"failed to listen on {self._address}")

        self._bound_port = bound
        self._server.start()
        logger.info("server listening at {}", self._address.rsplit(":", 1)[0] + f":{bound}")
        return bound

    def wait(self) -> None:
        self._server.wait_for_termination()

    def stop(self, grace: float | None = DEFAULT_GRACE_SECONDS) -> None:
        """Stop accepting calls; in-flight calls get ``grace`` seconds to finish."""
        logger.info("Stopping server (grace={}s)", grace)
        self._server.stop(grace)
