"""HTTP service: routing, middleware and the command that starts it."""

from __future__ import annotations

import argparse
import logging
import os
import re
import sys
import uuid
from collections.abc import Callable, Iterable, Mapping, Sequence
from http import HTTPStatus
from typing import Optional
from wsgiref.simple_server import WSGIRequestHandler, make_server

from caskapi.config import Config, ConfigError, load_config
from caskapi.warehouse import FlagsClient, WarehouseSystem

logger = logging.getLogger(__name__)

BUILD_VERSION = "0.0.1"
BUILD_HASH = "unknown"
SERVICE_NAME = "service"

ALLOWED_HEADERS = (
    "x-agent-id",
    "x-company-id",
    "x-project-id",
    "x-environment-id",
    "x-user-subject",
    "x-flags-timestamp",
)
ALLOWED_METHODS = ("GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH")
ALLOWED_ORIGINS = ("*",)
DEVELOPMENT_ORIGINS = ("http://localhost:3000", "http://localhost:5173", "*")

_PORT_PATTERN = re.compile(r"[+-]?\d+")


def _status_line(status: HTTPStatus) -> str:
    return f"{status.value} {status.phrase}"


def _empty(start_response: Callable, status: HTTPStatus, headers=()) -> list[bytes]:
    start_response(_status_line(status), [*headers, ("Content-Length", "0")])
    return [b""]


class CorsMiddleware:
    """Adds CORS headers and answers preflight requests."""

    def __init__(
        self,
        app: Callable,
        *,
        origins: Sequence[str] = ALLOWED_ORIGINS,
        methods: Sequence[str] = ALLOWED_METHODS,
        headers: Sequence[str] = ALLOWED_HEADERS,
    ) -> None:
        self.app = app
        self.origins = tuple(dict.fromkeys(origins))
        self.methods = tuple(m.upper() for m in methods)
        self.headers = tuple(headers)

    def _origin_allowed(self, origin: str) -> bool:
        return bool(origin) and ("*" in self.origins or origin in self.origins)

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        origin = environ.get("HTTP_ORIGIN", "")
        allowed = self._origin_allowed(origin)
        requested = environ.get("HTTP_ACCESS_CONTROL_REQUEST_METHOD", "").upper()

        if environ.get("REQUEST_METHOD", "").upper() == "OPTIONS" and requested:
            response_headers = [("Vary", "Origin")]
            if allowed and requested in self.methods:
                response_headers += [
                    ("Access-Control-Allow-Origin", origin),
                    ("Access-Control-Allow-Methods", ", ".join(self.methods)),
                    ("Access-Control-Allow-Headers", ", ".join(self.headers)),
                ]
            return _empty(start_response, HTTPStatus.NO_CONTENT, response_headers)

        if not allowed:
            return self.app(environ, start_response)

        def cors_start(status, headers, exc_info=None):
            extra = [("Access-Control-Allow-Origin", origin), ("Vary", "Origin")]
            return start_response(status, [*headers, *extra], exc_info)

        return self.app(environ, cors_start)


class _RequestHandler(WSGIRequestHandler):
    timeout = 10

    def log_message(self, format, *args):  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)


class Service:
    """The HTTP service exposing the warehouse API and health endpoints."""

    def __init__(
        self,
        config: Config,
        *,
        flags_fetch: Optional[Callable[[FlagsClient], Mapping[str, bool]]] = None,
    ) -> None:
        self.config = config
        warehouses = WarehouseSystem(config, flags_fetch)
        self._routes: dict[str, Callable] = {
            "/warehouses": warehouses.get_warehouses,
            "/health": self._health,
            "/probe": self._probe,
        }
        origins = list(ALLOWED_ORIGINS)
        if config.local.development:
            origins += DEVELOPMENT_ORIGINS
        self._handler = CorsMiddleware(
            self._recover, origins=origins, methods=ALLOWED_METHODS, headers=ALLOWED_HEADERS
        )

    @staticmethod
    def _health(environ: dict, start_response: Callable) -> Iterable[bytes]:
        return _empty(start_response, HTTPStatus.OK)

    @staticmethod
    def _probe(environ: dict, start_response: Callable) -> Iterable[bytes]:
        return _empty(start_response, HTTPStatus.OK)

    def _route(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        method = environ.get("REQUEST_METHOD", "GET").upper()
        if method not in ("GET", "HEAD"):
            return _empty(start_response, HTTPStatus.METHOD_NOT_ALLOWED, [("Allow", "GET, HEAD")])
        path = environ.get("PATH_INFO") or "/"
        handler = self._routes.get(path, self._probe)
        return handler(environ, start_response)

    def _recover(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        try:
            return list(self._route(environ, start_response))
        except Exception:
            logger.exception("request to %s failed", environ.get("PATH_INFO", "/"))
            start_response(
                _status_line(HTTPStatus.INTERNAL_SERVER_ERROR),
                [("Content-Length", "0")],
                sys.exc_info(),
            )
            return [b""]

    def app(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        """The WSGI entry point, with request ids, recovery and CORS applied."""
        request_id = environ.get("HTTP_X_REQUEST_ID") or uuid.uuid4().hex
        environ["caskapi.request_id"] = request_id

        def tagged_start(status, headers, exc_info=None):
            return start_response(status, [*headers, ("X-Request-Id", request_id)], exc_info)

        return self._handler(environ, tagged_start)

    def resolve_port(self) -> int:
        """Pick the listening port, preferring the platform port when deployed there."""
        port = self.config.local.http_port
        props = self.config.project_properties
        railway_port = props["railway_port"]
        if railway_port != "" and props["on_railway"]:
            if not _PORT_PATTERN.fullmatch(railway_port):
                raise ConfigError(f"failed to parse port: {railway_port!r}")
            port = int(railway_port)
        return port

    def start(self) -> None:
        """Serve HTTP until interrupted."""
        port = self.resolve_port()
        logger.info("Starting HTTP on %d", self.config.local.http_port)
        with make_server("", port, self.app, handler_class=_RequestHandler) as server:
            server.serve_forever()


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Build the configuration from the environment and run the service."""
    parser = argparse.ArgumentParser(prog="caskapi", description="Run the warehouse API service.")
    parser.add_argument(
        "--version",
        action="version",
        version=f"{SERVICE_NAME} {BUILD_VERSION} (build {BUILD_HASH})",
    )
    parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    logger.info("Starting %s version %s (build %s)", SERVICE_NAME, BUILD_VERSION, BUILD_HASH)

    try:
        config = load_config(os.environ)
    except ConfigError as exc:
        logger.critical("Failed to build config: %s", exc)
        return 1

    try:
        Service(config).start()
    except (ConfigError, OSError) as exc:
        logger.critical("Failed to start service: %s", exc)
        return 1
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())