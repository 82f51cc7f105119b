"""Main toggle server entry point and sequential connection loop."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from functools import partial

from config import (
    ACCEPT_POLL_SECS,
    BUFFER_SIZE,
    HOST,
    INITIAL_SERVING,
    LISTEN_BACKLOG,
    LOG_FORMAT,
    LOG_LEVEL,
    SOCKET_TIMEOUT_SECS,
)
from dispatcher import RequestDispatcher
from router import Router
from socket_handler import read_request_lines, write_http_response

logger = logging.getLogger(__name__)


class HTTPServer:
    def __init__(
        self,
        server_name: str,
        host: str = HOST,
        port: int = 0,
        router: Router | None = None,
        *,
        log_format: str = LOG_FORMAT,
        read_timeout_secs: float | None = SOCKET_TIMEOUT_SECS,
        initial_serving: bool = INITIAL_SERVING,
    ) -> None:
        self.server_name = server_name
        self.host = host
        self.port = port
        self.read_timeout_secs = read_timeout_secs
        self.initial_serving = initial_serving
        self.dispatcher = RequestDispatcher(server_name, router=router, log_format=log_format)

        self._server_socket: socket.socket | None = None
        self._running = False

    def start(self) -> None:
        """Bind, then accept and fully handle one connection at a time."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as server_socket:
            self._server_socket = server_socket
            server_socket.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            server_socket.bind((self.host, self.port))
            server_socket.listen(LISTEN_BACKLOG)
            server_socket.settimeout(ACCEPT_POLL_SECS)
            self.port = server_socket.getsockname()[1]
            logger.info("Listening on %s:%s", self.host, self.port)

            serving = self.initial_serving
            self._running = True
            while self._running:
                try:
                    client_socket, address = server_socket.accept()
                except socket.timeout:
                    continue
                except OSError as exc:
                    if not self._running:
                        break
                    logger.warning("Error accepting connection: %r", exc)
                    continue

                serving = self._handle_client(client_socket, address, serving)

    def stop(self) -> None:
        self._running = False
        if self._server_socket is not None:
            self._server_socket.close()
            self._server_socket = None

    def _handle_client(
        self,
        client_socket: socket.socket,
        address: tuple[str, int],
        serving: bool,
    ) -> bool:
        with client_socket:
            client_socket.settimeout(self.read_timeout_secs)
            with client_socket.makefile("rb", buffering=BUFFER_SIZE) as reader:
                raw_request = read_request_lines(reader)

            outcome = self.dispatcher.handle(
                raw_request,
                serving,
                partial(write_http_response, client_socket),
            )
            logger.debug(
                "client=%s class=%s status=%r transmitted=%s serving=%s",
                address[0],
                outcome.request_class.value,
                outcome.response.status_line,
                outcome.transmitted,
                outcome.serving,
            )
            return outcome.serving


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the toggleable availability server")
    parser.add_argument("-n", "--name", required=True, metavar="SERVER_NAME", help="The server's name")
    parser.add_argument(
        "-p", "--port", type=int, required=True, metavar="PORT", help="The port on which to listen"
    )
    parser.add_argument(
        "-a",
        "--address",
        default=HOST,
        metavar="ADDRESS",
        help=f"The address to listen on (default {HOST})",
    )
    parser.add_argument("--log-format", choices=["plain", "json"], default=LOG_FORMAT)
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default=LOG_LEVEL
    )
    parser.add_argument("--read-timeout", type=float, default=SOCKET_TIMEOUT_SECS)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(message)s")
    logger.info("Server name: %s", args.name)

    server = HTTPServer(
        server_name=args.name,
        host=args.address,
        port=args.port,
        log_format=args.log_format,
        read_timeout_secs=args.read_timeout,
    )
    try:
        server.start()
    except KeyboardInterrupt:
        server.stop()
    except OSError as exc:
        logger.error("Error connecting: %r", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
