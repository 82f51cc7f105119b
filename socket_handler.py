"""Low-level connection read/write utilities."""

from __future__ import annotations

import socket
from typing import BinaryIO

from config import READ_ERROR_PLACEHOLDER
from request import RawRequest


def read_request_lines(reader: BinaryIO) -> RawRequest:
    """Read request lines until the first blank line or end of stream.

    A line that is not valid UTF-8 is replaced by a placeholder and reading
    continues. A socket error adds a placeholder and ends the read.
    """
    lines: RawRequest = []
    while True:
        try:
            raw_line = reader.readline()
        except OSError as exc:
            lines.append(READ_ERROR_PLACEHOLDER.format(error=exc))
            return lines

        if not raw_line:
            return lines

        try:
            line = raw_line.decode("utf-8")
        except UnicodeDecodeError as exc:
            lines.append(READ_ERROR_PLACEHOLDER.format(error=exc))
            continue

        if line.endswith("\n"):
            line = line.removesuffix("\n").removesuffix("\r")
        if not line:
            return lines
        lines.append(line)


def write_http_response(client_socket: socket.socket, payload: bytes) -> None:
    """Write the complete response payload to a client socket."""
    client_socket.sendall(payload)
