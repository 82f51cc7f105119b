"""HTTP response model, serializer and request-to-response mapping."""

from dataclasses import dataclass

from content import generate_content
from request import (
    EmptyRequestError,
    MalformedStartLineError,
    RawRequest,
    RequestContentError,
    UnknownTargetError,
)
from router import Router

OK_STATUS_LINE = "HTTP/1.1 200 OK"
ERROR_STATUS_LINE = "HTTP/1.1 500 Error"

# Every content error collapses to a 500; extend here for distinct codes.
ERROR_STATUS_LINES: dict[type[RequestContentError], str] = {
    EmptyRequestError: ERROR_STATUS_LINE,
    MalformedStartLineError: ERROR_STATUS_LINE,
    UnknownTargetError: ERROR_STATUS_LINE,
}


@dataclass(frozen=True, slots=True)
class HTTPResponse:
    status_line: str
    body: str

    @property
    def content_length(self) -> int:
        return len(self.body.encode("utf-8"))

    def to_bytes(self) -> bytes:
        """Serialize as status line, Content-Length header, blank line and body."""
        return (
            f"{self.status_line}\r\n"
            f"Content-Length: {self.content_length}\r\n"
            "\r\n"
            f"{self.body}"
        ).encode("utf-8")


def status_line_for_error(error: RequestContentError) -> str:
    return ERROR_STATUS_LINES.get(type(error), ERROR_STATUS_LINE)


def generate_response(
    raw_request: RawRequest,
    server_name: str,
    serving: bool,
    router: Router | None = None,
) -> tuple[HTTPResponse, bool]:
    """Build the response for a request and the serving state that follows it."""
    try:
        body, new_serving = generate_content(raw_request, server_name, serving, router)
    except RequestContentError as exc:
        return HTTPResponse(status_line=status_line_for_error(exc), body=str(exc)), serving
    return HTTPResponse(status_line=OK_STATUS_LINE, body=body), new_serving
