"""Per-connection dispatch: response generation, transmission gate and logging gate."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass

from classifier import RequestClass, classify, is_probe
from config import LOG_FORMAT
from request import RawRequest
from response import HTTPResponse, generate_response
from router import Router
from utils import format_timestamp, indent_lines

logger = logging.getLogger(__name__)

PayloadWriter = Callable[[bytes], None]


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    response: HTTPResponse
    serving: bool
    request_class: RequestClass
    transmitted: bool


def should_transmit(request_class: RequestClass, serving: bool) -> bool:
    """Uptime checks only get a reply while serving; everyone else always does."""
    if request_class is RequestClass.UPTIME_CHECK:
        return serving
    return True


def should_log(raw_request: RawRequest) -> bool:
    return bool(raw_request) and not is_probe(raw_request)


class RequestDispatcher:
    def __init__(
        self,
        server_name: str,
        *,
        router: Router | None = None,
        log_format: str = LOG_FORMAT,
    ) -> None:
        self.server_name = server_name
        self.router = router
        self.log_format = log_format

    def handle(
        self,
        raw_request: RawRequest,
        serving: bool,
        write: PayloadWriter,
    ) -> DispatchOutcome:
        """Answer one request and return the serving state for the next one.

        The transmission gate uses the serving value produced by this request,
        so an uptime check never toggles its own visibility.
        """
        response, new_serving = generate_response(
            raw_request,
            self.server_name,
            serving,
            self.router,
        )
        request_class = classify(raw_request)

        transmitted = False
        if should_transmit(request_class, new_serving):
            try:
                write(response.to_bytes())
            except OSError as exc:
                logger.warning("Error writing response: %r", exc)
            else:
                transmitted = True

        if should_log(raw_request):
            self._log_exchange(raw_request, response)

        return DispatchOutcome(
            response=response,
            serving=new_serving,
            request_class=request_class,
            transmitted=transmitted,
        )

    def _log_exchange(self, raw_request: RawRequest, response: HTTPResponse) -> None:
        timestamp = format_timestamp()
        if self.log_format == "json":
            event = {
                "timestamp": timestamp,
                "request": list(raw_request),
                "status": response.status_line,
                "content_length": response.content_length,
                "body": response.body,
            }
            logger.info(json.dumps(event, sort_keys=True))
            return

        logger.info("Request received at %s\n%s", timestamp, indent_lines(raw_request))
        logger.info(
            "Response sent:\n  %s\n  Content-Length: %s\n  %s",
            response.status_line,
            response.content_length,
            response.body,
        )


def dispatch(
    raw_request: RawRequest,
    server_name: str,
    serving: bool,
    write: PayloadWriter,
) -> bool:
    """Dispatch one request and return only the new serving state."""
    return RequestDispatcher(server_name).handle(raw_request, serving, write).serving
