"""Response content generation for the fixed set of request targets."""

from handlers.availability_handlers import home, switch_off, switch_on
from request import EmptyRequestError, RawRequest, UnknownTargetError, parse_start_line
from router import Router


def build_router() -> Router:
    router = Router()
    router.add_route("/", home)
    router.add_route("/on", switch_on)
    router.add_route("/off", switch_off)
    return router


DEFAULT_ROUTER = build_router()


def generate_content(
    raw_request: RawRequest,
    server_name: str,
    serving: bool,
    router: Router | None = None,
) -> tuple[str, bool]:
    """Return ``(body, new_serving)`` for a request.

    Raises a ``RequestContentError`` subclass for empty requests, malformed
    start lines and unknown targets. Callers keep ``serving`` unchanged on error.
    """
    if not raw_request:
        raise EmptyRequestError()

    start_line = parse_start_line(raw_request[0])
    handler = (router or DEFAULT_ROUTER).resolve(start_line.target)
    if handler is None:
        raise UnknownTargetError(start_line.target)

    return handler(server_name, serving)
