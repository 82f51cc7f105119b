"""Routing table for target handlers."""

from collections.abc import Callable

# (server_name, serving) -> (body, new_serving)
Handler = Callable[[str, bool], tuple[str, bool]]


class Router:
    def __init__(self) -> None:
        self._routes: dict[str, Handler] = {}

    def add_route(self, target: str, handler: Handler) -> None:
        if not target.startswith("/"):
            raise ValueError("target must start with '/'")
        self._routes[target] = handler

    def resolve(self, target: str) -> Handler | None:
        return self._routes.get(target)
