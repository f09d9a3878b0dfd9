"""Maps request paths to handler callables."""

from __future__ import annotations

from typing import Callable, Mapping, Optional

from hearthweb.logger import get_logger

RequestHandler = Callable[[Mapping[str, str], str], str]

WELCOME_PAGE = "<html><body><h1>Welcome to WebServer</h1></body></html>"


class Router:
    """Dispatches requests by exact path match."""

    def __init__(self) -> None:
        self._routes: dict[str, RequestHandler] = {}
        self.add_route("/", lambda headers, body: WELCOME_PAGE)

    def add_route(self, path: str, handler: RequestHandler) -> None:
        """Register ``handler`` for ``path``, replacing any previous one."""
        self._routes[path] = handler

    def handle_request(
        self,
        path: str,
        headers: Optional[Mapping[str, str]] = None,
        body: str = "",
    ) -> Optional[str]:
        """Run the handler for ``path`` and return its output, or None if there is none."""
        logger = get_logger()
        handler = self._routes.get(path)
        if handler is None:
            logger.warning(f"No route handler found for path: {path}")
            return None
        logger.info(f"Found route handler for path: {path}")
        return handler(headers if headers is not None else {}, body)

    def __contains__(self, path: object) -> bool:
        return path in self._routes