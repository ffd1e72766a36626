"""Route-backed filter state.

The route's query string is the only store: ``current_filters`` re-reads it
on every call and ``set_filters`` writes by navigating. Views subscribe to be
told when a navigation lands on their path.
"""

from __future__ import annotations

from typing import Callable, Generic, Mapping, Protocol, Sequence, TypeVar
from urllib.parse import parse_qsl, urlencode, urlsplit

from ..logging_config import get_logger
from .filters import (
    DASHBOARD_FILTER_KEYS,
    TRANSACTION_FILTER_KEYS,
    DashboardFilters,
    TransactionFilters,
)

logger = get_logger(__name__)

F = TypeVar("F")

PAGE_KEY = "page"


class Navigator(Protocol):
    """Minimal subset of ``ft.Page`` needed to read and change the route."""

    route: str

    def go(self, route: str) -> None: ...


def split_route(route: str | None) -> tuple[str, dict[str, str]]:
    """Split ``/path?a=1&b=2`` into the path and an ordered parameter dict."""

    parts = urlsplit(route or "/")
    path = parts.path or "/"
    params: dict[str, str] = {}
    for key, value in parse_qsl(parts.query, keep_blank_values=True):
        params[key] = value
    return path, params


def build_route(path: str, params: Mapping[str, str]) -> str:
    """Inverse of :func:`split_route`; empty values are never written."""

    query = urlencode([(k, v) for k, v in params.items() if v])
    return f"{path}?{query}" if query else path


class QueryState(Generic[F]):
    """Bidirectional mapping between a route's query string and filter state."""

    def __init__(
        self,
        navigator: Navigator,
        path: str,
        parser: Callable[[Mapping[str, str]], F],
        keys: Sequence[str],
    ):
        self.navigator = navigator
        self.path = path
        self._parser = parser
        self.keys = tuple(keys)
        self._listeners: list[Callable[[F], None]] = []

    def _params(self) -> dict[str, str]:
        path, params = split_route(getattr(self.navigator, "route", None))
        if path != self.path:
            return {}
        return params

    def current_filters(self) -> F:
        """Project the current route into filter state."""
        return self._parser(self._params())

    def set_filters(self, partial: Mapping[str, str]) -> str:
        """Merge ``partial`` into the route and navigate to it.

        Empty values remove their key. Any update that does not itself carry
        ``page`` drops the page so a filter change always lands on page 1.
        Returns the new route.
        """
        unknown = [key for key in partial if key not in self.keys]
        if unknown:
            raise KeyError(f"Unknown filter keys for {self.path}: {', '.join(unknown)}")

        params = self._params()
        for key, value in partial.items():
            text = "" if value is None else str(value)
            if text:
                params[key] = text
            else:
                params.pop(key, None)
        if PAGE_KEY not in partial:
            params.pop(PAGE_KEY, None)

        route = build_route(self.path, params)
        logger.debug("Filter change", extra={"route": route, "updates": dict(partial)})
        self.navigator.go(route)
        return route

    def clear(self) -> str:
        """Drop every query parameter."""
        self.navigator.go(self.path)
        return self.path

    def subscribe(self, listener: Callable[[F], None]) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def route_changed(self, route: str) -> bool:
        """Notify subscribers when ``route`` targets this state's path.

        Called by the router after navigation. Returns True when the route
        belonged to this path.
        """
        path, _ = split_route(route)
        if path != self.path:
            return False
        filters = self.current_filters()
        for listener in list(self._listeners):
            listener(filters)
        return True


def transaction_query_state(
    navigator: Navigator, path: str = "/transactions"
) -> QueryState[TransactionFilters]:
    return QueryState(navigator, path, TransactionFilters.from_params, TRANSACTION_FILTER_KEYS)


def dashboard_query_state(
    navigator: Navigator, path: str = "/dashboard"
) -> QueryState[DashboardFilters]:
    return QueryState(navigator, path, DashboardFilters.from_params, DASHBOARD_FILTER_KEYS)
