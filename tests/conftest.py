"""
Shared fixtures: a recording map surface and a scripted requests session.
"""

import itertools
from typing import Any, Callable, Dict, List, Optional, Tuple

import pytest
import requests

from geoquery.client import SpatialIndexClient
from geoquery.orchestrator import QueryOrchestrator
from geoquery.overlay import OverlayState

BASE_URL = "http://backend.test/api"

INVALID_JSON = object()


class RecordingSurface:
    """Stands in for the map widget and keeps every live layer by handle."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self.layers: Dict[int, Tuple[str, Any]] = {}
        self.removed: List[int] = []
        self.fits: List[Tuple[Any, Any]] = []
        self.resets = 0

    def add_marker(self, point, color, tooltip=None) -> int:
        handle = next(self._ids)
        self.layers[handle] = ("marker", (point, color, tooltip))
        return handle

    def remove_layer(self, handle) -> None:
        self.removed.append(handle)
        self.layers.pop(handle, None)

    def draw_circle(self, center, radius_m, style=None) -> int:
        handle = next(self._ids)
        self.layers[handle] = ("circle", (center, radius_m))
        return handle

    def draw_polygon(self, vertices, style=None) -> int:
        handle = next(self._ids)
        self.layers[handle] = ("polygon", tuple(vertices))
        return handle

    def fit_bounds(self, bounds, padding=(50, 50)) -> None:
        self.fits.append((bounds, padding))

    def reset_view(self) -> None:
        self.resets += 1

    def kinds(self) -> List[str]:
        return [kind for kind, _ in self.layers.values()]


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.text = text

    def json(self) -> Any:
        if self._payload is INVALID_JSON:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    """Routes POSTs by path to a handler returning a FakeResponse (or raising)."""

    def __init__(self) -> None:
        self.routes: Dict[str, Callable[[Dict[str, Any]], FakeResponse]] = {}
        self.calls: List[Tuple[str, Dict[str, Any], Optional[float]]] = []

    def reply(self, path: str, status_code: int = 200, payload: Any = None) -> None:
        self.routes[path] = lambda body: FakeResponse(status_code, payload)

    def fail(self, path: str, exc: Exception) -> None:
        def _raise(body):
            raise exc

        self.routes[path] = _raise

    def post(self, url: str, json=None, headers=None, timeout=None) -> FakeResponse:
        path = url[len(BASE_URL):]
        self.calls.append((path, json, timeout))
        handler = self.routes.get(path)
        if handler is None:
            return FakeResponse(404, text="Not Found")
        return handler(json)

    def paths(self) -> List[str]:
        return [path for path, _, _ in self.calls]


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def session():
    return FakeSession()


@pytest.fixture
def client(session):
    return SpatialIndexClient(BASE_URL, timeout=5.0, session=session)


@pytest.fixture
def overlay(surface):
    return OverlayState(surface)


@pytest.fixture
def notices():
    return []


@pytest.fixture
def console(client, overlay, notices):
    return QueryOrchestrator(client, overlay, notify=notices.append)


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
